# services/reporting.py

"""
Read-only views over job records for progress display and export
"""

from typing import List

from identity_console.models.job import (
    JobRecord,
    JobSnapshot,
    OperationResult,
    OperationStatus,
    ResultFilter
)
from identity_console.utils.file_handler import export_results_csv
from identity_console.utils.parsing import count_input_lines


def total_count(record: JobRecord) -> int:
    return count_input_lines(record.pending_input.user_data)


def filter_results(record: JobRecord, result_filter: ResultFilter = ResultFilter.ALL) -> List[OperationResult]:
    if result_filter == ResultFilter.ALL:
        return list(record.results)
    wanted = OperationStatus(result_filter.value)
    return [r for r in record.results if r.status == wanted]


def progress_line(record: JobRecord) -> str:
    if record.countdown > 0 and record.next_pending_email:
        return f"{record.countdown}s until next: {record.next_pending_email}"
    return f"{round(record.progress)}%"


def build_snapshot(account_id: str, record: JobRecord) -> JobSnapshot:
    return JobSnapshot(
        account_id=account_id,
        total_count=total_count(record),
        progress_line=progress_line(record),
        **record.model_dump()
    )


def export_results(record: JobRecord, result_filter: ResultFilter = ResultFilter.ALL) -> str:
    return export_results_csv(filter_results(record, result_filter))
