# utils/file_handler.py

"""
File handling utilities
"""

import csv
import io
import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, List

from identity_console.models.job import OperationResult

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["email", "status", "message", "external_id"]


def read_json_list(filepath: str) -> List[Any]:
    """Read a JSON array; a missing, empty or corrupt file reads as []"""
    path = Path(filepath)
    if not path.exists():
        return []

    with open(path, 'r', encoding='utf-8') as f:
        data = f.read()

    if not data.strip():
        return []

    try:
        parsed = json.loads(data)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing {filepath}: {e}")
        return []

    if not isinstance(parsed, list):
        logger.error(f"Expected a JSON array in {filepath}, got {type(parsed).__name__}")
        return []
    return parsed


def write_json(filepath: str, data: Any) -> str:
    """Write JSON atomically via a temp file in the same directory"""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")

    with open(tmp_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    os.replace(tmp_path, path)
    return str(path)


def export_results_csv(results: Iterable[OperationResult]) -> str:
    """Render results as CSV: email,status,message,external_id"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for result in results:
        writer.writerow([result.email, result.status.value, result.message, result.user_id or ""])
    return buffer.getvalue()
