# services/job_service.py

"""
Job service - runs, pauses, resumes and stops per-account bulk import jobs
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from identity_console.core.config import settings
from identity_console.core.exceptions import JobStateError, JobValidationError
from identity_console.models.job import JobRecord, JobState, OperationResult, PendingInput
from identity_console.models.user import UserRecord
from identity_console.services.identity_client import IdentityClient
from identity_console.services.job_store import JobStore
from identity_console.utils.parsing import (
    fill_missing_passwords,
    format_user_records,
    parse_user_records,
    records_from_dicts
)

logger = logging.getLogger(__name__)


class CredentialSource(Protocol):
    def get_credential(self, account_id: str) -> str: ...


@dataclass
class _RunHandle:
    """Runtime state of one account's active run, owned by JobService.

    `resumed` is set whenever the job is not paused; stop sets it too so a
    paused loop wakes up and finalizes.
    """

    records: List[UserRecord]
    credential: str
    send_invites: bool
    delay_in_seconds: int
    results: List[OperationResult] = field(default_factory=list)
    success_count: int = 0
    fail_count: int = 0
    stop_requested: bool = False
    resumed: asyncio.Event = field(default_factory=asyncio.Event)
    ticker: Optional[asyncio.Task] = None
    task: Optional[asyncio.Task] = None


class JobService:
    def __init__(
            self,
            store: JobStore,
            client: IdentityClient,
            credentials: CredentialSource,
            tick_seconds: Optional[float] = None,
            stop_cancels_countdown: Optional[bool] = None
    ):
        self.store = store
        self.client = client
        self.credentials = credentials
        self.tick_seconds = settings.tick_interval_seconds if tick_seconds is None else tick_seconds
        self.stop_cancels_countdown = (
            settings.stop_cancels_countdown if stop_cancels_countdown is None else stop_cancels_countdown
        )
        self._handles: Dict[str, _RunHandle] = {}

    def get_snapshot(self, account_id: str) -> JobRecord:
        return self.store.get(account_id)

    def is_active(self, account_id: str) -> bool:
        return account_id in self._handles or self.store.get(account_id).is_active

    def active_jobs_count(self) -> int:
        return len(self._handles)

    # ----- lifecycle -----

    async def start(
            self,
            account_id: str,
            user_data: Optional[str] = None,
            users: Optional[List[Dict[str, Any]]] = None,
            send_invites: Optional[bool] = None,
            delay_in_seconds: Optional[int] = None
    ) -> JobRecord:
        """Validate input and launch the run loop in the background.

        Omitted settings fall back to the account's stored pending input.
        Nothing is written to the store when validation fails.
        """
        current = self.store.get(account_id)
        if self.is_active(account_id):
            raise JobStateError(account_id, "start", current.status.value)

        pending = self._merged_input(current.pending_input, user_data, send_invites, delay_in_seconds)

        if users is not None:
            records = records_from_dicts(users)
            pending = pending.model_copy(update={"user_data": format_user_records(records)})
        else:
            records = parse_user_records(pending.user_data)

        if not records:
            raise JobValidationError("No valid user data found")
        if not pending.send_invites and any(not r.password for r in records):
            raise JobValidationError("Please generate passwords before importing.")

        credential = self.credentials.get_credential(account_id)

        handle = _RunHandle(
            records=records,
            credential=credential,
            send_invites=pending.send_invites,
            delay_in_seconds=pending.delay_in_seconds
        )
        handle.resumed.set()
        self._handles[account_id] = handle

        snapshot = self.store.merge(
            account_id,
            pending_input=pending,
            status=JobState.RUNNING,
            results=[],
            progress=0.0,
            success_count=0,
            fail_count=0,
            elapsed_seconds=0,
            countdown=0,
            next_pending_email=None,
            show_stats=True,
            stop_requested=False
        )
        logger.info(
            f"Import job started for account {account_id}: {len(records)} users, "
            f"send_invites={pending.send_invites}, delay={pending.delay_in_seconds}s"
        )

        self._start_ticker(account_id, handle)
        handle.task = asyncio.create_task(self._run(account_id, handle), name=f"import-job-{account_id}")
        return snapshot

    async def pause(self, account_id: str) -> JobRecord:
        handle = self._handles.get(account_id)
        current = self.store.get(account_id)
        if handle is None or handle.stop_requested or current.status != JobState.RUNNING:
            raise JobStateError(account_id, "pause", current.status.value)

        handle.resumed.clear()
        self._stop_ticker(handle)
        logger.info(f"Import job paused for account {account_id}")
        return self.store.merge(account_id, status=JobState.PAUSED)

    async def resume(self, account_id: str) -> JobRecord:
        handle = self._handles.get(account_id)
        current = self.store.get(account_id)
        if handle is None or handle.stop_requested or current.status != JobState.PAUSED:
            raise JobStateError(account_id, "resume", current.status.value)

        snapshot = self.store.merge(account_id, status=JobState.RUNNING)
        self._start_ticker(account_id, handle)
        handle.resumed.set()
        logger.info(f"Import job resumed for account {account_id}")
        return snapshot

    async def stop(self, account_id: str) -> JobRecord:
        """Request a cooperative stop; the loop finalizes to STOPPED"""
        handle = self._handles.get(account_id)
        current = self.store.get(account_id)
        if handle is None or not current.is_active:
            raise JobStateError(account_id, "stop", current.status.value)

        if not handle.stop_requested:
            handle.stop_requested = True
            self._stop_ticker(handle)
            handle.resumed.set()
            logger.info(f"Stop requested for import job of account {account_id}")
            return self.store.merge(account_id, stop_requested=True)
        return current

    async def clear(self, account_id: str) -> JobRecord:
        current = self.store.get(account_id)
        if self.is_active(account_id):
            raise JobStateError(account_id, "clear", current.status.value)

        logger.info(f"Import job cleared for account {account_id}")
        return self.store.reset(account_id)

    async def update_settings(
            self,
            account_id: str,
            user_data: Optional[str] = None,
            send_invites: Optional[bool] = None,
            delay_in_seconds: Optional[int] = None
    ) -> JobRecord:
        """Merge configuration fields; a running loop keeps the settings it started with"""
        current = self.store.get(account_id)
        pending = self._merged_input(current.pending_input, user_data, send_invites, delay_in_seconds)
        return self.store.merge(account_id, pending_input=pending)

    async def generate_passwords(self, account_id: str, length: Optional[int] = None) -> JobRecord:
        current = self.store.get(account_id)
        if self.is_active(account_id):
            raise JobStateError(account_id, "generate passwords for", current.status.value)
        if current.pending_input.send_invites:
            raise JobValidationError("Password generation is disabled when sending invitations.")
        if not current.pending_input.user_data.strip():
            raise JobValidationError("Please paste user data before generating passwords.")

        text = fill_missing_passwords(
            current.pending_input.user_data,
            length or settings.generated_password_length
        )
        pending = current.pending_input.model_copy(update={"user_data": text})
        return self.store.merge(account_id, pending_input=pending)

    async def discard(self, account_id: str) -> None:
        """Drop the job record of a removed account"""
        current = self.store.get(account_id)
        if self.is_active(account_id):
            raise JobStateError(account_id, "discard", current.status.value)
        self.store.discard(account_id)

    async def wait(self, account_id: str) -> JobRecord:
        """Wait for the account's current run (if any) to finish"""
        handle = self._handles.get(account_id)
        if handle is not None and handle.task is not None:
            await asyncio.shield(handle.task)
        return self.store.get(account_id)

    async def shutdown(self) -> None:
        """Stop every active job and wait for the loops to finalize"""
        for account_id in list(self._handles):
            handle = self._handles.get(account_id)
            if handle is not None and not handle.stop_requested:
                await self.stop(account_id)
        tasks = [h.task for h in self._handles.values() if h.task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ----- run loop -----

    @staticmethod
    def _merged_input(
            pending: PendingInput,
            user_data: Optional[str],
            send_invites: Optional[bool],
            delay_in_seconds: Optional[int]
    ) -> PendingInput:
        if delay_in_seconds is not None and delay_in_seconds < 0:
            raise JobValidationError("Delay must be zero or more seconds")

        update = {}
        if user_data is not None:
            update["user_data"] = user_data
        if send_invites is not None:
            update["send_invites"] = send_invites
        if delay_in_seconds is not None:
            update["delay_in_seconds"] = delay_in_seconds
        return pending.model_copy(update=update)

    async def _run(self, account_id: str, handle: _RunHandle) -> None:
        total = len(handle.records)
        failed = False

        try:
            for index, record in enumerate(handle.records):
                if handle.stop_requested:
                    break

                while not handle.resumed.is_set() and not handle.stop_requested:
                    await handle.resumed.wait()

                if handle.stop_requested:
                    break

                if index > 0 and handle.delay_in_seconds > 0:
                    await self._countdown(account_id, handle, record.email)
                    if self.stop_cancels_countdown and handle.stop_requested:
                        break

                result = await self.client.submit(record, handle.credential, handle.send_invites)
                self._record_result(account_id, handle, result, index, total)

        except asyncio.CancelledError:
            failed = True
            raise
        except Exception as e:
            failed = True
            logger.error(f"Import job for account {account_id} aborted: {e}", exc_info=True)
        finally:
            self._stop_ticker(handle)
            final = JobState.STOPPED if handle.stop_requested or failed else JobState.COMPLETED
            self.store.merge(
                account_id,
                status=final,
                countdown=0,
                next_pending_email=None,
                stop_requested=False
            )
            if self._handles.get(account_id) is handle:
                del self._handles[account_id]

            logger.info(
                f"Import job for account {account_id} {final.value}: "
                f"{handle.success_count}/{len(handle.results)} succeeded"
            )

    async def _countdown(self, account_id: str, handle: _RunHandle, email: str) -> None:
        remaining = handle.delay_in_seconds
        self.store.merge(account_id, next_pending_email=email, countdown=remaining)

        while remaining > 0:
            await asyncio.sleep(self.tick_seconds)
            remaining -= 1
            self.store.merge(account_id, countdown=remaining)
            if self.stop_cancels_countdown and handle.stop_requested:
                break

        self.store.merge(account_id, next_pending_email=None, countdown=0)

    def _record_result(
            self,
            account_id: str,
            handle: _RunHandle,
            result: OperationResult,
            index: int,
            total: int
    ) -> None:
        handle.results.append(result)
        if result.ok:
            handle.success_count += 1
        else:
            handle.fail_count += 1

        self.store.merge(
            account_id,
            results=list(handle.results),
            success_count=handle.success_count,
            fail_count=handle.fail_count,
            progress=(index + 1) / total * 100
        )
        logger.info(f"[{account_id}] {index + 1}/{total} {result.email}: {result.status.value} - {result.message}")

    # ----- elapsed-time ticker -----

    def _start_ticker(self, account_id: str, handle: _RunHandle) -> None:
        if handle.ticker is not None and not handle.ticker.done():
            return
        handle.ticker = asyncio.create_task(self._tick(account_id), name=f"import-ticker-{account_id}")

    @staticmethod
    def _stop_ticker(handle: _RunHandle) -> None:
        if handle.ticker is not None:
            handle.ticker.cancel()
            handle.ticker = None

    async def _tick(self, account_id: str) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            current = self.store.get(account_id)
            self.store.merge(account_id, elapsed_seconds=current.elapsed_seconds + 1)
