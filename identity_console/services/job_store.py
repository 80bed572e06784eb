# services/job_store.py

"""
Job store - one import job record per account
"""

import logging
import threading
from typing import Callable, Dict, List

from identity_console.models.job import JobRecord

logger = logging.getLogger(__name__)

JobListener = Callable[[str, JobRecord], None]


class JobStore:
    """Keyed collection of JobRecords.

    Records are created lazily with default values. `get` always hands out a
    deep copy, and `merge` applies every field of one update under the
    account's lock, so readers never see half of a step. Listeners are called
    with the new snapshot after each write, in write order.
    """

    def __init__(self):
        self._records: Dict[str, JobRecord] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._listeners: List[JobListener] = []

    def _lock_for(self, account_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = self._locks[account_id] = threading.Lock()
                self._records[account_id] = JobRecord()
            return lock

    def get(self, account_id: str) -> JobRecord:
        with self._lock_for(account_id):
            return self._records[account_id].model_copy(deep=True)

    def merge(self, account_id: str, **fields) -> JobRecord:
        """Replace only the supplied fields and return the new snapshot"""
        with self._lock_for(account_id):
            current = self._records[account_id]
            updated = current.model_copy(update=fields, deep=True)
            self._records[account_id] = updated
            snapshot = updated.model_copy(deep=True)

        self._notify(account_id, snapshot)
        return snapshot

    def reset(self, account_id: str) -> JobRecord:
        with self._lock_for(account_id):
            self._records[account_id] = JobRecord()
            snapshot = self._records[account_id].model_copy(deep=True)

        self._notify(account_id, snapshot)
        return snapshot

    def discard(self, account_id: str) -> None:
        """Forget an account's record entirely (account removed)"""
        with self._registry_lock:
            self._records.pop(account_id, None)
            self._locks.pop(account_id, None)

    def account_ids(self) -> List[str]:
        with self._registry_lock:
            return list(self._records)

    def subscribe(self, listener: JobListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it"""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, account_id: str, snapshot: JobRecord) -> None:
        for listener in list(self._listeners):
            try:
                listener(account_id, snapshot)
            except Exception as e:
                logger.error(f"Job listener failed for account {account_id}: {e}", exc_info=True)
