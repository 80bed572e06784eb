# services/account_store.py

"""
Account store - file-backed list of identity platform credentials
"""

import logging
import threading
import uuid
from typing import List

from identity_console.core.exceptions import AccountNotFoundError
from identity_console.models.account import Account, AccountPublic
from identity_console.utils.file_handler import read_json_list, write_json

logger = logging.getLogger(__name__)


class AccountStore:
    def __init__(self, filepath: str):
        self.filepath = filepath
        self._lock = threading.Lock()
        logger.info(f"AccountStore using {filepath}")

    def _read(self) -> List[Account]:
        accounts = []
        for raw in read_json_list(self.filepath):
            try:
                accounts.append(Account(**raw))
            except (TypeError, ValueError) as e:
                logger.error(f"Skipping malformed account entry in {self.filepath}: {e}")
        return accounts

    def _write(self, accounts: List[Account]) -> None:
        write_json(self.filepath, [a.model_dump() for a in accounts])

    def list_accounts(self) -> List[AccountPublic]:
        """Stored accounts without their secret keys"""
        with self._lock:
            return [a.public() for a in self._read()]

    def add_account(self, name: str, api_key: str, secret_key: str) -> AccountPublic:
        with self._lock:
            accounts = self._read()
            account = Account(
                id=str(uuid.uuid4()),
                name=name,
                api_key=api_key,
                secret_key=secret_key,
                is_active=len(accounts) == 0
            )
            accounts.append(account)
            self._write(accounts)

        logger.info(f"Added account '{name}' ({account.id}), active={account.is_active}")
        return account.public()

    def get_account(self, account_id: str) -> AccountPublic:
        with self._lock:
            for account in self._read():
                if account.id == account_id:
                    return account.public()
        raise AccountNotFoundError(account_id)

    def delete_account(self, account_id: str) -> None:
        with self._lock:
            accounts = self._read()
            removed = next((a for a in accounts if a.id == account_id), None)
            if removed is None:
                raise AccountNotFoundError(account_id)

            remaining = [a for a in accounts if a.id != account_id]
            if removed.is_active and remaining:
                remaining[0] = remaining[0].model_copy(update={"is_active": True})
            self._write(remaining)

        logger.info(f"Deleted account {account_id}")

    def set_active(self, account_id: str) -> None:
        with self._lock:
            accounts = self._read()
            if not any(a.id == account_id for a in accounts):
                raise AccountNotFoundError(account_id)
            self._write([
                a.model_copy(update={"is_active": a.id == account_id})
                for a in accounts
            ])

        logger.info(f"Active account set to {account_id}")

    def get_credential(self, account_id: str) -> str:
        with self._lock:
            for account in self._read():
                if account.id == account_id:
                    return account.secret_key
        raise AccountNotFoundError(account_id)
