# core/exceptions.py

"""
Console exceptions, mapped to HTTP status codes by the routers
"""

from typing import Optional


class ConsoleError(Exception):
    """Base exception for all console operations."""


class AccountNotFoundError(ConsoleError):
    """No stored credentials for the given account id."""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class JobValidationError(ConsoleError):
    """Import job input was rejected before any state change."""


class JobStateError(ConsoleError):
    """Operation is not valid for the job's current status."""

    def __init__(self, account_id: str, operation: str, status: str):
        self.account_id = account_id
        self.operation = operation
        self.status = status
        super().__init__(f"Cannot {operation} job for account {account_id} while {status}")


class IdentityAPIError(ConsoleError):
    """HTTP or transport error from the identity provider API.

    Attributes:
        status_code: upstream HTTP status (502 when the provider was unreachable)
        message: flattened provider error message
        payload: raw provider response body, when it was JSON
    """

    def __init__(self, status_code: int, message: str, payload: Optional[dict] = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}
        super().__init__(f"[{status_code}] {message}")
