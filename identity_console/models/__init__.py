# models/__init__.py

from .job import (
    JobState,
    JobRecord,
    JobSnapshot,
    OperationResult,
    OperationStatus,
    PendingInput,
    ResultFilter,
    SettingsUpdate,
    StartJobRequest
)
from .user import UserRecord, ImportUserRequest
from .account import Account, AccountPublic, NewAccountRequest, AccountIdRequest

__all__ = [
    'JobState',
    'JobRecord',
    'JobSnapshot',
    'OperationResult',
    'OperationStatus',
    'PendingInput',
    'ResultFilter',
    'SettingsUpdate',
    'StartJobRequest',
    'UserRecord',
    'ImportUserRequest',
    'Account',
    'AccountPublic',
    'NewAccountRequest',
    'AccountIdRequest'
]
