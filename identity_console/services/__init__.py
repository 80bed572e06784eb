# services/__init__.py

from .account_store import AccountStore
from .identity_client import IdentityClient
from .job_store import JobStore
from .job_service import JobService

__all__ = ['AccountStore', 'IdentityClient', 'JobStore', 'JobService']
