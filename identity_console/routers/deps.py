# routers/deps.py

"""
Shared service instances for the routers
"""

from identity_console.core.config import settings
from identity_console.services import AccountStore, IdentityClient, JobStore, JobService

account_store = AccountStore(settings.accounts_file)
identity_client = IdentityClient()
job_store = JobStore()
job_service = JobService(job_store, identity_client, account_store)


def get_account_store() -> AccountStore:
    return account_store


def get_identity_client() -> IdentityClient:
    return identity_client


def get_job_service() -> JobService:
    return job_service
