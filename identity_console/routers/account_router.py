# routers/account_router.py

"""
Account (credential) API Routes
"""

import logging
from fastapi import APIRouter, Depends
from typing import List

from identity_console.core.config import settings
from identity_console.models.account import AccountIdRequest, AccountPublic, NewAccountRequest
from identity_console.routers.deps import get_account_store, get_identity_client, get_job_service
from identity_console.services.account_store import AccountStore
from identity_console.services.identity_client import IdentityClient
from identity_console.services.job_service import JobService

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/accounts", tags=["Accounts"])


@router.get("", response_model=List[AccountPublic])
async def list_accounts(store: AccountStore = Depends(get_account_store)):
    """All stored accounts, secret keys omitted"""
    return store.list_accounts()


@router.post("", response_model=AccountPublic, status_code=201)
async def add_account(request: NewAccountRequest, store: AccountStore = Depends(get_account_store)):
    logger.info(f"POST /api/accounts - adding '{request.name}'")
    return store.add_account(request.name, request.api_key, request.secret_key)


@router.delete("/{account_id}")
async def delete_account(
        account_id: str,
        store: AccountStore = Depends(get_account_store),
        jobs: JobService = Depends(get_job_service)
):
    """Remove an account together with its import job record"""
    logger.info(f"DELETE /api/accounts/{account_id}")
    store.get_account(account_id)
    await jobs.discard(account_id)
    store.delete_account(account_id)
    return {"message": "Account deleted successfully"}


@router.post("/set-active")
async def set_active_account(request: AccountIdRequest, store: AccountStore = Depends(get_account_store)):
    store.set_active(request.id)
    return {"message": "Active account updated"}


@router.post("/test-connection-by-id")
async def test_connection(
        request: AccountIdRequest,
        store: AccountStore = Depends(get_account_store),
        client: IdentityClient = Depends(get_identity_client)
):
    """Check that the stored secret key is accepted by the identity API"""
    logger.info(f"POST /api/accounts/test-connection-by-id - {request.id}")
    credential = store.get_credential(request.id)
    return await client.test_connection(credential)
