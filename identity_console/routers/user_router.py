# routers/user_router.py

"""
User API Routes - single import, listing and deletion
"""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from identity_console.core.config import settings
from identity_console.models.job import OperationResult
from identity_console.models.user import ImportUserRequest
from identity_console.routers.deps import get_account_store, get_identity_client
from identity_console.services.account_store import AccountStore
from identity_console.services.identity_client import IdentityClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.api_prefix, tags=["Users"])


@router.post("/import-user", response_model=OperationResult)
async def import_user(
        request: ImportUserRequest,
        store: AccountStore = Depends(get_account_store),
        client: IdentityClient = Depends(get_identity_client)
):
    """Invite or create a single user"""
    logger.info(f"POST /api/import-user - {request.user.email} into {request.account_id}")
    if not request.send_invites and not request.user.password:
        return JSONResponse(
            status_code=400,
            content={
                "email": request.user.email,
                "status": "error",
                "message": "A password is required when not sending an invitation."
            }
        )

    credential = store.get_credential(request.account_id)
    result = await client.submit(request.user, credential, request.send_invites)
    if not result.ok:
        return JSONResponse(status_code=400, content=result.model_dump(mode="json"))
    return result


@router.get("/users/{account_id}")
async def list_users(
        account_id: str,
        store: AccountStore = Depends(get_account_store),
        client: IdentityClient = Depends(get_identity_client)
):
    credential = store.get_credential(account_id)
    return await client.list_users(credential)


@router.delete("/users/{account_id}/{user_id}")
async def delete_user(
        account_id: str,
        user_id: str,
        store: AccountStore = Depends(get_account_store),
        client: IdentityClient = Depends(get_identity_client)
):
    logger.info(f"DELETE /api/users/{account_id}/{user_id}")
    credential = store.get_credential(account_id)
    data = await client.delete_user(credential, user_id)
    return {
        "status": "success",
        "message": f"User {data.get('id', user_id) if isinstance(data, dict) else user_id} deleted.",
        "deleted_user": data
    }
