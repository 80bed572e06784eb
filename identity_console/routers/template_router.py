# routers/template_router.py

"""
Email Template API Routes - pass-through to the identity provider
"""

import logging
from fastapi import APIRouter, Body, Depends
from typing import Any, Dict

from identity_console.core.config import settings
from identity_console.routers.deps import get_account_store, get_identity_client
from identity_console.services.account_store import AccountStore
from identity_console.services.identity_client import IdentityClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/templates", tags=["Templates"])


@router.get("/{account_id}/{template_type}")
async def list_templates(
        account_id: str,
        template_type: str,
        store: AccountStore = Depends(get_account_store),
        client: IdentityClient = Depends(get_identity_client)
):
    return await client.list_templates(store.get_credential(account_id), template_type)


@router.get("/{account_id}/{template_type}/{slug}")
async def get_template(
        account_id: str,
        template_type: str,
        slug: str,
        store: AccountStore = Depends(get_account_store),
        client: IdentityClient = Depends(get_identity_client)
):
    return await client.get_template(store.get_credential(account_id), template_type, slug)


@router.put("/{account_id}/{template_type}/{slug}")
async def update_template(
        account_id: str,
        template_type: str,
        slug: str,
        payload: Dict[str, Any] = Body(...),
        store: AccountStore = Depends(get_account_store),
        client: IdentityClient = Depends(get_identity_client)
):
    logger.info(f"PUT /api/templates/{account_id}/{template_type}/{slug}")
    return await client.update_template(store.get_credential(account_id), template_type, slug, payload)


@router.post("/{account_id}/{template_type}/{slug}/revert")
async def revert_template(
        account_id: str,
        template_type: str,
        slug: str,
        store: AccountStore = Depends(get_account_store),
        client: IdentityClient = Depends(get_identity_client)
):
    logger.info(f"POST /api/templates/{account_id}/{template_type}/{slug}/revert")
    return await client.revert_template(store.get_credential(account_id), template_type, slug)
