# services/identity_client.py

"""
Identity provider REST client - one bearer credential per call
"""

import logging
from typing import Any, Dict, Optional

import httpx

from identity_console.core.config import settings
from identity_console.core.exceptions import IdentityAPIError
from identity_console.models.job import OperationResult, OperationStatus
from identity_console.models.user import UserRecord

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "An API error occurred."
CONNECTION_ERROR_MESSAGE = "Failed to connect to the identity API."


def flatten_error(data: Any, default: str = DEFAULT_ERROR_MESSAGE) -> str:
    """Reduce a provider `errors` array to its first readable message"""
    if not isinstance(data, dict):
        return default
    errors = data.get("errors") or []
    if not errors or not isinstance(errors[0], dict):
        return data.get("message") or default
    first = errors[0]
    return first.get("long_message") or first.get("message") or default


class IdentityClient:
    """Async client for the identity provider's backend API.

    `submit` is used by the import job loop and never raises for remote or
    transport failures; every other method is a pass-through used by the
    proxy routes and raises IdentityAPIError instead.
    """

    def __init__(
            self,
            base_url: Optional[str] = None,
            timeout: Optional[float] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.identity_api_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or settings.request_timeout_seconds),
            transport=transport
        )
        logger.info(f"IdentityClient initialized for {self.base_url}")

    async def close(self) -> None:
        await self._client.aclose()

    def _headers(self, credential: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json() if response.content else {}
        except ValueError:
            return None

    async def submit(self, record: UserRecord, credential: str, send_invites: bool) -> OperationResult:
        """Invite or create one user and normalize the outcome"""
        if send_invites:
            endpoint = "/invitations"
            payload = {
                "email_address": record.email,
                "public_metadata": {
                    "first_name": record.first_name or "",
                    "last_name": record.last_name or ""
                },
                "ignore_existing": True
            }
        else:
            endpoint = "/users"
            payload = {
                "email_address": [record.email],
                "first_name": record.first_name,
                "last_name": record.last_name,
                "password": record.password,
                "skip_password_checks": False
            }

        try:
            response = await self._client.post(endpoint, json=payload, headers=self._headers(credential))
        except httpx.HTTPError as e:
            logger.warning(f"Transport error submitting {record.email}: {e}")
            return OperationResult(
                email=record.email,
                status=OperationStatus.ERROR,
                message=CONNECTION_ERROR_MESSAGE
            )

        data = self._json(response)

        if response.is_success:
            user_id = None
            if isinstance(data, dict):
                user_id = data.get("id") or (data.get("user") or {}).get("id")
            return OperationResult(
                email=record.email,
                status=OperationStatus.SUCCESS,
                message="Invitation sent" if send_invites else "User created",
                user_id=user_id
            )

        message = flatten_error(data)
        logger.warning(f"Identity API rejected {record.email} ({response.status_code}): {message}")
        return OperationResult(email=record.email, status=OperationStatus.ERROR, message=message)

    async def _request(self, method: str, path: str, credential: str, **kwargs) -> Any:
        """Pass-through request; returns the provider JSON or raises"""
        try:
            response = await self._client.request(method, path, headers=self._headers(credential), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Identity API {method} {path} unreachable: {e}")
            raise IdentityAPIError(502, CONNECTION_ERROR_MESSAGE) from e

        data = self._json(response)
        if data is None:
            raise IdentityAPIError(
                response.status_code,
                "Identity API did not return valid JSON, which likely means the secret key is invalid.",
                {"raw_status": response.status_code, "raw_body": response.text[:500]}
            )

        if not response.is_success:
            logger.warning(f"Identity API {method} {path} failed with {response.status_code}")
            raise IdentityAPIError(response.status_code, flatten_error(data), data if isinstance(data, dict) else None)

        return data

    async def test_connection(self, credential: str) -> Any:
        return await self._request("GET", "/users", credential, params={"limit": 1, "get_total_count": "true"})

    async def list_users(self, credential: str, limit: int = 500) -> Any:
        return await self._request("GET", "/users", credential, params={"limit": limit})

    async def delete_user(self, credential: str, user_id: str) -> Any:
        return await self._request("DELETE", f"/users/{user_id}", credential)

    async def list_templates(self, credential: str, template_type: str) -> Any:
        return await self._request("GET", f"/templates/{template_type}", credential)

    async def get_template(self, credential: str, template_type: str, slug: str) -> Any:
        return await self._request("GET", f"/templates/{template_type}/{slug}", credential)

    async def update_template(self, credential: str, template_type: str, slug: str, payload: Dict[str, Any]) -> Any:
        body = dict(payload)
        if body.get("body"):
            body["markup"] = body["body"]
        return await self._request("PUT", f"/templates/{template_type}/{slug}", credential, json=body)

    async def revert_template(self, credential: str, template_type: str, slug: str) -> Any:
        return await self._request("POST", f"/templates/{template_type}/{slug}/revert", credential)
