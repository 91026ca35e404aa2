"""
Identity Toolkit Adapter

Secondary identity store reached over the Identity Toolkit REST API
(accounts:update / accounts:lookup). Password and role live on the remote
account; the role is kept in the account's custom attributes.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from src.app.services.identity_store import (
    IIdentityStore,
    IdentityStoreNotFoundError,
    IdentityStoreRejectedError,
    IdentityStoreUnavailableError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGES = ("USER_NOT_FOUND", "EMAIL_NOT_FOUND")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message", ""))
    return str(error or "")


class IdentityToolkitClient(IIdentityStore):
    """httpx implementation of IIdentityStore"""

    def __init__(
        self,
        base_url: str,
        project_id: str,
        access_token: str,
        timeout_seconds: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.project_id = project_id
        self.access_token = access_token
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _url(self, action: str) -> str:
        return f"{self.base_url}/v1/projects/{self.project_id}/accounts:{action}"

    async def _post(self, action: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.access_token}"}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(self._url(action), json=payload, headers=headers)
        except httpx.TransportError as exc:
            # Covers timeouts, connection and protocol errors
            raise IdentityStoreUnavailableError(f"{action}: {type(exc).__name__}") from exc

        if response.status_code == 429 or response.status_code >= 500:
            raise IdentityStoreUnavailableError(f"{action}: HTTP {response.status_code}")

        if response.status_code >= 400:
            message = _error_message(response)
            if response.status_code == 404 or message.startswith(NOT_FOUND_MESSAGES):
                raise IdentityStoreNotFoundError(f"{action}: {message or 'not found'}")
            raise IdentityStoreRejectedError(f"{action}: {message or response.status_code}")

        if not response.content:
            return {}
        return response.json()

    async def _lookup(self, secondary_id: str) -> Dict[str, Any]:
        body = await self._post("lookup", {"localId": [secondary_id]})
        users = body.get("users") or []
        if not users:
            raise IdentityStoreNotFoundError(f"lookup: no account {secondary_id}")
        return users[0]

    @staticmethod
    def _claims(account: Dict[str, Any]) -> Dict[str, Any]:
        raw = account.get("customAttributes")
        if not raw:
            return {}
        try:
            claims = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unparseable custom attributes on secondary account")
            return {}
        return claims if isinstance(claims, dict) else {}

    async def update_password(self, secondary_id: str, plaintext: str) -> None:
        await self._post("update", {"localId": secondary_id, "password": plaintext})

    async def update_role(self, secondary_id: str, role: str) -> None:
        # customAttributes replaces every claim, so merge with what is there
        claims = self._claims(await self._lookup(secondary_id))
        claims["role"] = role
        await self._post(
            "update", {"localId": secondary_id, "customAttributes": json.dumps(claims)}
        )

    async def get_role(self, secondary_id: str) -> Optional[str]:
        return self._claims(await self._lookup(secondary_id)).get("role")


class DisabledIdentityStore(IIdentityStore):
    """Used when no secondary store is configured; every sync reports partial"""

    async def update_password(self, secondary_id: str, plaintext: str) -> None:
        raise IdentityStoreUnavailableError("Secondary identity store is not configured")

    async def update_role(self, secondary_id: str, role: str) -> None:
        raise IdentityStoreUnavailableError("Secondary identity store is not configured")

    async def get_role(self, secondary_id: str) -> Optional[str]:
        raise IdentityStoreUnavailableError("Secondary identity store is not configured")
