"""
HTTP client for the Org Todo action endpoints.

Every call returns the server's ``ActionResult`` envelope. Transport failures
and non-envelope responses raise ``ClientError`` so callers can tell "the
server said no" apart from "the server could not be reached".
"""

from __future__ import annotations

import uuid
from typing import Any

import httpx
import structlog

from orgtodo_shared.schemas.common import ActionResult
from orgtodo_shared.schemas.invitations import InvitableRole
from orgtodo_shared.schemas.onboarding import OnboardingRequest

log = structlog.get_logger()


class ClientError(Exception):
    """The server could not be reached or answered outside the envelope."""


class OrgTodoClient:
    """Thin async wrapper over the v1 action endpoints."""

    def __init__(
        self,
        base_url: str,
        token: str | None,
        verify_tls: bool = True,
        request_timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._verify_tls = verify_tls
        self._request_timeout = request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def open(self) -> None:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/api/v1",
            headers=headers,
            timeout=httpx.Timeout(self._request_timeout),
            verify=self._verify_tls,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "OrgTodoClient":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _call(self, method: str, path: str, **kwargs: Any) -> ActionResult:
        assert self._client, "client is not open"
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
            return ActionResult.model_validate(resp.json())
        except httpx.HTTPStatusError as exc:
            log.warning("client.http_error", path=path, status=exc.response.status_code)
            raise ClientError(f"{method} {path} returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            log.warning("client.transport_error", path=path, error=str(exc))
            raise ClientError(f"{method} {path} failed: {exc}") from exc
        except ValueError as exc:
            raise ClientError(f"{method} {path} returned an unexpected body") from exc

    # --- Onboarding ---

    async def check_onboarding_status(self) -> ActionResult:
        return await self._call("GET", "/onboarding/status")

    async def create_user_organization(
        self,
        organization_name: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> ActionResult:
        body = OnboardingRequest(
            organization_name=organization_name,
            first_name=first_name,
            last_name=last_name,
        )
        return await self._call("POST", "/onboarding", json=body.model_dump(mode="json"))

    # --- Invitations ---

    async def invite_user(
        self,
        email: str,
        organization_id: uuid.UUID | str,
        role: InvitableRole,
    ) -> ActionResult:
        return await self._call(
            "POST",
            "/invitations",
            json={"email": email, "organization_id": str(organization_id), "role": role.value},
        )

    async def accept_invitation(self, token: str) -> ActionResult:
        return await self._call("POST", "/invitations/accept", json={"token": token})

    # --- Misc ---

    async def get_me(self) -> ActionResult:
        return await self._call("GET", "/me")
