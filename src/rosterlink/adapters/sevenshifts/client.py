"""HTTP client for the 7shifts v2 API."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from rosterlink.adapters.http_resilience import ResilientClient
from rosterlink.config.sevenshifts import SEVENSHIFTS_BASE_URL

from .schema import RolesPage, UserPayload, UsersPage, WagesResponse
from .translator import parse_external_user, parse_role, parse_wage_schedule

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from rosterlink.config.http_resilience import ResilienceConfig
    from rosterlink.config.sevenshifts import SevenShiftsConfig
    from rosterlink.domain.model import ExternalUser, Role, WageSchedule

log = getLogger(__name__)

PAGE_SIZE = 100


class SevenShiftsAPIError(RuntimeError):
    """Raised when the 7shifts API returns an error or an unexpected payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SevenShiftsClient:
    """Reads users, roles and wages of one 7shifts company.

    The client is bound to the company in its config; ``organization_id`` is
    the internal organization the caller reconciles and only appears in logs.
    User and role listings are synchronous (each runs its own event loop).
    Wage lookups are async and share one HTTP client so that the rate limit
    holds across concurrent lookups; call ``aclose`` when done.
    """

    def __init__(
        self,
        *,
        config: SevenShiftsConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        headers = dict(config.resilience.default_headers or {})
        headers.setdefault("Authorization", f"Bearer {config.access_token}")
        headers.setdefault("Accept", "application/json")
        self._resilience = replace(config.resilience, default_headers=headers)
        self._client_factory = client_factory or ResilientClient
        self._shared: ResilientClient | None = None

    @property
    def _company_path(self) -> str:
        return f"company/{self._config.company_id}"

    def list_active_users(self, organization_id: str) -> list[ExternalUser]:
        return asyncio.run(self.fetch_active_users(organization_id))

    def list_roles(self, organization_id: str) -> list[Role]:
        return asyncio.run(self.fetch_roles(organization_id))

    async def fetch_active_users(self, organization_id: str) -> list[ExternalUser]:
        users: list[ExternalUser] = []
        async with self._client_factory(self._resilience) as client:
            async for raw in self._paginate(
                client,
                f"{self._company_path}/users",
                params={"status": "active"},
                page_model=UsersPage,
            ):
                try:
                    payload = UserPayload.model_validate(raw)
                except PydanticValidationError as exc:
                    raise SevenShiftsAPIError(f"Unexpected 7shifts user payload: {exc}") from exc
                users.append(parse_external_user(payload, raw=raw))
        log.info(
            "Fetched %s active 7shifts users for organization %s",
            len(users),
            organization_id,
        )
        return users

    async def fetch_roles(self, organization_id: str) -> list[Role]:
        roles: list[Role] = []
        async with self._client_factory(self._resilience) as client:
            async for payload in self._paginate(
                client,
                f"{self._company_path}/roles",
                params={},
                page_model=RolesPage,
            ):
                roles.append(parse_role(payload))
        log.debug("Fetched %s 7shifts roles for organization %s", len(roles), organization_id)
        return roles

    async def list_wages(self, organization_id: str, external_user_id: int) -> WageSchedule:
        client = self._shared_client()
        payload = await self._get_json(
            client,
            f"{self._company_path}/users/{external_user_id}/wages",
        )
        try:
            response = WagesResponse.model_validate(payload)
        except PydanticValidationError as exc:
            raise SevenShiftsAPIError(f"Unexpected 7shifts wages payload: {exc}") from exc
        log.debug(
            "Fetched wages of 7shifts user %s for organization %s",
            external_user_id,
            organization_id,
        )
        return parse_wage_schedule(response.data)

    async def aclose(self) -> None:
        if self._shared is not None:
            await self._shared.aclose()
            self._shared = None

    def _shared_client(self) -> ResilientClient:
        if self._shared is None:
            self._shared = self._client_factory(self._resilience)
        return self._shared

    async def _paginate(
        self,
        client: ResilientClient,
        path: str,
        *,
        params: dict[str, str],
        page_model: type[UsersPage] | type[RolesPage],
    ) -> AsyncIterator[Any]:
        cursor: str | None = None
        seen: set[str] = set()
        while True:
            query = {**params, "limit": str(PAGE_SIZE)}
            if cursor:
                query["cursor"] = cursor
            payload = await self._get_json(client, path, params=query)
            try:
                page = page_model.model_validate(payload)
            except PydanticValidationError as exc:
                raise SevenShiftsAPIError(f"Unexpected 7shifts page payload: {exc}") from exc
            for item in page.data:
                yield item
            cursor = page.meta.next_cursor if page.meta is not None else None
            if not cursor or not page.data:
                return
            if cursor in seen:
                log.warning("7shifts returned a repeated cursor for %s; stopping pagination", path)
                return
            seen.add(cursor)

    async def _get_json(
        self,
        client: ResilientClient,
        path: str,
        *,
        params: dict[str, str] | None = None,
    ) -> Any:
        base_url = self._resilience.base_url or SEVENSHIFTS_BASE_URL
        url = httpx.URL(base_url).join(path)
        try:
            response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            log.error("7shifts request to %s failed: %s", path, exc)
            raise SevenShiftsAPIError(f"7shifts request failed: {exc}") from exc

        if response.status_code >= 400:
            log.error("7shifts API error %s for %s", response.status_code, path)
            raise SevenShiftsAPIError(
                f"7shifts API returned HTTP {response.status_code} for {path}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise SevenShiftsAPIError(f"7shifts returned invalid JSON for {path}") from exc
