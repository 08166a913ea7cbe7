"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from rosterlink.adapters.sevenshifts import SevenShiftsClient
from rosterlink.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    is_started,
    startup,
)
from rosterlink.config import get_reconciliation_config, get_sevenshifts_config
from rosterlink.domain.errors import FetchError
from rosterlink.domain.ports.unit_of_work import ReconciliationUnitOfWork
from rosterlink.domain.reconciliation import (
    OrganizationLocks,
    ReconciliationSnapshot,
    SaveResult,
    WageLookup,
    build_matches,
    member_sort_key,
    summarize,
)
from rosterlink.domain.reconciliation import save_matches as save_verified_matches

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rosterlink.domain.errors import PartialDataError
    from rosterlink.domain.model import ExternalUser, InternalMember, Provider, Role, WageSchedule
    from rosterlink.domain.ports import ExternalUserSource, MemberSource, RoleSource, WageSource

type UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]
type MemberSortKey = Callable[[InternalMember], object]

log = getLogger(__name__)

_SAVE_LOCKS = OrganizationLocks()


class UnitOfWorkMemberSource:
    """Member source reading through a fresh unit of work per call."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def list_members(
        self,
        organization_id: str,
        *,
        is_active: bool = True,
    ) -> list[InternalMember]:
        with self._unit_of_work_factory() as uow:
            return list(
                uow.repositories.members.list_members(organization_id, is_active=is_active)
            )


def _ensure_started() -> None:
    if not is_started():
        startup()


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    _ensure_started()
    return SqlAlchemyReconciliationUnitOfWork


def _default_provider_client() -> SevenShiftsClient:
    return SevenShiftsClient(config=get_sevenshifts_config())


async def _fetch_inputs(
    organization_id: str,
    *,
    member_source: MemberSource,
    user_source: ExternalUserSource,
) -> tuple[Sequence[InternalMember], Sequence[ExternalUser]]:
    try:
        members, users = await asyncio.gather(
            asyncio.to_thread(member_source.list_members, organization_id, is_active=True),
            asyncio.to_thread(user_source.list_active_users, organization_id),
        )
    except Exception as exc:
        log.error("Fetching reconciliation inputs for %s failed: %s", organization_id, exc)
        raise FetchError(f"Could not load records for organization {organization_id}") from exc
    return members, users


def preview_match(
    organization_id: str,
    *,
    actor: str,
    member_source: MemberSource | None = None,
    user_source: ExternalUserSource | None = None,
    sort_key: MemberSortKey = member_sort_key,
) -> ReconciliationSnapshot:
    """Load both record sets and propose a pairing for every active member.

    Nothing is written. Any fetch failure aborts the preview with ``FetchError``.
    """

    effective_members = member_source or UnitOfWorkMemberSource(_default_unit_of_work_factory())
    effective_users = user_source or _default_provider_client()
    log.info("Starting match preview for organization %s (actor=%s)", organization_id, actor)

    members, users = asyncio.run(
        _fetch_inputs(
            organization_id,
            member_source=effective_members,
            user_source=effective_users,
        )
    )
    snapshot = build_matches(sorted(members, key=sort_key), users)

    summary = summarize(snapshot)
    log.info(
        "Preview for %s: %s members, linked=%s exact=%s suggested=%s unmatched=%s, "
        "%s provider users unclaimed",
        organization_id,
        summary.total,
        summary.linked,
        summary.exact,
        summary.suggested,
        summary.unmatched,
        summary.unclaimed_external_users,
    )
    return snapshot


def save_matches(
    snapshot: ReconciliationSnapshot,
    *,
    organization_id: str,
    actor: str,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    provider: Provider | None = None,
    locks: OrganizationLocks | None = None,
) -> SaveResult:
    """Persist all fully verified pairings of ``snapshot`` for ``organization_id``."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    effective_provider = provider or get_reconciliation_config().provider
    log.info("Saving verified matches for organization %s (actor=%s)", organization_id, actor)
    return save_verified_matches(
        snapshot,
        organization_id=organization_id,
        actor=actor,
        uow_factory=effective_uow,
        provider=effective_provider,
        locks=locks or _SAVE_LOCKS,
    )


async def _load_wages_async(
    organization_id: str,
    external_user_ids: Sequence[int],
    *,
    source: WageSource,
    max_concurrency: int,
) -> dict[int, WageSchedule | PartialDataError]:
    async with WageLookup(source, organization_id, max_concurrency=max_concurrency) as lookup:
        return await lookup.get_many(list(dict.fromkeys(external_user_ids)))


def load_wages(
    organization_id: str,
    external_user_ids: Sequence[int],
    *,
    source: WageSource | None = None,
    max_concurrency: int | None = None,
) -> dict[int, WageSchedule | PartialDataError]:
    """Fetch wage schedules for expanded rows; failures stay local to their row."""

    concurrency = max_concurrency or get_reconciliation_config().wage_concurrency
    if source is not None:
        return asyncio.run(
            _load_wages_async(
                organization_id,
                external_user_ids,
                source=source,
                max_concurrency=concurrency,
            )
        )

    client = _default_provider_client()

    async def run() -> dict[int, WageSchedule | PartialDataError]:
        try:
            return await _load_wages_async(
                organization_id,
                external_user_ids,
                source=client,
                max_concurrency=concurrency,
            )
        finally:
            await client.aclose()

    return asyncio.run(run())


def list_roles(organization_id: str, *, source: RoleSource | None = None) -> list[Role]:
    """Provider roles, used to label role-specific wages."""

    effective_source = source or _default_provider_client()
    try:
        return list(effective_source.list_roles(organization_id))
    except Exception as exc:
        log.error("Fetching roles for %s failed: %s", organization_id, exc)
        raise FetchError(f"Could not load roles for organization {organization_id}") from exc
