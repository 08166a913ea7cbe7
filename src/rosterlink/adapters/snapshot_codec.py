"""JSON file format for reconciliation snapshots passed between CLI commands."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any

from rosterlink.domain.errors import UnknownFieldError, ValidationError
from rosterlink.domain.model import ExternalUser, InternalMember, MatchType
from rosterlink.domain.reconciliation import MatchCandidate, ReconciliationSnapshot, Verification

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

FORMAT_VERSION = 1
_DOCUMENT_KEYS = frozenset({"version", "organization_id", "created_at", "candidates", "pool"})
_CANDIDATE_KEYS = frozenset(
    {"member", "matched_external_user", "match_type", "confidence", "verified"}
)
_VERIFIED_KEYS = frozenset({"identity", "roles", "wages"})


@dataclass(frozen=True, slots=True)
class SnapshotDocument:
    organization_id: str
    snapshot: ReconciliationSnapshot
    created_at: datetime | None = None


def encode_candidate(candidate: MatchCandidate) -> dict[str, Any]:
    user = candidate.matched_external_user
    return {
        "member": candidate.member.to_mapping(),
        "matched_external_user": user.to_mapping() if user is not None else None,
        "match_type": candidate.match_type.value,
        "confidence": candidate.confidence,
        "verified": {
            "identity": candidate.verified.identity,
            "roles": candidate.verified.roles,
            "wages": candidate.verified.wages,
        },
    }


def encode_document(document: SnapshotDocument) -> dict[str, Any]:
    created_at = document.created_at or datetime.now(UTC)
    return {
        "version": FORMAT_VERSION,
        "organization_id": document.organization_id,
        "created_at": created_at.isoformat(),
        "candidates": [encode_candidate(candidate) for candidate in document.snapshot],
        "pool": [user.to_mapping() for user in document.snapshot.pool],
    }


def _require_mapping(value: object, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValidationError(f"Snapshot {what} must be an object")
    return value


def _check_keys(data: Mapping[str, Any], known: frozenset[str], record: str) -> None:
    unknown = set(data) - known
    if unknown:
        raise UnknownFieldError(record, unknown)


def decode_candidate(data: Mapping[str, Any]) -> MatchCandidate:
    _check_keys(data, _CANDIDATE_KEYS, "MatchCandidate")
    verified = _require_mapping(data.get("verified") or {}, "verification")
    _check_keys(verified, _VERIFIED_KEYS, "Verification")
    raw_user = data.get("matched_external_user")
    try:
        return MatchCandidate(
            member=InternalMember.from_mapping(_require_mapping(data["member"], "member")),
            matched_external_user=(
                ExternalUser.from_mapping(_require_mapping(raw_user, "external user"))
                if raw_user is not None
                else None
            ),
            match_type=MatchType(data["match_type"]),
            confidence=int(data["confidence"]),
            verified=Verification(
                identity=bool(verified.get("identity", False)),
                roles=bool(verified.get("roles", False)),
                wages=bool(verified.get("wages", False)),
            ),
        )
    except UnknownFieldError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid candidate in snapshot: {exc}") from exc


def _decode_pool_entry(item: object) -> ExternalUser:
    try:
        return ExternalUser.from_mapping(_require_mapping(item, "pool entry"))
    except UnknownFieldError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid pool entry in snapshot: {exc!r}") from exc


def decode_document(data: object) -> SnapshotDocument:
    document = _require_mapping(data, "document")
    _check_keys(document, _DOCUMENT_KEYS, "SnapshotDocument")
    version = document.get("version")
    if version != FORMAT_VERSION:
        raise ValidationError(f"Unsupported snapshot version: {version!r}")
    organization_id = document.get("organization_id")
    if not isinstance(organization_id, str) or not organization_id:
        raise ValidationError("Snapshot is missing organization_id")

    candidates = tuple(
        decode_candidate(_require_mapping(item, "candidate"))
        for item in document.get("candidates") or ()
    )
    pool = tuple(_decode_pool_entry(item) for item in document.get("pool") or ())
    claimed = {c.matched_external_user.id for c in candidates if c.matched_external_user}
    overlap = claimed.intersection(user.id for user in pool)
    if overlap or len(claimed) != sum(1 for c in candidates if c.is_matched):
        raise ValidationError("Snapshot assigns an external user more than once")

    created_at = document.get("created_at")
    return SnapshotDocument(
        organization_id=organization_id,
        snapshot=ReconciliationSnapshot(candidates=candidates, pool=pool),
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )


def dump_snapshot(document: SnapshotDocument, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(encode_document(document), indent=2), encoding="utf-8")
    tmp_path.replace(path)
    log.debug("Wrote snapshot with %s candidates to %s", len(document.snapshot), path)


def load_snapshot(path: Path) -> SnapshotDocument:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Snapshot file {path} is not valid JSON: {exc}") from exc
    return decode_document(raw)
