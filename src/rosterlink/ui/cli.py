from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from rosterlink.adapters.snapshot_codec import SnapshotDocument, dump_snapshot, load_snapshot
from rosterlink.app import list_roles, load_wages, preview_match, save_matches
from rosterlink.config import configure_logging, get_storage_config
from rosterlink.domain.errors import PartialDataError
from rosterlink.domain.model import VerificationStep
from rosterlink.domain.reconciliation import (
    manual_assign,
    summarize,
    toggle_verification,
    unlink_match,
    verified_step_count,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from rosterlink.domain.reconciliation import MatchCandidate, ReconciliationSnapshot

log = logging.getLogger(__name__)


def _add_snapshot_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Snapshot file (defaults to snapshot.json in the data directory)",
    )


def _add_index_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--index", type=int, required=True, help="Candidate row index")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile team members with 7shifts users")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Propose matches and write a snapshot")
    preview.add_argument("--organization", required=True, help="Organization id")
    preview.add_argument("--actor", default="cli", help="Operator recorded in logs")
    _add_snapshot_argument(preview)

    show = subparsers.add_parser("show", help="List the candidates of a snapshot")
    _add_snapshot_argument(show)

    verify = subparsers.add_parser("verify", help="Toggle verification steps of a candidate")
    _add_snapshot_argument(verify)
    _add_index_argument(verify)
    verify.add_argument(
        "--step",
        action="append",
        required=True,
        choices=[step.value for step in VerificationStep],
        help="Step to toggle (repeatable)",
    )

    assign = subparsers.add_parser("assign", help="Manually pair an unmatched candidate")
    _add_snapshot_argument(assign)
    _add_index_argument(assign)
    assign.add_argument(
        "--external-user",
        type=int,
        required=True,
        help="Id of an unclaimed 7shifts user",
    )

    unlink = subparsers.add_parser("unlink", help="Reject the pairing of a candidate")
    _add_snapshot_argument(unlink)
    _add_index_argument(unlink)

    wages = subparsers.add_parser("wages", help="Show 7shifts wages for candidates")
    _add_snapshot_argument(wages)
    wages.add_argument(
        "--index",
        type=int,
        action="append",
        required=True,
        help="Candidate row index (repeatable)",
    )
    wages.add_argument(
        "--role",
        type=int,
        default=None,
        help="Only show current wages that apply to this 7shifts role id",
    )

    roles = subparsers.add_parser("roles", help="List 7shifts roles")
    roles.add_argument("--organization", required=True, help="Organization id")

    save = subparsers.add_parser("save", help="Persist fully verified matches")
    _add_snapshot_argument(save)
    save.add_argument("--actor", required=True, help="Operator recorded in the activity log")

    return parser.parse_args(list(argv))


def _snapshot_path(args: argparse.Namespace) -> Path:
    if args.snapshot is not None:
        return args.snapshot
    return get_storage_config().snapshot_path()


def _describe(index: int, candidate: MatchCandidate) -> str:
    user = candidate.matched_external_user
    target = f"{user.full_name} (#{user.id})" if user is not None else "-"
    return (
        f"[{index}] {candidate.member.full_name} -> {target} "
        f"{candidate.match_type} {candidate.confidence}% "
        f"verified {verified_step_count(candidate)}/3"
    )


def _log_snapshot(snapshot: ReconciliationSnapshot) -> None:
    for index, candidate in enumerate(snapshot):
        log.info(_describe(index, candidate))
    for user in snapshot.pool:
        log.info("unclaimed: %s (#%s)", user.full_name, user.id)
    summary = summarize(snapshot)
    log.info(
        "linked=%s exact=%s suggested=%s manual=%s unmatched=%s pending_save=%s",
        summary.linked,
        summary.exact,
        summary.suggested,
        summary.manual,
        summary.unmatched,
        summary.pending_save,
    )


def _update_snapshot(args: argparse.Namespace) -> None:
    path = _snapshot_path(args)
    document = load_snapshot(path)
    snapshot = document.snapshot
    if args.command == "verify":
        for step in args.step:
            snapshot = toggle_verification(snapshot, args.index, step)
    elif args.command == "assign":
        snapshot = manual_assign(snapshot, args.index, args.external_user)
    elif args.command == "unlink":
        snapshot = unlink_match(snapshot, args.index)
    dump_snapshot(
        SnapshotDocument(
            organization_id=document.organization_id,
            snapshot=snapshot,
            created_at=document.created_at,
        ),
        path,
    )
    log.info(_describe(args.index, snapshot[args.index]))


def _show_wages(args: argparse.Namespace) -> None:
    document = load_snapshot(_snapshot_path(args))
    users = {index: document.snapshot[index].matched_external_user for index in args.index}
    wanted = [user.id for user in users.values() if user is not None]
    results = load_wages(document.organization_id, wanted) if wanted else {}
    for index, user in users.items():
        if user is None:
            log.info("[%s] no 7shifts user to look up", index)
            continue
        result = results[user.id]
        if isinstance(result, PartialDataError):
            log.warning("[%s] wages unavailable for %s: %s", index, user.full_name, result)
            continue
        if result.is_empty:
            log.info("[%s] %s has no wages on record", index, user.full_name)
        current = result.current_wages if args.role is None else result.for_role(args.role)
        schedules = (("current", current), ("upcoming", result.upcoming_wages))
        for label, records in schedules:
            for wage in records:
                role = "all roles" if wage.applies_to_all_roles else f"role {wage.role_id}"
                log.info(
                    "[%s] %s %s: %.2f %s (%s) from %s",
                    index,
                    user.full_name,
                    label,
                    wage.wage_cents / 100,
                    wage.wage_type,
                    role,
                    wage.effective_date.isoformat(),
                )


def _save(args: argparse.Namespace) -> bool:
    path = _snapshot_path(args)
    document = load_snapshot(path)
    result = save_matches(
        document.snapshot,
        organization_id=document.organization_id,
        actor=args.actor,
    )
    dump_snapshot(
        SnapshotDocument(
            organization_id=document.organization_id,
            snapshot=result.snapshot,
            created_at=document.created_at,
        ),
        path,
    )
    for failure in result.failures:
        log.error("[%s] not saved: %s", failure.candidate_index, failure.error)
    if result.skipped:
        log.warning("Skipped after failure: %s", ", ".join(map(str, result.skipped)))
    log.info("Saved %s links", result.saved_count)
    return result.ok


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "preview":
            snapshot = preview_match(parsed_args.organization, actor=parsed_args.actor)
            path = _snapshot_path(parsed_args)
            dump_snapshot(
                SnapshotDocument(organization_id=parsed_args.organization, snapshot=snapshot),
                path,
            )
            _log_snapshot(snapshot)
            log.info("Snapshot written to %s", path)
        elif parsed_args.command == "show":
            _log_snapshot(load_snapshot(_snapshot_path(parsed_args)).snapshot)
        elif parsed_args.command in {"verify", "assign", "unlink"}:
            _update_snapshot(parsed_args)
        elif parsed_args.command == "wages":
            _show_wages(parsed_args)
        elif parsed_args.command == "roles":
            for role in list_roles(parsed_args.organization):
                log.info("role %s: %s", role.id, role.name)
        elif parsed_args.command == "save":
            if not _save(parsed_args):
                sys.exit(1)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error in %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
