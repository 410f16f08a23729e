# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from outreach_import.app import advance_job, job_report, register_upload, run_to_completion
from outreach_import.config import configure_logging
from outreach_import.domain.errors import JobNotFoundError
from outreach_import.domain.model import ImportAction, ItemStatus
from outreach_import.ui.schema import AdvanceResponse, JobReportResponse, JobSnapshot

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from pydantic import BaseModel

log = logging.getLogger(__name__)

EXIT_NOT_FOUND = 3


class _ArgumentParser(argparse.ArgumentParser):
    """Raise instead of exiting so ``main`` owns every exit code."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise ValueError(message)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = _ArgumentParser(description="Import outreach contacts from CSV uploads")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    upload = subparsers.add_parser("upload", help="Register a CSV file as a new import job")
    upload.add_argument("path", type=Path, help="CSV file to upload")
    upload.add_argument("--created-by", type=str, help="User registering the upload")

    validate = subparsers.add_parser("validate", help="Validate the next chunk of rows")
    validate.add_argument("job_id", type=str)

    import_ = subparsers.add_parser("import", help="Create invites for the next batch")
    import_.add_argument("job_id", type=str)
    import_.add_argument("--actor", type=str, help="User recorded as the inviter")

    run = subparsers.add_parser("run", help="Validate and import until the job completes")
    run.add_argument("job_id", type=str)
    run.add_argument("--actor", type=str, help="User recorded as the inviter")
    run.add_argument(
        "--max-slices",
        type=int,
        help="Stop after this many validate/import calls",
    )

    report = subparsers.add_parser("report", help="Show a job and its items")
    report.add_argument("job_id", type=str)
    report.add_argument(
        "--status",
        type=str,
        choices=[status.value for status in ItemStatus],
        help="Only list items with this status",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid job id: {value}") from exc


def _emit(model: BaseModel) -> None:
    print(model.model_dump_json(indent=2))


def _run_command(args: argparse.Namespace) -> BaseModel:
    if args.command == "upload":
        path: Path = args.path
        job = register_upload(path.name, path.read_bytes(), created_by=args.created_by)
        return JobSnapshot.model_validate(job)

    job_id = _parse_uuid(args.job_id)
    if args.command == "validate":
        return AdvanceResponse.from_result(advance_job(job_id, ImportAction.VALIDATE))
    if args.command == "import":
        return AdvanceResponse.from_result(
            advance_job(job_id, ImportAction.IMPORT, actor=args.actor)
        )
    if args.command == "run":
        result = run_to_completion(job_id, actor=args.actor, max_slices=args.max_slices)
        return AdvanceResponse.from_result(result)
    if args.command == "report":
        status = ItemStatus(args.status) if args.status else None
        return JobReportResponse.from_report(job_report(job_id, status=status))
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if getattr(parsed_args, "max_slices", None) is not None and parsed_args.max_slices <= 0:
            raise ValueError("--max-slices must be positive")  # noqa: TRY301
        if getattr(parsed_args, "job_id", None) is not None:
            _parse_uuid(parsed_args.job_id)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        _emit(_run_command(parsed_args))
    except JobNotFoundError:
        log.exception("Import job not found")
        sys.exit(EXIT_NOT_FOUND)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
