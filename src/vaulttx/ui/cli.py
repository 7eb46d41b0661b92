from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from vaulttx.api.schema import (
    DryRunResponse,
    ErrorResponse,
    OperationSimulationResponse,
    ValidationResponse,
)
from vaulttx.app import (
    bulk_delete,
    bulk_read,
    bulk_write,
    run_transaction,
    simulate_operation_request,
    simulate_transaction_request,
    validate_operations_request,
)
from vaulttx.config import ConfigurationError, configure_logging, parse_log_level
from vaulttx.domain.errors import OperationValidationError, VaultTxError
from vaulttx.domain.operations import OperationKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from vaulttx.api.schema import ResponseModel

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run virtual transactions against Vault")
    subparsers = parser.add_subparsers(dest="command", required=True)

    transaction = subparsers.add_parser(
        "transaction", help="Apply a batch of operations all-or-nothing"
    )
    transaction.add_argument("file", help="JSON transaction document ('-' for stdin)")
    transaction.add_argument(
        "--dry-run",
        action="store_true",
        help="Only predict the outcome, never write",
    )

    simulate = subparsers.add_parser("simulate", help="Predict the outcome of a transaction")
    simulate.add_argument("file", help="JSON transaction document ('-' for stdin)")

    simulate_op = subparsers.add_parser(
        "simulate-operation", help="Predict the outcome of a single operation"
    )
    simulate_op.add_argument("type", choices=[kind.value for kind in OperationKind])
    simulate_op.add_argument("path", help="Secret path")
    simulate_op.add_argument("--data", help="JSON object payload for create/update")

    validate = subparsers.add_parser(
        "validate", help="Check each operation on its own against the current state"
    )
    validate.add_argument("file", help="JSON document with an operations list ('-' for stdin)")
    validate.add_argument(
        "--no-dependencies",
        action="store_true",
        help="Skip the same-path dependency analysis",
    )

    bulk_write_cmd = subparsers.add_parser("bulk-write", help="Write many secrets, best effort")
    bulk_write_cmd.add_argument("file", help="JSON bulk write document ('-' for stdin)")
    bulk_write_cmd.add_argument(
        "--dry-run",
        action="store_true",
        help="Only validate the items, never write",
    )

    bulk_read_cmd = subparsers.add_parser("bulk-read", help="Read many secrets, best effort")
    bulk_read_cmd.add_argument("paths", nargs="+", help="Secret paths to read")

    bulk_delete_cmd = subparsers.add_parser(
        "bulk-delete", help="Delete many secrets, best effort"
    )
    bulk_delete_cmd.add_argument("paths", nargs="+", help="Secret paths to delete")
    bulk_delete_cmd.add_argument(
        "--dry-run",
        action="store_true",
        help="Only check that the secrets exist, never delete",
    )

    return parser.parse_args(list(argv))


def _load_document(source: str) -> object:
    try:
        raw = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read {source}: {exc}") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {source}: {exc}") from exc


def _parse_data(raw: str) -> object:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in --data: {exc}") from exc


def _set_flag(document: object, key: str, *, value: bool) -> None:
    if not isinstance(document, dict):
        raise ValueError("Request document must be a JSON object")
    document[key] = value


def _build_document(args: argparse.Namespace) -> object:
    if args.command == "bulk-read":
        return {"paths": list(args.paths)}
    if args.command == "bulk-delete":
        return {"paths": list(args.paths), "dryRun": args.dry_run}
    if args.command == "simulate-operation":
        document: dict[str, object] = {"type": args.type, "path": args.path}
        if args.data is not None:
            document["data"] = _parse_data(args.data)
        return document
    loaded = _load_document(args.file)
    if getattr(args, "dry_run", False):
        _set_flag(loaded, "dryRun", value=True)
    if getattr(args, "no_dependencies", False):
        _set_flag(loaded, "checkDependencies", value=False)
    return loaded


def _dispatch(command: str, document: object) -> ResponseModel:
    if command == "transaction":
        return run_transaction(document)
    if command == "simulate":
        return simulate_transaction_request(document)
    if command == "simulate-operation":
        return simulate_operation_request(document)
    if command == "validate":
        return validate_operations_request(document)
    if command == "bulk-write":
        return bulk_write(document)
    if command == "bulk-read":
        return bulk_read(document)
    if command == "bulk-delete":
        return bulk_delete(document)
    raise ValueError(f"Unsupported command: {command}")


def _emit(response: ResponseModel) -> None:
    print(json.dumps(response.to_payload(), indent=2))  # noqa: T201


def _succeeded(response: ResponseModel) -> bool:
    if isinstance(response, DryRunResponse | ValidationResponse | OperationSimulationResponse):
        return response.would_succeed
    return bool(getattr(response, "success", False))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        level = parse_log_level(os.getenv("LOG_LEVEL"))
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(2)
    configure_logging(level=level)

    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        document = _build_document(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        response = _dispatch(parsed_args.command, document)
    except OperationValidationError as exc:
        log.error("Rejected %s request: %s", parsed_args.command, exc)  # noqa: TRY400
        _emit(ErrorResponse.from_error(exc))
        sys.exit(2)
    except VaultTxError as exc:
        log.error("Rejected %s request: %s", parsed_args.command, exc)  # noqa: TRY400
        _emit(ErrorResponse.from_error(exc))
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)

    _emit(response)
    if not _succeeded(response):
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
