from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from publishstatus.adapters.page_context import JsonContextSource
from publishstatus.app import build_items_report, build_page_report
from publishstatus.config import configure_logging
from publishstatus.domain.model import DataSource

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from publishstatus.domain.model import Report

log = logging.getLogger(__name__)

COMPARE_CHOICES = (DataSource.LIVE.value, DataSource.PREVIEW.value)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compare authoring and published versions of Sitecore items"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    page = subparsers.add_parser("page", help="Report on the items a page context refers to")
    page.add_argument(
        "--context",
        type=Path,
        required=True,
        help="Path to a JSON file holding the page context",
    )
    token = page.add_mutually_exclusive_group()
    token.add_argument(
        "--app-context",
        type=Path,
        help="Path to a JSON file holding the application context (supplies the context token)",
    )
    token.add_argument(
        "--context-id",
        type=str,
        help="Sitecore context token used for authoring and preview queries",
    )
    _add_common_arguments(page)

    items = subparsers.add_parser("items", help="Report on an explicit list of item IDs")
    items.add_argument(
        "item_ids",
        nargs="+",
        help="Item IDs; the first one is treated as the current item",
    )
    items.add_argument(
        "--context-id",
        type=str,
        help="Sitecore context token used for authoring and preview queries",
    )
    _add_common_arguments(items)

    return parser.parse_args(list(argv))


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--compare-with",
        choices=COMPARE_CHOICES,
        default=DataSource.LIVE.value,
        help="Published endpoint to compare against (default: %(default)s)",
    )
    parser.add_argument(
        "--include-field-references",
        action="store_true",
        help="Also report items referenced from field values",
    )


def _validate_args(args: argparse.Namespace) -> None:
    if args.command == "page":
        if not args.context.is_file():
            raise ValueError(f"Page context file not found: {args.context}")
        if args.app_context is not None and not args.app_context.is_file():
            raise ValueError(f"Application context file not found: {args.app_context}")


def _run(args: argparse.Namespace) -> Report:
    compare_with = DataSource(args.compare_with)
    if args.command == "page":
        return build_page_report(
            JsonContextSource(args.context),
            application_context=(
                JsonContextSource(args.app_context) if args.app_context is not None else None
            ),
            context_token=args.context_id,
            compare_with=compare_with,
            include_field_references=args.include_field_references,
        )
    if args.command == "items":
        return build_items_report(
            args.item_ids,
            context_token=args.context_id,
            compare_with=compare_with,
            include_field_references=args.include_field_references,
        )
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        _validate_args(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        report = _run(parsed_args)
    except Exception:
        log.exception("Fatal error while building publish status report")
        sys.exit(1)

    print(json.dumps(report.as_dict(), indent=2))  # noqa: T201


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
