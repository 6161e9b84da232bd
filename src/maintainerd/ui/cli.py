from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

import uvicorn
from dotenv import load_dotenv

from maintainerd.adapters.sheets import XlsxWorksheetReader
from maintainerd.app import (
    build_fossa_onboarding,
    list_onboarding_tasks,
    reconcile_fossa,
    seed_registry,
)
from maintainerd.config import configure_logging, get_github_config, get_webhook_config
from maintainerd.config.github import DEFAULT_GITHUB_ORG, DEFAULT_GITHUB_REPO
from maintainerd.ui.webhook import create_webhook_app

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="CNCF maintainer operations")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed = subparsers.add_parser("seed", help="Seed the registry from the maintainer worksheet")
    seed.add_argument(
        "--xlsx",
        type=Path,
        help="Read a local .xlsx export instead of the Google Sheets worksheet",
    )
    seed.add_argument(
        "--skip-fossa",
        action="store_true",
        help="Do not link projects to their existing FOSSA teams",
    )

    reconcile = subparsers.add_parser(
        "reconcile",
        help="Compare registered maintainers with FOSSA team members",
    )
    reconcile.add_argument(
        "--invite",
        action="store_true",
        help="Invite registered maintainers missing from their FOSSA team",
    )

    onboarding = subparsers.add_parser(
        "onboarding-tasks",
        help="List checklist tasks of open onboarding issues",
    )
    onboarding.add_argument("--org", type=str, default=None, help=f"default: {DEFAULT_GITHUB_ORG}")
    onboarding.add_argument(
        "--repo", type=str, default=None, help=f"default: {DEFAULT_GITHUB_REPO}"
    )

    serve = subparsers.add_parser("serve", help="Run the GitHub webhook server")
    serve.add_argument("--host", type=str, default=None, help="Interface to bind")
    serve.add_argument("--port", type=int, default=None, help="Port to listen on")

    return parser.parse_args(list(argv))


def _serve(args: argparse.Namespace) -> None:
    webhook_config = get_webhook_config()
    onboarding = build_fossa_onboarding()
    app = create_webhook_app(secret=webhook_config.secret, sign_up=onboarding.sign_up)
    host = args.host or webhook_config.host
    port = args.port or webhook_config.port
    log.info("Listening for GitHub webhooks on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "serve" and parsed_args.port is not None:
            if not 0 < parsed_args.port < 65536:  # noqa: PLR2004
                raise ValueError(f"Invalid port: {parsed_args.port}")  # noqa: TRY301
        if parsed_args.command == "seed" and parsed_args.xlsx is not None:
            if not parsed_args.xlsx.is_file():
                raise ValueError(f"No such workbook: {parsed_args.xlsx}")  # noqa: TRY301
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "seed":
            reader = XlsxWorksheetReader(parsed_args.xlsx) if parsed_args.xlsx else None
            result = seed_registry(reader=reader, link_fossa=not parsed_args.skip_fossa)
            log.info(
                "Seed finished: services=%d, rows=%d, imported=%d, skipped=%d",
                result.services,
                result.imported.rows,
                result.imported.imported,
                result.imported.skipped,
            )
        elif parsed_args.command == "reconcile":
            reconcile_fossa(invite=parsed_args.invite)
        elif parsed_args.command == "onboarding-tasks":
            config = get_github_config(org=parsed_args.org, repo=parsed_args.repo)
            for task in list_onboarding_tasks(config=config):
                mark = "x" if task.done else " "
                log.info("[%s] %s: %s", mark, task.project, task.description)
        elif parsed_args.command == "serve":
            _serve(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
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
