"""Command-line helpers for inspecting revisions and building protocol messages."""

from __future__ import annotations

import argparse
import logging
import sys

from state_sync.config import load_settings
from state_sync.errors import InvalidRevisionText
from state_sync.events import InvalidationEvent
from state_sync.logging import configure_logging
from state_sync.models import Revision, compare_revisions, is_canonical_revision

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="state-sync", description="Revision and invalidation protocol tools"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare = subparsers.add_parser("compare", help="Order two revision strings")
    compare.add_argument("a")
    compare.add_argument("b")

    check = subparsers.add_parser("check", help="Exit non-zero unless the text is canonical")
    check.add_argument("revision")

    nxt = subparsers.add_parser("next", help="Print the revision after REVISION")
    nxt.add_argument("revision")

    event = subparsers.add_parser("event", help="Print an invalidation event as JSON")
    event.add_argument("topic")
    event.add_argument("revision")
    return parser


def run(argv: list[str] | None = None) -> int:
    """Execute one command and return the process exit code."""
    args = _build_parser().parse_args(argv)

    if args.command == "compare":
        print(compare_revisions(args.a, args.b).name.lower())
        return 0

    if args.command == "check":
        if is_canonical_revision(args.revision):
            return 0
        logger.error("Not a canonical revision: %r", args.revision)
        return 1

    try:
        revision = Revision.parse(args.revision)
    except InvalidRevisionText as exc:
        logger.error(str(exc))  # noqa: TRY400
        return 2

    if args.command == "next":
        print(revision.next())
    else:
        print(InvalidationEvent.announce(args.topic, revision).to_message_body())
    return 0


def main() -> None:
    """Entry point for the ``state-sync`` console script."""
    settings = load_settings()
    configure_logging(settings.app.log_level)
    sys.exit(run())


if __name__ == "__main__":
    main()
