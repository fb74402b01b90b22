"""
Command-line client.

Usage:
    sprint-coach log --distance 30 --intensity 95 --sets 3 --reps 4
    sprint-coach list
    sprint-coach delete --index 0
    sprint-coach analyze
    sprint-coach serve

Logging a session asks the coach for a recommendation straight away,
unless --no-analyze is given.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from ..config.settings import Settings, get_settings
from ..core.coaching.models import SessionRecord
from ..infrastructure.storage.client import StorageError, create_storage
from .api_client import CoachClient
from .render import render_history, render_recommendation
from .store import SessionStore

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprint-coach",
        description="Log sprint sessions and get the next workout from an AI coach",
    )
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    log_cmd = commands.add_parser("log", help="Log a new session")
    log_cmd.add_argument("--distance", required=True, help="e.g. 30, 60, 100 (m is added)")
    log_cmd.add_argument("--intensity", required=True, help="e.g. 80, 90, 95 (%% is added)")
    log_cmd.add_argument("--sets", type=_positive_int, default=1)
    log_cmd.add_argument("--reps", type=_positive_int, default=1, help="Reps per set")
    log_cmd.add_argument("--notes", default="", help="e.g. felt smooth, tight calves")
    log_cmd.add_argument(
        "--no-analyze",
        action="store_true",
        help="Don't ask the coach after logging",
    )

    commands.add_parser("list", help="Show the session history")

    delete_cmd = commands.add_parser("delete", help="Delete a session")
    target = delete_cmd.add_mutually_exclusive_group(required=True)
    target.add_argument("--index", type=int, help="Position shown by `list`")
    target.add_argument("--id", dest="record_id", help="Session id shown by `list`")

    commands.add_parser("analyze", help="Get the next workout from the coach")

    serve_cmd = commands.add_parser("serve", help="Run the coach API server")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8000)

    return parser


def _analyze(store: SessionStore, client: CoachClient) -> int:
    if not len(store):
        print("No sessions logged yet.")
        return 1

    count = len(store.recent())
    print(f"🤔 Analyzing your past {count} session{'s' if count != 1 else ''}...")

    result = client.request_recommendation(store.recent())
    if result is None:
        return 0

    print(render_recommendation(result.body))
    return 1 if result.is_error else 0


def _serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    uvicorn.run(
        "sprint_coach.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def run(
    args: argparse.Namespace,
    store: SessionStore,
    client: CoachClient,
) -> int:
    """Execute a parsed command against an already built store and client."""
    if store.load_warning:
        print(f"Warning: {store.load_warning}. Starting with an empty log.", file=sys.stderr)

    if args.command == "log":
        record = store.add(SessionRecord.create(
            distance=args.distance,
            intensity=args.intensity,
            sets=args.sets,
            reps=args.reps,
            notes=args.notes,
        ))
        print(f"💾 Saved {record.summary} @ {record.intensity}")
        if args.no_analyze:
            return 0
        return _analyze(store, client)

    if args.command == "list":
        print(render_history(store.sessions))
        return 0

    if args.command == "delete":
        try:
            if args.record_id is not None:
                removed = store.remove(args.record_id)
            else:
                removed = store.remove_at(args.index)
        except (IndexError, KeyError):
            print("No such session.", file=sys.stderr)
            return 1
        print(f"Deleted {removed.date} {removed.summary}")
        return 0

    if args.command == "analyze":
        return _analyze(store, client)

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    if args.command == "serve":
        return _serve(args, settings)

    store = SessionStore(create_storage(path=settings.storage_path))

    try:
        with CoachClient(settings.coach_api_url, settings.client_timeout_seconds) as client:
            return run(args, store, client)
    except StorageError as e:
        print(f"Could not save the session log: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
