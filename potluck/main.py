"""Entry point for the potluck Textual app."""

from __future__ import annotations

import argparse

from potluck.config import DB_PATH, GITHUB_REPOSITORY, LOG_PATH, REMOTE_DISHES_URL, SYNC_MODE
from potluck.logging_utils import init_logging
from potluck.persistence import LocalStore
from potluck.session import DishBook, SyncMode


def build_book(mode: str, *, db_path: str = DB_PATH, remote_url: str = REMOTE_DISHES_URL, repo: str = GITHUB_REPOSITORY) -> DishBook:
    """Wire the dish list to local storage or the remote dishes file."""
    sync_mode = SyncMode(mode)
    if sync_mode is SyncMode.REMOTE:
        return DishBook(sync_mode, remote_url=remote_url, repo=repo)
    return DishBook(sync_mode, store=LocalStore(db_path))


def main(argv: list[str] | None = None) -> None:
    """Run the Textual application."""
    parser = argparse.ArgumentParser(description="Potluck sign-up list")
    parser.add_argument("--mode", choices=[m.value for m in SyncMode], default=SYNC_MODE)
    parser.add_argument("--db", default=DB_PATH, help="local SQLite file (local mode)")
    parser.add_argument("--url", default=REMOTE_DISHES_URL, help="dishes JSON url (remote mode)")
    parser.add_argument("--repo", default=GITHUB_REPOSITORY, help="owner/name for issue sign-ups (remote mode)")
    args = parser.parse_args(argv)

    init_logging(log_path=LOG_PATH)

    # Imported here so the batch job and tests don't pull in Textual.
    from potluck.potluck_app import PotluckApp

    PotluckApp(build_book(args.mode, db_path=args.db, remote_url=args.url, repo=args.repo)).run()


if __name__ == "__main__":
    main()
