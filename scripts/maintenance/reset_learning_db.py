"""
Drop and recreate the flashcard tables.

DANGEROUS: cards, schedules and review history are all deleted.

Usage:
    python -m scripts.maintenance.reset_learning_db
    python -m scripts.maintenance.reset_learning_db --yes
    python -m scripts.maintenance.reset_learning_db --database-url sqlite:///logs/scratch.sqlite
"""

from __future__ import annotations

import argparse
import logging

from core import srs
from core.settings import get_log_level


def main() -> None:
    parser = argparse.ArgumentParser(description="Reset the flashcard database")
    parser.add_argument("--database-url", help="SQLAlchemy URL (defaults to DATABASE_URL / TEST_MODE)")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    logging.basicConfig(level=get_log_level())

    url = args.database_url or srs.get_database_url()
    srs.init_db(url)
    store = srs.SqlCardStore(url)
    card_count = len(store.load_cards())
    event_count = len(store.get_review_events())

    print(f"Database: {url}")
    print(f"About to delete {card_count} cards and {event_count} review events.")

    if not args.yes:
        response = input("Type 'yes' to confirm: ")
        if response.strip().lower() != "yes":
            print("Cancelled. No changes made.")
            return

    srs.reset_db(url)
    print("✓ Database reset complete")


if __name__ == "__main__":
    main()
