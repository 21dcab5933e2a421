"""
Reset the FSRS card store.

DANGEROUS: This deletes every card and review log!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_learning_db [--yes]
"""

import argparse
import logging

from jiten_srs import fsrs
from jiten_srs.fsrs import database


def main():
    parser = argparse.ArgumentParser(description="Drop and recreate the FSRS tables.")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    target = "TEST" if fsrs.is_test_mode() else "PRODUCTION"

    print("=" * 60)
    print(f"WARNING: Reset FSRS Card Store ({target})")
    print("=" * 60)
    print()
    print("This will DELETE:")
    print("  - All cards (state, step, stability, difficulty, due dates)")
    print("  - All review logs")
    print()

    if not args.yes:
        response = input("Are you sure you want to reset? (type 'yes' to confirm): ")
        if response.lower() != "yes":
            print("\nCancelled. No changes made.")
            return

    fsrs.reset_db()
    database.get_engine().dispose()
    print("\nDone. The card store has empty tables ready for new reviews.")


if __name__ == "__main__":
    main()
