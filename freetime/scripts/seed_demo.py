# freetime/scripts/seed_demo.py
import argparse
from datetime import datetime, timezone

from freetime import create_app
from freetime.db_models import db
from freetime.services.intervals import TimeInterval


def utc(hour, day=21):
    return datetime(2024, 9, day, hour, 0, tzinfo=timezone.utc)


def seed(store):
    """
    Three users with 1-2 hour windows and two mirrored blocks between users 1 and 2.

    Returns False without writing when user 1 already has blocks; use --reset to re-seed.
    """
    if store.list_blocks_for_user(1):
        return False

    availability1 = store.upsert_availability(1, TimeInterval(utc(9), utc(11)))
    availability2 = store.upsert_availability(2, TimeInterval(utc(9), utc(11)))
    store.upsert_availability(3, TimeInterval(utc(10), utc(12)))

    store.create_block(
        1, 2, availability1.id, availability2.id,
        TimeInterval(utc(9), utc(10)),
        title="Team Sync",
        description="Discuss project milestones and blockers.",
    )
    store.create_block(
        2, 1, availability2.id, availability1.id,
        TimeInterval(utc(10), utc(11)),
        title="Follow-up Meeting",
        description="Post-meeting follow-up discussion.",
    )
    return True


def main():
    parser = argparse.ArgumentParser(description="Seed demo availability and blocked slots.")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first.")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.reset:
            db.drop_all()
        db.create_all()
        if seed(app.extensions["interval_store"]):
            app.logger.info("Database seeded successfully!")
        else:
            app.logger.info("Demo data already present; run with --reset to re-seed.")


if __name__ == "__main__":
    main()
