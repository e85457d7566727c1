"""Script to seed the default shift type catalog."""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rosterdesk.database import SessionLocal, init_db
from rosterdesk.services.shift_catalog import seed_default_shift_types


def seed(create_tables: bool = False):
    """
    Seed the shift type catalog.

    Args:
        create_tables: Create missing tables first
    """
    if create_tables:
        init_db()

    db = SessionLocal()
    try:
        shift_types = seed_default_shift_types(db)
        print(f"Seeded {len(shift_types)} shift types:")
        for shift_type in shift_types:
            kind = "work" if shift_type.is_work_shift else "non-work"
            print(f"  {shift_type.code} ({shift_type.name}, {kind})")

    except Exception as e:
        print(f"Error seeding shift types: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    seed(create_tables="--create-tables" in sys.argv[1:])
