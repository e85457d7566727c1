"""Pytest configuration and fixtures for tests."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator, Optional
from contextlib import contextmanager
from datetime import datetime
import uuid

from rosterdesk.database import Base, enable_sqlite_savepoints
import rosterdesk.models  # noqa: F401
from rosterdesk.models.project import Project
from rosterdesk.models.staff import Staff, StaffType
from rosterdesk.models.roster import Roster, RosterEntry
from rosterdesk.services.shift_catalog import seed_default_shift_types


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """
    Create a test database session for each test.
    Uses an in-memory SQLite database for fast testing.
    """
    # Create in-memory SQLite database for testing
    engine = enable_sqlite_savepoints(create_engine("sqlite:///:memory:", echo=False))

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@contextmanager
def get_test_db_session():
    """
    Context manager for creating test database sessions.
    Used for property-based tests where fixtures don't work well.
    """
    engine = enable_sqlite_savepoints(create_engine("sqlite:///:memory:", echo=False))
    Base.metadata.create_all(bind=engine)
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def make_project(db: Session, cutoff_day: int = 31, next_month: bool = True, name: str = "Grand Sukhumvit") -> Project:
    """Create a project; the defaults keep every current roster editable."""
    project = Project(
        id=str(uuid.uuid4()),
        name=name,
        edit_cutoff_day=cutoff_day,
        edit_cutoff_next_month=next_month
    )
    db.add(project)
    db.commit()
    return project


def make_staff(
    db: Session,
    project: Project,
    name: str = "Somchai",
    default_shift: str = "1",
    weekly_off_day: Optional[int] = None,
    wage_per_day: int = 500,
    display_order: int = 0,
    is_active: bool = True,
    staff_type: StaffType = StaffType.REGULAR
) -> Staff:
    staff = Staff(
        id=str(uuid.uuid4()),
        project_id=project.id,
        name=name,
        position="Security",
        wage_per_day=wage_per_day,
        staff_type=staff_type,
        default_shift=default_shift,
        weekly_off_day=weekly_off_day,
        display_order=display_order,
        is_active=is_active,
        created_at=datetime.utcnow()
    )
    db.add(staff)
    db.commit()
    return staff


def make_roster(db: Session, project: Project, year: int, month: int) -> Roster:
    roster = Roster(id=str(uuid.uuid4()), project_id=project.id, year=year, month=month)
    db.add(roster)
    db.commit()
    return roster


def make_entry(db: Session, roster: Roster, staff: Staff, day: int, shift_code: str) -> RosterEntry:
    entry = RosterEntry(
        id=str(uuid.uuid4()),
        roster_id=roster.id,
        staff_id=staff.id,
        day=day,
        shift_code=shift_code
    )
    db.add(entry)
    db.commit()
    return entry


@pytest.fixture
def shift_types(test_db: Session):
    """Default shift type catalog."""
    return seed_default_shift_types(test_db)


@pytest.fixture
def project(test_db: Session) -> Project:
    return make_project(test_db)
