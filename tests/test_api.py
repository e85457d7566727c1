"""API tests for roster, staff, report and project routes."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from datetime import datetime

from main import app
from rosterdesk.config import settings
from rosterdesk.database import Base, get_db, enable_sqlite_savepoints
from rosterdesk.models.roster import RosterEntry
from rosterdesk.services.shift_catalog import seed_default_shift_types
from tests.conftest import make_project, make_staff, make_roster, make_entry


API = settings.api_prefix


@pytest.fixture(scope="function")
def api_db():
    """Shared in-memory database wired into the app's get_db dependency."""
    engine = enable_sqlite_savepoints(create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    ))
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    seed_default_shift_types(db)

    yield db

    db.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_db):
    return TestClient(app)


@pytest.fixture
def open_period():
    today = datetime.now()
    return today.year, today.month


@pytest.fixture
def site(api_db):
    return make_project(api_db, cutoff_day=31, next_month=True)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


class TestRosterRoutes:

    def test_get_roster(self, client, api_db, site, open_period):
        member = make_staff(api_db, site, default_shift="2")
        year, month = open_period

        response = client.get(f"{API}/rosters", params={"project_id": site.id, "year": year, "month": month})

        assert response.status_code == 200
        roster = response.json()["roster"]
        assert roster["edit_window"]["is_open"] is True
        assert roster["matrix"][member.id]["staff"]["name"] == member.name
        assert roster["matrix"][member.id]["days"]["1"]["shift_code"] == "2"

    def test_get_roster_invalid_month(self, client, site):
        response = client.get(f"{API}/rosters", params={"project_id": site.id, "year": 2025, "month": 13})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PERIOD"

    def test_get_roster_unknown_project(self, client):
        response = client.get(f"{API}/rosters", params={"project_id": "nope", "year": 2025, "month": 1})

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_upsert_entry(self, client, api_db, site, open_period):
        member = make_staff(api_db, site)
        roster = make_roster(api_db, site, *open_period)

        response = client.put(f"{API}/rosters/entries", json={
            "roster_id": roster.id, "staff_id": member.id, "day": 1, "shift_code": "ขาด"
        })

        assert response.status_code == 200
        assert response.json()["entry"]["shift_code"] == "ขาด"

    def test_upsert_entry_closed_window(self, client, api_db, site):
        member = make_staff(api_db, site)
        roster = make_roster(api_db, site, 2000, 1)

        response = client.put(f"{API}/rosters/entries", json={
            "roster_id": roster.id, "staff_id": member.id, "day": 1, "shift_code": "1"
        })

        assert response.status_code == 403
        body = response.json()["error"]
        assert body["code"] == "EDIT_WINDOW_CLOSED"
        assert body["message"] == "เกินกำหนดการแก้ไขข้อมูล กรุณาติดต่อเจ้าหน้าที่"

    def test_batch_entries(self, client, api_db, site, open_period):
        member = make_staff(api_db, site)
        roster = make_roster(api_db, site, *open_period)

        response = client.put(f"{API}/rosters/entries/batch", json={
            "roster_id": roster.id,
            "entries": [
                {"staff_id": member.id, "day": 1, "shift_code": "1"},
                {"staff_id": member.id, "day": 2, "shift_code": "OFF"},
            ]
        })

        assert response.status_code == 200
        assert response.json()["count"] == 2

    def test_import_duplicate_pair_conflicts(self, client, api_db, site, open_period):
        member = make_staff(api_db, site)
        year, month = open_period

        response = client.post(f"{API}/rosters/import", json={
            "project_id": site.id, "year": year, "month": month,
            "entries": [
                {"staff_id": member.id, "day": 3, "shift_code": "1"},
                {"staff_id": member.id, "day": 3, "shift_code": "2"},
            ]
        })

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"
        assert api_db.query(RosterEntry).count() == 0

    def test_import(self, client, api_db, site, open_period):
        member = make_staff(api_db, site)
        year, month = open_period

        response = client.post(f"{API}/rosters/import", json={
            "project_id": site.id, "year": str(year), "month": str(month),
            "entries": [{"staff_id": member.id, "day": "5", "shift_code": "ดึก"}]
        })

        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_delete_entry(self, client, api_db, site, open_period):
        member = make_staff(api_db, site)
        roster = make_roster(api_db, site, *open_period)
        stored = make_entry(api_db, roster, member, 1, "ขาด")

        response = client.delete(f"{API}/rosters/entries/{stored.id}")

        assert response.status_code == 200
        assert api_db.query(RosterEntry).count() == 0

    def test_day_stats(self, client, api_db, site, open_period):
        make_staff(api_db, site, default_shift="1")
        roster = make_roster(api_db, site, *open_period)

        response = client.get(f"{API}/rosters/{roster.id}/stats", params={"day": 1})

        assert response.status_code == 200
        assert response.json()["stats"]["working"] == 1


class TestStaffRoutes:

    def test_default_shift(self, client, api_db, site):
        member = make_staff(api_db, site, default_shift="1")
        past = make_roster(api_db, site, 2000, 2)

        response = client.post(f"{API}/staff/{member.id}/default-shift", json={"default_shift": "2"})

        assert response.status_code == 200
        assert response.json()["staff"]["default_shift"] == "2"
        assert api_db.query(RosterEntry).filter(RosterEntry.roster_id == past.id).count() == 29

    def test_default_shift_unknown_code(self, client, api_db, site):
        member = make_staff(api_db, site)

        response = client.post(f"{API}/staff/{member.id}/default-shift", json={"default_shift": "X"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_SHIFT_CODE"

    def test_weekly_off_day_out_of_range(self, client, api_db, site):
        member = make_staff(api_db, site)

        response = client.post(f"{API}/staff/{member.id}/weekly-off-day", json={"weekly_off_day": 9})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_RANGE"

    def test_toggle_status(self, client, api_db, site):
        member = make_staff(api_db, site)

        response = client.post(f"{API}/staff/{member.id}/toggle-status")

        assert response.json()["staff"]["is_active"] is False

    def test_reorder(self, client, api_db, site):
        a = make_staff(api_db, site, name="A")
        b = make_staff(api_db, site, name="B")

        response = client.post(f"{API}/staff/reorder", json={
            "project_id": site.id, "ordered_staff_ids": [b.id, a.id]
        })

        assert response.status_code == 200
        api_db.refresh(a)
        assert a.display_order == 2


class TestReportAndProjectRoutes:

    def test_monthly_report(self, client, api_db, site):
        make_staff(api_db, site, default_shift="1", wage_per_day=500)
        make_roster(api_db, site, 2024, 2)

        response = client.get(f"{API}/reports/monthly", params={"project_id": site.id, "year": 2024, "month": 2})

        assert response.status_code == 200
        assert response.json()["report"]["totals"]["total_work_days"] == 29

    def test_overview(self, client, api_db, site):
        response = client.get(f"{API}/reports/overview", params={"year": 2024, "month": 2})

        assert response.status_code == 200
        assert response.json()["overview"]["project_count"] == 1

    def test_edit_cutoff_roundtrip(self, client, site):
        response = client.put(f"{API}/projects/{site.id}/edit-cutoff", json={
            "edit_cutoff_day": 10, "edit_cutoff_next_month": False
        })
        assert response.status_code == 200

        cutoff = client.get(f"{API}/projects/{site.id}/edit-cutoff").json()
        assert cutoff["edit_cutoff_day"] == 10
        assert cutoff["edit_cutoff_next_month"] is False

    def test_edit_cutoff_out_of_range(self, client, site):
        response = client.put(f"{API}/projects/{site.id}/edit-cutoff", json={"edit_cutoff_day": 40})

        assert response.status_code == 400
