from datetime import date
from types import SimpleNamespace

import pytest

from app.models.msp import MspEntry
from app.msp.grid import build_msp_grid


def _entry(machine_no, amount, entry_type="MSP"):
    return SimpleNamespace(machine_no=machine_no, amount=amount, entry_type=entry_type)


def test_grid_groups_by_machine_in_entry_order():
    grid = build_msp_grid([
        _entry("M-2", 50),
        _entry("M-1", 10),
        _entry("M-2", 25),
        _entry("M-2", 40, "EOD"),
        _entry("M-2", 99, "EOD"),
        _entry("M-1", 5, "EOD"),
    ])
    assert [row.machine_no for row in grid.rows] == ["M-2", "M-1"]
    assert grid.msp_columns == 2
    m2, m1 = grid.rows
    assert m2.msp_amounts == [50, 25]
    assert m2.eod_amount == 40
    assert m2.total == 214
    assert m1.padded(2) == [10, None]
    assert grid.daily_total == 229
    assert grid.to_dict()["columns"] == ["MSP1", "MSP2"]


def test_empty_grid():
    grid = build_msp_grid([])
    assert grid.rows == []
    assert grid.msp_columns == 0
    assert grid.daily_total == 0


@pytest.fixture
def msp_user(make_user, location):
    return make_user("MSP", location)


def test_msp_user_records_entry_for_today(msp_user, login, location, other_location, xhr):
    client = login(msp_user)
    response = client.post("/msp/save", headers=xhr, data={
        "entry_date": "2024-06-15", "location_id": str(other_location.id), "machine_no": "M-1",
        "entry_type": "MSP", "amount": "0",
    })
    assert response.status_code == 200
    assert response.get_json()["entry"]["location_id"] == location.id

    grid = client.get("/msp/data?date=2024-06-15").get_json()["grid"]
    assert grid["rows"][0]["machine_no"] == "M-1"


def test_old_entries_cannot_be_moved_into_the_window(db, msp_user, login, location):
    old = MspEntry(entry_date=date(2024, 6, 1), location_id=location.id, machine_no="M-1", amount=10)
    db.session.add(old)
    db.session.commit()
    client = login(msp_user)
    response = client.post("/msp/save", data={
        "id": str(old.id), "entry_date": "2024-06-15", "machine_no": "M-1", "entry_type": "MSP", "amount": "20",
    })
    assert response.status_code == 403
    assert client.post(f"/msp/{old.id}/delete").status_code == 403


def test_msp_user_deletes_yesterdays_entry(db, msp_user, login, location, xhr):
    entry = MspEntry(entry_date=date(2024, 6, 14), location_id=location.id, machine_no="M-1", amount=10)
    db.session.add(entry)
    db.session.commit()
    response = login(msp_user).post(f"/msp/{entry.id}/delete", headers=xhr)
    assert response.status_code == 200
    assert MspEntry.query.count() == 0


def test_manager_views_msp_read_only(make_user, login, location):
    client = login(make_user("Manager", location))
    page = client.get("/msp")
    assert page.status_code == 200
    assert "read-only access" in page.get_data(as_text=True)
    response = client.post("/msp/save", data={
        "entry_date": "2024-06-15", "machine_no": "M-1", "entry_type": "MSP", "amount": "5",
    })
    assert response.status_code == 403


def test_delete_button_on_form_removes_entry(db, msp_user, login, location, xhr):
    entry = MspEntry(entry_date=date(2024, 6, 15), location_id=location.id, machine_no="M-1", amount=10)
    db.session.add(entry)
    db.session.commit()
    response = login(msp_user).post("/msp/save", headers=xhr, data={
        "id": str(entry.id), "entry_date": "2024-06-15", "machine_no": "M-1", "entry_type": "MSP",
        "amount": "10", "delete": "Delete",
    })
    assert response.status_code == 200
    assert response.get_json()["message"] == "MSP entry deleted."
    assert MspEntry.query.count() == 0


def test_delete_button_keeps_foreign_entries(db, msp_user, login, other_location, xhr):
    entry = MspEntry(entry_date=date(2024, 6, 15), location_id=other_location.id, machine_no="M-1", amount=10)
    db.session.add(entry)
    db.session.commit()
    response = login(msp_user).post("/msp/save", headers=xhr, data={"id": str(entry.id), "delete": "Delete"})
    assert response.status_code == 403
    assert MspEntry.query.count() == 1
