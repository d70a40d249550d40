"""
Daily meter audits and the edit window for the Audit role.
"""
from datetime import date

import pytest

from app.audit.meters import previous_meters
from app.models.audit import AuditEntry


@pytest.fixture
def history(db, location, other_location):
    db.session.add_all([
        AuditEntry(machine_no="M-1", entry_date=date(2024, 6, 10), cur_in=100, cur_out=40, location_id=location.id),
        AuditEntry(machine_no="M-1", entry_date=date(2024, 6, 12), cur_in=180, cur_out=75, location_id=location.id),
        AuditEntry(machine_no="M-1", entry_date=date(2024, 6, 12), cur_in=900, cur_out=900,
                   location_id=other_location.id),
    ])
    db.session.commit()


def test_previous_meters_take_latest_earlier_entry(history, location):
    assert previous_meters("M-1", location.id, date(2024, 6, 15)) == (180, 75)
    assert previous_meters("M-1", location.id, date(2024, 6, 12)) == (100, 40)
    assert previous_meters("M-1", location.id, date(2024, 6, 10)) is None
    assert previous_meters("M-2", location.id, date(2024, 6, 15)) is None


def test_previous_endpoint(history, make_user, login, location):
    client = login(make_user("Audit", location))
    found = client.get("/audit/previous?machine_no=M-1&date=2024-06-15").get_json()
    assert found == {"success": True, "found": True, "prev_in": 180, "prev_out": 75,
                     "message": "Previous audit loaded"}
    missing = client.get("/audit/previous?machine_no=M-9&date=2024-06-15").get_json()
    assert missing["found"] is False
    assert client.get("/audit/previous?machine_no=M-1").status_code == 400


def test_audit_user_saves_today_with_carried_meters(history, make_user, login, location, xhr):
    client = login(make_user("Audit", location))
    response = client.post("/audit/save", headers=xhr, data={
        "machine_no": "M-1", "entry_date": "2024-06-15", "cur_in": "250", "cur_out": "90", "jackpot": "5",
    })
    assert response.status_code == 200
    entry = response.get_json()["entry"]
    assert (entry["prev_in"], entry["prev_out"]) == (180, 75)
    assert entry["location_id"] == location.id


def test_audit_user_may_correct_yesterday(make_user, login, location, xhr):
    client = login(make_user("Audit", location))
    response = client.post("/audit/save", headers=xhr, data={"machine_no": "M-2", "entry_date": "2024-06-14"})
    assert response.status_code == 200


@pytest.mark.parametrize("day", ["2024-06-13", "2024-06-16"])
def test_audit_user_blocked_outside_window(make_user, login, location, day):
    client = login(make_user("Audit", location))
    response = client.post("/audit/save", data={"machine_no": "M-2", "entry_date": day})
    assert response.status_code == 403
    assert AuditEntry.query.count() == 0


def test_manager_cannot_write_audits(make_user, login, location):
    client = login(make_user("Manager", location))
    response = client.post("/audit/save", data={"machine_no": "M-2", "entry_date": "2024-06-15"})
    assert response.status_code == 403


def test_superadmin_backfills_old_dates(make_user, login, location, xhr):
    client = login(make_user("SuperAdmin", location))
    response = client.post("/audit/save", headers=xhr, data={
        "machine_no": "M-3", "entry_date": "2023-01-01", "location_id": str(location.id),
    })
    assert response.status_code == 200


def test_page_marks_old_dates_read_only(make_user, login, location):
    client = login(make_user("Audit", location))
    old = client.get("/audit?date=2024-06-01").get_data(as_text=True)
    assert "read-only access" in old
    assert 'disabled' in old
    today = client.get("/audit").get_data(as_text=True)
    assert "read-only access" not in today
    assert client.get("/audit/data?date=2024-06-14").get_json()["can_edit"] is True


@pytest.fixture
def todays_entry(db, location):
    entry = AuditEntry(machine_no="M-1", entry_date=date(2024, 6, 15), prev_in=180, prev_out=75,
                       cur_in=250, cur_out=90, location_id=location.id)
    db.session.add(entry)
    db.session.commit()
    return entry


def test_audit_user_corrects_an_entry_in_place(todays_entry, make_user, login, location, xhr):
    client = login(make_user("Audit", location))
    response = client.post("/audit/save", headers=xhr, data={
        "id": str(todays_entry.id), "machine_no": "M-1", "entry_date": "2024-06-15",
        "prev_in": "180", "prev_out": "75", "cur_in": "260", "cur_out": "95",
    })
    assert response.status_code == 200
    assert response.get_json()["entry"]["id"] == todays_entry.id
    assert AuditEntry.query.count() == 1
    assert AuditEntry.query.one().cur_in == 260


def test_audit_user_deletes_an_entry(todays_entry, make_user, login, location, xhr):
    client = login(make_user("Audit", location))
    response = client.post(f"/audit/{todays_entry.id}/delete", headers=xhr)
    assert response.status_code == 200
    assert AuditEntry.query.count() == 0


def test_delete_button_on_form_removes_entry(todays_entry, make_user, login, location, xhr):
    client = login(make_user("Audit", location))
    response = client.post("/audit/save", headers=xhr, data={"id": str(todays_entry.id), "delete": "Delete"})
    assert response.status_code == 200
    assert AuditEntry.query.count() == 0


def test_old_entries_cannot_be_changed(db, make_user, login, location):
    old = AuditEntry(machine_no="M-1", entry_date=date(2024, 6, 1), location_id=location.id)
    db.session.add(old)
    db.session.commit()
    client = login(make_user("Audit", location))
    assert client.post(f"/audit/{old.id}/delete").status_code == 403
    response = client.post("/audit/save", data={"id": str(old.id), "machine_no": "M-1", "entry_date": "2024-06-15"})
    assert response.status_code == 403
    assert db.session.get(AuditEntry, old.id).entry_date == date(2024, 6, 1)


def test_entries_of_another_location_are_protected(todays_entry, make_user, login, other_location, xhr):
    client = login(make_user("Audit", other_location))
    assert client.post(f"/audit/{todays_entry.id}/delete", headers=xhr).status_code == 403
    assert AuditEntry.query.count() == 1


def test_unknown_entry(make_user, login, location, xhr):
    client = login(make_user("Audit", location))
    assert client.post("/audit/999/delete", headers=xhr).status_code == 404
