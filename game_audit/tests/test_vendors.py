import pytest

from app.models.vendor import Vendor
from app.vendors.forms import format_phone


@pytest.mark.parametrize("raw, expected", [
    ("9876543210", "987-654-3210"),
    ("(987) 654 3210", "987-654-3210"),
    ("987-654-3210", "987-654-3210"),
    ("98765", None),
    ("98765432101", None),
    ("", None),
    (None, None),
])
def test_format_phone(raw, expected):
    assert format_phone(raw) == expected


def _vendor_payload(**overrides):
    data = {"vendor_id": "V-100", "name": "Lucky Slots", "phone": "9876543210", "status": "Active"}
    data.update(overrides)
    return data


def test_manager_upserts_vendor(make_user, login, location, xhr):
    client = login(make_user("Manager", location))
    created = client.post("/vendors/save", headers=xhr, data=_vendor_payload())
    assert created.status_code == 200
    assert created.get_json()["message"] == "Vendor added."

    updated = client.post("/vendors/save", headers=xhr, data=_vendor_payload(name="Lucky Slots Ltd", status="Inactive"))
    assert updated.get_json()["message"] == "Vendor updated."

    vendor = Vendor.query.one()
    assert vendor.name == "Lucky Slots Ltd"
    assert vendor.phone == "987-654-3210"
    assert vendor.status == "Inactive"


def test_invalid_phone_is_rejected(make_user, login, xhr):
    client = login(make_user("SuperAdmin"))
    response = client.post("/vendors/save", headers=xhr, data=_vendor_payload(phone="12345"))
    assert response.status_code == 400
    assert "Invalid phone number" in response.get_json()["message"]
    assert Vendor.query.count() == 0


def test_audit_role_cannot_write_vendors(make_user, login, location):
    client = login(make_user("Audit", location))
    assert client.get("/vendors").status_code == 200
    assert client.post("/vendors/save", data=_vendor_payload()).status_code == 403
    assert client.post("/vendors/V-100/delete").status_code == 403


def test_vendor_listing_is_paginated(db, make_user, login):
    for i in range(7):
        db.session.add(Vendor(vendor_id=f"V-{i:03d}", name=f"Vendor {i}", status="Active"))
    db.session.commit()
    client = login(make_user("LocationAdmin"))

    first = client.get("/vendors/data").get_json()
    assert first["total"] == 7
    assert len(first["vendors"]) == 5
    second = client.get("/vendors/data?page=2").get_json()
    assert len(second["vendors"]) == 2


def test_delete_vendor(db, make_user, login, xhr):
    db.session.add(Vendor(vendor_id="V-9", name="Old Vendor", status="Inactive"))
    db.session.commit()
    client = login(make_user("Manager"))
    response = client.post("/vendors/V-9/delete", headers=xhr)
    assert response.status_code == 200
    assert db.session.get(Vendor, "V-9") is None


def test_delete_button_on_form_removes_vendor(db, make_user, login, xhr):
    db.session.add(Vendor(vendor_id="V-1", name="Lucky Slots", phone="987-654-3210", status="Active"))
    db.session.commit()
    client = login(make_user("Manager"))
    response = client.post("/vendors/save", headers=xhr, data=_vendor_payload(vendor_id="V-1", delete="Delete"))
    assert response.status_code == 200
    assert response.get_json()["message"] == "Vendor deleted."
    assert db.session.get(Vendor, "V-1") is None


def test_delete_button_needs_edit_rights(db, make_user, login, location):
    db.session.add(Vendor(vendor_id="V-1", name="Lucky Slots", status="Active"))
    db.session.commit()
    client = login(make_user("Audit", location))
    response = client.post("/vendors/save", data=_vendor_payload(vendor_id="V-1", delete="Delete"))
    assert response.status_code == 403
    assert db.session.get(Vendor, "V-1") is not None
