import re
from datetime import datetime
from types import SimpleNamespace

import pytest

from app.models.silver import SilverPurchase
from app.silver_purchase.routes import can_approve, total_approved


def _purchase(db, entered_by, location, when=datetime(2024, 6, 15, 10, 30), amount=500.0, status="Pending"):
    purchase = SilverPurchase(
        purchase_id=f"SP-{int(when.timestamp() * 1000)}-{entered_by[:4].lower()}",
        date_time=when,
        amount=amount,
        status=status,
        entered_by=entered_by,
        location_id=location.id,
    )
    db.session.add(purchase)
    db.session.commit()
    return purchase


def test_total_approved_ignores_pending():
    purchases = [
        SimpleNamespace(status="Approved", amount=100.0),
        SimpleNamespace(status="Pending", amount=900.0),
        SimpleNamespace(status="Approved", amount=25.5),
    ]
    assert total_approved(purchases) == 125.5


def test_can_approve_requires_another_role(app):
    purchase = SimpleNamespace(status="Pending", entered_by="Silver", date_time=datetime(2024, 6, 15, 9, 0))
    assert can_approve(SimpleNamespace(role="Manager"), purchase)
    assert not can_approve(SimpleNamespace(role="Silver"), purchase)
    purchase.status = "Approved"
    assert not can_approve(SimpleNamespace(role="Manager"), purchase)


def test_silver_user_enters_purchase(make_user, login, location, xhr):
    client = login(make_user("Silver", location))
    response = client.post("/silver-purchase/save", headers=xhr, data={"date_time": "2024-06-15T09:45", "amount": "750"})
    assert response.status_code == 200
    purchase = response.get_json()["purchase"]
    assert re.fullmatch(r"SP-\d+-[0-9a-f]{4}", purchase["purchase_id"])
    assert purchase["status"] == "Pending"
    assert purchase["entered_by"] == "Silver"
    assert purchase["approved_by"] == "-"


def test_silver_user_cannot_backdate(make_user, login, location):
    client = login(make_user("Silver", location))
    response = client.post("/silver-purchase/save", data={"date_time": "2024-06-01T09:45", "amount": "750"})
    assert response.status_code == 403


def test_manager_approves_silver_purchase(db, make_user, login, location):
    purchase = _purchase(db, "Silver", location)
    client = login(make_user("Manager", location))
    response = client.post(f"/silver-purchase/{purchase.id}/approve")
    assert response.status_code == 200
    assert response.get_json()["purchase"]["approved_by"] == "Manager"

    again = client.post(f"/silver-purchase/{purchase.id}/approve")
    assert again.status_code == 409

    data = client.get("/silver-purchase/data").get_json()
    assert data["total_approved"] == 500.0


def test_same_role_cannot_approve(db, make_user, login, location):
    purchase = _purchase(db, "Manager", location)
    client = login(make_user("Manager", location))
    assert client.post(f"/silver-purchase/{purchase.id}/approve").status_code == 403


def test_location_admin_limited_to_own_location(db, make_user, login, location, other_location):
    purchase = _purchase(db, "Silver", other_location)
    client = login(make_user("LocationAdmin", location))
    assert client.post(f"/silver-purchase/{purchase.id}/approve").status_code == 403
    assert client.get("/silver-purchase/data").get_json()["purchases"] == []


def test_unknown_purchase(make_user, login):
    client = login(make_user("SuperAdmin"))
    assert client.post("/silver-purchase/999/approve").status_code == 404
