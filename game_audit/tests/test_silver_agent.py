"""
Agent slips: numbering, machine checks, delete rights and totals.
"""
from datetime import date
from types import SimpleNamespace

import pytest

from app.models.machine import Machine
from app.models.silver import AgentSilverSlip
from app.silver_agent.slips import (
    SlipValidationError,
    can_delete_slip,
    next_slip_number,
    summarize_slips,
    validate_slip_machine,
)

TODAY = date(2024, 6, 15)


@pytest.fixture
def machines(db, location, other_location):
    db.session.add_all([
        Machine(machine_id="M-1", machine_name="Golden Reels", location_id=location.id, health_status="Good"),
        Machine(machine_id="M-2", machine_name="Tiger", location_id=location.id, health_status="Critical"),
        Machine(machine_id="M-3", machine_name="Lotus", location_id=other_location.id, health_status="Warning"),
    ])
    db.session.commit()


def _slip(location, slip_no, serial, category="regular", day=TODAY, **fields):
    return AgentSilverSlip(
        slip_no=slip_no, serial=serial, slip_category=category, slip_date=day,
        location_id=location.id, machine_no=fields.pop("machine_no", "M-1"), **fields,
    )


class TestNumbering:

    def test_first_slip_of_the_day(self, app, location):
        assert next_slip_number("regular", location.id, TODAY) == ("AS-20240615-001", 1)
        assert next_slip_number("bonus", location.id, TODAY) == ("BS-20240615-001", 1)

    def test_continues_after_highest_serial(self, db, location, other_location):
        db.session.add_all([
            _slip(location, "AS-20240615-001", 1),
            _slip(location, "AS-20240615-003", 3),
            _slip(location, "BS-20240615-001", 1, category="bonus", machine_no="BONUS"),
            _slip(location, "AS-20240614-009", 9, day=date(2024, 6, 14)),
        ])
        db.session.commit()
        assert next_slip_number("regular", location.id, TODAY) == ("AS-20240615-004", 4)
        assert next_slip_number("bonus", location.id, TODAY) == ("BS-20240615-002", 2)
        assert next_slip_number("regular", other_location.id, TODAY) == ("AS-20240615-001", 1)


class TestMachineValidation:

    def test_operational_machine_at_location(self, machines, location):
        assert validate_slip_machine("M-1", location.id).machine_id == "M-1"

    @pytest.mark.parametrize("machine_no", ["M-404", "M-2", "M-3"])
    def test_rejected_machines(self, machines, location, machine_no):
        with pytest.raises(SlipValidationError):
            validate_slip_machine(machine_no, location.id)


def test_delete_rights():
    slip = SimpleNamespace(location_id=1)
    assert can_delete_slip(SimpleNamespace(role="SuperAdmin", location_id=None), slip)
    assert can_delete_slip(SimpleNamespace(role="LocationAdmin", location_id=1), slip)
    assert not can_delete_slip(SimpleNamespace(role="LocationAdmin", location_id=2), slip)
    assert not can_delete_slip(SimpleNamespace(role="SilverAgent", location_id=1), slip)
    assert not can_delete_slip(SimpleNamespace(role="Manager", location_id=1), slip)


def test_summary_splits_amount_and_bonus():
    slips = [
        SimpleNamespace(is_bonus=False, amount=100.0, bonus_amount=0.0),
        SimpleNamespace(is_bonus=False, amount=50.5, bonus_amount=0.0),
        SimpleNamespace(is_bonus=True, amount=0.0, bonus_amount=20.0),
    ]
    summary = summarize_slips(slips)
    assert summary.total_slips == 3
    assert summary.total_amount == 150.5
    assert summary.total_bonus == 20.0
    assert summary.grand_total == 170.5


class TestSlipRoutes:

    def test_agent_issues_regular_and_bonus_slips(self, machines, make_user, login, location, xhr):
        agent = make_user("SilverAgent", location, email="ravi@royalgaming.com")
        client = login(agent)

        regular = client.post("/silver-agent/save", headers=xhr, data={
            "slip_category": "regular", "machine_no": "M-1", "amount": "250",
        })
        assert regular.status_code == 200
        slip = regular.get_json()["slip"]
        assert slip["slip_no"] == "AS-20240615-001"
        assert slip["agent_name"] == "ravi"
        assert slip["status"] == "Unpaid"

        bonus = client.post("/silver-agent/save", headers=xhr, data={
            "slip_category": "bonus", "bonus_type": "Raffle", "bonus_amount": "40",
        })
        assert bonus.status_code == 200
        assert bonus.get_json()["slip"]["slip_no"] == "BS-20240615-001"

        summary = client.get("/silver-agent/data").get_json()["summary"]
        assert summary == {"total_slips": 2, "total_amount": 250.0, "total_bonus": 40.0, "grand_total": 290.0}

    def test_regular_slip_needs_operational_machine(self, machines, make_user, login, location, xhr):
        client = login(make_user("SilverAgent", location))
        response = client.post("/silver-agent/save", headers=xhr, data={
            "slip_category": "regular", "machine_no": "M-2", "amount": "10",
        })
        assert response.status_code == 400
        assert AgentSilverSlip.query.count() == 0

    def test_bonus_slip_needs_type_and_amount(self, make_user, login, location, xhr):
        client = login(make_user("SilverAgent", location))
        response = client.post("/silver-agent/save", headers=xhr, data={"slip_category": "bonus", "bonus_amount": "5"})
        assert response.status_code == 400

    def test_paid_slips_are_frozen(self, db, make_user, login, location, xhr):
        db.session.add(_slip(location, "AS-20240615-001", 1, amount=10.0, is_paid=True))
        db.session.commit()
        client = login(make_user("LocationAdmin", location))
        response = client.post("/silver-agent/save", headers=xhr, data={
            "slip_no": "AS-20240615-001", "slip_category": "regular", "machine_no": "M-1", "amount": "99",
        })
        assert response.status_code == 409

    def test_agent_cannot_edit_old_slips(self, db, machines, make_user, login, location):
        db.session.add(_slip(location, "AS-20240610-001", 1, day=date(2024, 6, 10), amount=10.0))
        db.session.commit()
        client = login(make_user("SilverAgent", location))
        response = client.post("/silver-agent/save", data={
            "slip_no": "AS-20240610-001", "slip_category": "regular", "machine_no": "M-1", "amount": "99",
        })
        assert response.status_code == 403

    def test_only_admins_delete_slips(self, db, make_user, login, location, xhr):
        db.session.add(_slip(location, "AS-20240615-001", 1, amount=10.0))
        db.session.commit()
        agent_client = login(make_user("SilverAgent", location))
        assert agent_client.post("/silver-agent/slips/AS-20240615-001/delete", headers=xhr).status_code == 403
        admin_client = login(make_user("LocationAdmin", location))
        assert admin_client.post("/silver-agent/slips/AS-20240615-001/delete", headers=xhr).status_code == 200
        assert AgentSilverSlip.query.count() == 0

    def test_show_slip(self, db, make_user, login, location):
        db.session.add(_slip(location, "AS-20240615-001", 1, amount=10.0))
        db.session.commit()
        client = login(make_user("SilverAgent", location))
        body = client.get("/silver-agent/slips/AS-20240615-001").get_json()
        assert body["slip"]["amount"] == 10.0
        assert body["can_delete"] is False
        assert client.get("/silver-agent/slips/NOPE").status_code == 404

    def test_agent_cannot_edit_slips_of_another_location(self, db, machines, make_user, login,
                                                         location, other_location, xhr):
        db.session.add(_slip(other_location, "AS-20240615-001", 1, machine_no="M-3", amount=10.0))
        db.session.commit()
        client = login(make_user("SilverAgent", location))
        response = client.post("/silver-agent/save", headers=xhr, data={
            "slip_no": "AS-20240615-001", "slip_category": "regular", "machine_no": "M-1", "amount": "99",
        })
        assert response.status_code == 403
        slip = AgentSilverSlip.query.filter_by(slip_no="AS-20240615-001").one()
        assert slip.amount == 10.0
        assert slip.machine_no == "M-3"

    def test_delete_button_on_form_removes_slip(self, db, make_user, login, location, xhr):
        db.session.add(_slip(location, "AS-20240615-001", 1, amount=10.0))
        db.session.commit()
        client = login(make_user("LocationAdmin", location))
        response = client.post("/silver-agent/save", headers=xhr, data={
            "slip_no": "AS-20240615-001", "slip_category": "regular", "delete": "Delete",
        })
        assert response.status_code == 200
        assert AgentSilverSlip.query.count() == 0

    def test_delete_button_refused_for_agents(self, db, make_user, login, location, xhr):
        db.session.add(_slip(location, "AS-20240615-001", 1, amount=10.0))
        db.session.commit()
        client = login(make_user("SilverAgent", location))
        response = client.post("/silver-agent/save", headers=xhr, data={
            "slip_no": "AS-20240615-001", "delete": "Delete",
        })
        assert response.status_code == 403
        assert AgentSilverSlip.query.count() == 1
