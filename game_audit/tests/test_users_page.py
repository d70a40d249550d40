"""
The users page form: create, update, delete and recovery links.
"""
import re

from app import mail
from app.models.delete_request import DeleteRequest
from app.models.user import User

NEW_PASSWORD = "N3w!Secure#Pass"


def _form_action(client):
    page = client.get("/users").get_data(as_text=True)
    match = re.search(r'<form method="post" action="([^"]+)" id="userForm"', page)
    assert match, "users form not rendered"
    return match.group(1)


def _user_fields(**overrides):
    data = {
        "id": "",
        "name": "Floor Cashier",
        "email": "floor@royalgaming.com",
        "password": NEW_PASSWORD,
        "role": "Silver",
        "location_id": "",
        "status": "Active",
        "phone": "",
        "department": "",
        "submit": "Save",
    }
    data.update(overrides)
    return data


def test_rendered_form_creates_a_user(make_user, login, location):
    client = login(make_user("SuperAdmin"))
    action = _form_action(client)
    assert action == "/users/save"

    response = client.post(action, data=_user_fields(location_id=str(location.id)))
    assert response.status_code == 302
    user = User.query.filter_by(email="floor@royalgaming.com").one()
    assert user.role == "Silver"
    assert user.location_id == location.id
    assert user.check_password(NEW_PASSWORD)


def test_location_admin_creates_in_own_location(make_user, login, location, xhr):
    client = login(make_user("LocationAdmin", location))
    response = client.post(_form_action(client), headers=xhr, data=_user_fields())
    assert response.status_code == 200
    assert response.get_json()["user"]["location_id"] == location.id


def test_roles_outside_the_hierarchy_are_refused(make_user, login, location, xhr):
    client = login(make_user("LocationAdmin", location))
    response = client.post("/users/save", headers=xhr, data=_user_fields(role="SuperAdmin"))
    assert response.status_code == 400
    assert User.query.filter_by(email="floor@royalgaming.com").first() is None


def test_weak_password_is_refused_on_create(make_user, login, xhr):
    client = login(make_user("SuperAdmin"))
    response = client.post("/users/save", headers=xhr, data=_user_fields(password="short"))
    assert response.status_code == 400
    assert User.query.filter_by(email="floor@royalgaming.com").first() is None


def test_update_keeps_password_when_left_blank(make_user, login, location, xhr):
    target = make_user("MSP", location, email="msp@royalgaming.com")
    client = login(make_user("Manager", location))
    response = client.post("/users/save", headers=xhr, data=_user_fields(
        id=str(target.id), name="Renamed", email="msp@royalgaming.com", password="", role="Audit",
        location_id=str(location.id),
    ))
    assert response.status_code == 200
    assert response.get_json()["message"] == "User updated."
    assert target.name == "Renamed"
    assert target.role == "Audit"
    assert target.check_password("Str0ng!Passw0rd")


def test_delete_button_removes_user_for_admins(make_user, login, location, xhr):
    target = make_user("Audit", location)
    target_id = target.id
    client = login(make_user("SuperAdmin"))
    response = client.post("/users/save", headers=xhr, data={"id": str(target_id), "delete": "Delete"})
    assert response.status_code == 200
    assert User.query.filter_by(id=target_id).first() is None


def test_delete_button_files_a_request_for_managers(make_user, login, location, xhr):
    target = make_user("Audit", location)
    client = login(make_user("Manager", location))
    response = client.post("/users/save", headers=xhr, data={"id": str(target.id), "delete": "Delete"})
    assert response.status_code == 201
    assert DeleteRequest.query.one().status == "pending"
    assert User.query.filter_by(id=target.id).count() == 1


def test_reset_button_mails_a_recovery_link(make_user, login, location, xhr):
    target = make_user("Silver", location)
    client = login(make_user("LocationAdmin", location))
    with mail.record_messages() as outbox:
        response = client.post("/users/save", headers=xhr,
                               data={"id": str(target.id), "reset_password": "Send reset link"})
    assert response.status_code == 200
    assert [m.recipients for m in outbox] == [[target.email]]


def test_buttons_need_a_selected_user(make_user, login, xhr):
    client = login(make_user("SuperAdmin"))
    assert client.post("/users/save", headers=xhr, data={"delete": "Delete"}).status_code == 400
    assert client.post("/users/save", headers=xhr, data={"id": "999", "delete": "Delete"}).status_code == 404


def test_operational_roles_cannot_submit(make_user, login, location):
    client = login(make_user("Audit", location))
    assert client.post("/users/save", data=_user_fields()).status_code == 403
    assert User.query.filter_by(email="floor@royalgaming.com").first() is None
