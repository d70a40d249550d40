from app.locations.codes import generate_location_code, location_code_prefix
from app.models.location import Location


def test_code_prefix_uses_first_three_letters():
    assert location_code_prefix("India", "Mumbai") == "IND-MUM"
    assert location_code_prefix(" nepal ", "kathmandu") == "NEP-KAT"


def test_codes_are_numbered_per_country_and_city(db):
    assert generate_location_code("India", "Mumbai") == "IND-MUM-001"
    db.session.add(Location(code="IND-MUM-001", name="Colaba"))
    db.session.add(Location(code="IND-DEL-001", name="Connaught"))
    db.session.commit()
    assert generate_location_code("India", "Mumbai") == "IND-MUM-002"
    assert generate_location_code("India", "Delhi") == "IND-DEL-002"


def test_superadmin_creates_location_with_generated_code(make_user, login, xhr):
    client = login(make_user("SuperAdmin"))
    response = client.post("/locations/save", headers=xhr, data={
        "name": "Durbar Hall", "city": "Kathmandu", "country": "Nepal", "contact_phone": "9800000000",
    })
    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["location"]["code"] == "NEP-KAT-001"


def test_manager_can_view_but_not_edit_locations(make_user, login, location):
    client = login(make_user("Manager", location))
    page = client.get("/locations")
    assert page.status_code == 200
    assert "read-only access" in page.get_data(as_text=True)

    response = client.post("/locations/save", data={"name": "X", "city": "Y", "country": "Z"})
    assert response.status_code == 403
    assert Location.query.count() == 1


def test_delete_refuses_locations_in_use(make_user, login, location, xhr):
    admin = make_user("SuperAdmin")
    make_user("Audit", location)
    client = login(admin)
    response = client.post(f"/locations/{location.id}/delete", headers=xhr)
    assert response.status_code == 409
    assert Location.query.count() == 1


def test_delete_unused_location(make_user, login, other_location, xhr):
    client = login(make_user("LocationAdmin"))
    response = client.post(f"/locations/{other_location.id}/delete", headers=xhr)
    assert response.status_code == 200
    assert Location.query.count() == 0


def test_generated_code_counts_existing_locations(db, make_user, login, xhr):
    db.session.add(Location(code="IND-MUM-001", name="Colaba", city="Mumbai", country="India"))
    db.session.commit()
    client = login(make_user("SuperAdmin"))
    response = client.post("/locations/save", headers=xhr, data={
        "name": "Hall", "city": "Mumbai", "country": "India", "code": "",
    })
    assert response.status_code == 200
    assert response.get_json()["location"]["code"] == "IND-MUM-002"
    assert Location.query.count() == 2


def test_delete_button_on_form_removes_location(make_user, login, other_location, xhr):
    client = login(make_user("SuperAdmin"))
    response = client.post("/locations/save", headers=xhr, data={
        "id": str(other_location.id), "name": other_location.name, "city": "Pokhara", "country": "Nepal",
        "delete": "Delete",
    })
    assert response.status_code == 200
    assert response.get_json()["message"] == "Location deleted."
    assert Location.query.count() == 0
