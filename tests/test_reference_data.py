from storefront.domain.models.category import Category
from storefront.domain.models.location import Location
from storefront.domain.models.user import User


# --- Categories -------------------------------------------------------------


def test_category_list_counts_products(client, make_product, category, db):
    db.add(Category(name="Accessories"))
    db.commit()
    make_product()
    make_product(name="Pixel 8")

    r = client.get("/api/categories")
    assert r.status_code == 200
    counts = {c["name"]: c["productCount"] for c in r.json()}
    assert counts == {"Accessories": 0, "Smartphones": 2}
    assert [c["name"] for c in r.json()] == ["Accessories", "Smartphones"]


def test_category_crud(client, store_admin, auth_headers):
    headers = auth_headers(store_admin)
    r = client.post("/api/categories", json={"name": "Tablets", "description": "iPad and co"}, headers=headers)
    assert r.status_code == 201
    category_id = r.json()["id"]
    assert r.json()["productCount"] == 0

    r = client.put(f"/api/categories/{category_id}", json={"description": "Large screens"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Tablets"
    assert r.json()["description"] == "Large screens"

    r = client.delete(f"/api/categories/{category_id}", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Category removed"}
    assert client.get(f"/api/categories/{category_id}").status_code == 404


def test_category_name_is_unique(client, store_admin, category, auth_headers):
    r = client.post("/api/categories", json={"name": "Smartphones"}, headers=auth_headers(store_admin))
    assert r.status_code == 400
    assert r.json()["message"] == "Category name already exists."


def test_category_in_use_cannot_be_deleted(client, store_admin, make_product, category, auth_headers):
    make_product()
    r = client.delete(f"/api/categories/{category.id}", headers=auth_headers(store_admin))
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot delete category with associated products"
    assert client.get(f"/api/categories/{category.id}").json()["productCount"] == 1


def test_category_writes_require_admin(client, customer, auth_headers):
    assert client.post("/api/categories", json={"name": "Tablets"}).status_code == 401
    assert client.post("/api/categories", json={"name": "Tablets"}, headers=auth_headers(customer)).status_code == 403


# --- Locations --------------------------------------------------------------


def test_locations_are_public_to_read(client, location, other_location):
    r = client.get("/api/locations")
    assert r.status_code == 200
    assert [loc["name"] for loc in r.json()] == ["Douala Akwa", "Yaounde Centre"]
    assert client.get(f"/api/locations/{location.id}").json()["phone"] == "+237600000001"


def test_location_writes_are_super_admin_only(client, store_admin, super_admin, auth_headers):
    body = {"name": "Bafoussam", "email": "bafoussam@example.com", "whatsappNumber": "+237677000000"}
    assert client.post("/api/locations", json=body, headers=auth_headers(store_admin)).status_code == 403

    r = client.post("/api/locations", json=body, headers=auth_headers(super_admin))
    assert r.status_code == 201
    assert r.json()["whatsappNumber"] == "+237677000000"

    r = client.put(f"/api/locations/{r.json()['id']}", json={"name": None, "address": "Marche A"}, headers=auth_headers(super_admin))
    assert r.status_code == 200
    assert r.json()["name"] == "Bafoussam"
    assert r.json()["address"] == "Marche A"


def test_location_email_is_validated(client, super_admin, auth_headers):
    r = client.post("/api/locations", json={"name": "Kribi", "email": "not-an-email"}, headers=auth_headers(super_admin))
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "email"


def test_location_with_products_cannot_be_deleted(client, super_admin, make_product, location, auth_headers):
    make_product()
    r = client.delete(f"/api/locations/{location.id}", headers=auth_headers(super_admin))
    assert r.status_code == 400
    assert r.json()["message"] == "Cannot delete location with associated products"


def test_deleting_location_detaches_users(client, super_admin, store_admin, location, auth_headers, db):
    location_id = location.id
    r = client.delete(f"/api/locations/{location_id}", headers=auth_headers(super_admin))
    assert r.status_code == 200
    assert db.get(Location, location_id) is None
    assert db.get(User, store_admin.id).location_id is None


# --- Configurations ---------------------------------------------------------


def test_missing_configuration_returns_placeholder(client, db):
    r = client.get("/api/configurations/whatsapp_number")
    assert r.status_code == 200
    data = r.json()
    assert data["configKey"] == "whatsapp_number"
    assert data["configValue"] == ""
    assert data["description"] == "Configuration not found"
    assert data["id"] is None


def test_configuration_upsert(client, store_admin, auth_headers):
    headers = auth_headers(store_admin)
    body = {"configKey": "whatsapp_number", "configValue": "+237600000000", "description": "Contact number"}
    first = client.post("/api/configurations", json=body, headers=headers)
    assert first.status_code == 201

    second = client.post(
        "/api/configurations",
        json={"configKey": "whatsapp_number", "configValue": "+237611111111"},
        headers=headers,
    )
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["description"] == "Contact number"

    r = client.get("/api/configurations/whatsapp_number")
    assert r.json()["configValue"] == "+237611111111"

    listing = client.get("/api/configurations", headers=headers).json()
    assert [c["configKey"] for c in listing] == ["whatsapp_number"]


def test_configuration_update_and_delete(client, store_admin, auth_headers):
    headers = auth_headers(store_admin)
    created = client.post(
        "/api/configurations",
        json={"configKey": "banner_text", "configValue": "Soldes"},
        headers=headers,
    ).json()

    r = client.put(f"/api/configurations/{created['id']}", json={"configValue": "Black Friday"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["configValue"] == "Black Friday"

    assert client.delete(f"/api/configurations/{created['id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/configurations/{created['id']}", headers=headers).status_code == 404


def test_configuration_list_requires_admin(client, customer, auth_headers):
    assert client.get("/api/configurations").status_code == 401
    assert client.get("/api/configurations", headers=auth_headers(customer)).status_code == 403
