import uuid


def test_root_and_health(client):
    assert client.get("/").json()["name"] == "Storefront API"
    assert client.get("/health").json() == {"status": "healthy"}


def test_request_id_is_echoed(client):
    request_id = uuid.uuid4().hex
    r = client.get("/health", headers={"X-Request-ID": request_id})
    assert r.headers["X-Request-ID"] == request_id

    r = client.get("/health")
    assert r.headers["X-Request-ID"]


def test_unknown_route_uses_error_body(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"message": "Not Found"}


def test_malformed_json_is_400(client, store_admin, auth_headers):
    r = client.post(
        "/api/categories",
        content=b"{not json",
        headers={**auth_headers(store_admin), "Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Validation error"
