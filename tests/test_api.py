def test_health_endpoints(api_client):
    health = api_client.get("/health")
    db_health = api_client.get("/health/db")

    assert health.status_code == 200
    assert health.json() == {"ok": True}
    assert db_health.status_code == 200
    assert db_health.json() == {"db": "ok"}


def test_protected_routes_require_auth(api_client):
    for path in ("/briefings", "/workflows", "/sessions", "/assets", "/campaigns", "/user/profile"):
        resp = api_client.get(path)
        assert resp.status_code == 401, path
        assert resp.json()["code"] == "missing_token"


def test_garbage_token_is_rejected(api_client):
    resp = api_client.get("/briefings", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401
    assert resp.json() == {"detail": "Invalid or expired token", "code": "invalid_token"}


def test_unknown_resource_renders_domain_error(api_client, login):
    headers = login("social@example.com")

    resp = api_client.get("/workflows/does-not-exist", headers=headers)

    assert resp.status_code == 404
    assert resp.json() == {"detail": "Workflow not found", "code": "not_found"}
