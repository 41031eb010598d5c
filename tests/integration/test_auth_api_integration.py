from storefront.utils.security import COOKIE_NAME


def test_login_sets_strict_http_only_cookie(client, admin_credentials):
    resp = client.post("/api/auth/login", json=admin_credentials)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Logged in successfully"}
    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith(f"{COOKIE_NAME}=")
    assert "HttpOnly" in set_cookie
    assert "samesite=strict" in set_cookie.lower()
    assert "Max-Age=86400" in set_cookie


def test_wrong_password_and_unknown_email_look_the_same(client, admin_credentials):
    wrong = client.post("/api/auth/login", json={**admin_credentials, "password": "nope"})
    unknown = client.post("/api/auth/login", json={**admin_credentials, "email": "ghost@example.com"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "Invalid credentials"}
    assert COOKIE_NAME not in wrong.cookies


def test_login_body_validation(client):
    resp = client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid input"


def test_login_without_jwt_secret_is_500(client, admin_credentials, monkeypatch):
    from storefront import config

    monkeypatch.setattr(config, "JWT_SECRET", "")
    resp = client.post("/api/auth/login", json=admin_credentials)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


def test_logout_clears_cookie(admin_client):
    resp = admin_client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert f'{COOKIE_NAME}=""' in resp.headers["set-cookie"] or "Max-Age=0" in resp.headers["set-cookie"]
