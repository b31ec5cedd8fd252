from portfolio import db
from portfolio.models import User
from tests.factories import create_user


def test_login_success_me_and_logout(client):
    create_user("loginuser", password="pass123")
    resp = client.post("/api/auth/login", json={"username": "loginuser", "password": "pass123"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["username"] == "loginuser"
    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.get_json()["user"]["role"] == "user"
    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/auth/me").status_code == 401


def test_login_is_case_insensitive_and_accepts_email(client):
    user = create_user("MixedCase", password="pw")
    user.email = "mixed@example.com"
    db.session.commit()
    assert client.post("/api/auth/login", json={"username": "mixedcase", "password": "pw"}).status_code == 200
    other = client.application.test_client()
    assert other.post("/api/auth/login", json={"username": "mixed@example.com", "password": "pw"}).status_code == 200


def test_login_records_last_login(client):
    create_user("stamp", password="pw")
    client.post("/api/auth/login", json={"username": "stamp", "password": "pw"})
    db.session.expire_all()
    assert User.query.filter_by(username="stamp").one().last_login is not None


def test_login_failure(client):
    resp = client.post("/api/auth/login", json={"username": "unknown", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_login_requires_fields(client):
    assert client.post("/api/auth/login", json={"username": "x"}).status_code == 400


def test_logout_requires_auth(client):
    assert client.post("/api/auth/logout").status_code == 401


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.get_json()["status"] == "OK"


def test_unknown_route_is_json_404(client):
    r = client.get("/api/does-not-exist")
    assert r.status_code == 404
    assert r.get_json()["error"] == "not_found"


def test_login_does_not_leak_into_other_clients(client, user_client):
    assert user_client.get("/api/auth/me").status_code == 200
    assert client.get("/api/auth/me").status_code == 401
    assert user_client.get("/api/auth/me").get_json()["user"]["username"] == "plain_user"
