import pytest

pytestmark = pytest.mark.db_isolation


@pytest.mark.parametrize("method,endpoint", [
    ("get", "/api/settings/"),
    ("get", "/api/settings/experience_start_date"),
    ("put", "/api/settings/experience_start_date"),
])
def test_settings_require_auth(client, method, endpoint):
    r = getattr(client, method)(endpoint, json={"value": "2020-01-01"})
    assert r.status_code == 401


def test_settings_forbidden_for_non_admin(user_client):
    assert user_client.get("/api/settings/").status_code == 403


def test_missing_setting_is_404(admin_client):
    r = admin_client.get("/api/settings/home_image")
    assert r.status_code == 404
    assert r.get_json()["message"] == "Setting not found"


def test_upsert_and_list(admin_client):
    r = admin_client.put("/api/settings/home_image", json={"value": "/images/me.jpg", "description": "Hero"})
    assert r.status_code == 200
    assert r.get_json()["value"] == "/images/me.jpg"
    r = admin_client.put("/api/settings/home_image", json={"value": "/images/new.jpg"})
    assert r.get_json()["value"] == "/images/new.jpg"
    assert r.get_json()["description"] == "Hero"
    keys = [s["key"] for s in admin_client.get("/api/settings/").get_json()]
    assert keys.count("home_image") == 1


def test_rejects_missing_value_and_bad_type(admin_client):
    assert admin_client.put("/api/settings/x", json={}).status_code == 400
    assert admin_client.put("/api/settings/x", json={"value": "1", "type": "blob"}).status_code == 400


def test_start_date_must_parse(admin_client):
    r = admin_client.put("/api/settings/experience_start_date", json={"value": "whenever"})
    assert r.status_code == 400


def test_start_date_change_moves_current_experience(admin_client, fixed_clock):
    r = admin_client.put("/api/settings/experience_start_date", json={"value": "2020-01-01T00:00:00Z"})
    assert r.status_code == 200
    assert r.get_json()["value"] == "2020-01-01"
    current = admin_client.get("/api/experience/current").get_json()
    assert current["years"] == 4.4
    assert current["level"]["label"] == "Mid-Level"
    assert current["startDate"] == "2020-01-01"
