import datetime
import os
import sys
import tempfile

import pytest
from flask import g

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Point the app at a throwaway SQLite file BEFORE it is imported
_TMP_DIR = tempfile.mkdtemp(prefix="portfolio-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}")
os.environ.setdefault("EXPERIENCE_DEFAULT_START_DATE", "2019-01-01")

from portfolio import create_app, db  # noqa: E402
from portfolio.services.experience_service import seed_default_levels  # noqa: E402
from tests.factories import create_user  # noqa: E402

FIXED_NOW = datetime.datetime(2024, 6, 1, 12, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})

    # Test requests reuse the app context pushed below, so Flask-Login's
    # cached user on `g` would otherwise follow one client into the next.
    @app.before_request
    def _drop_cached_login_user():
        g.pop("_login_user", None)

    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        db.session.remove()
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


def pytest_configure(config):  # register custom marker
    config.addinivalue_line("markers", "db_isolation: force per-test DB rebuild for this test")


@pytest.fixture(autouse=True)
def _conditional_db_isolation(request, test_app, _push_app_context):
    """Recreate DB only for tests marked with @pytest.mark.db_isolation.

    Unmarked tests reuse the existing session DB for speed.
    """
    if "db_isolation" in request.keywords:
        db.session.remove()
        db.drop_all()
        db.create_all()
        seed_default_levels()
    yield


@pytest.fixture()
def fixed_clock(test_app, monkeypatch):
    """Freeze the app clock at FIXED_NOW (2024-06-01 12:00 UTC)."""
    monkeypatch.setitem(test_app.config, "CLOCK", lambda: FIXED_NOW)
    return FIXED_NOW


def _login(client, username, password):
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return client


@pytest.fixture()
def admin_client(test_app):
    create_user("site_admin", password="pass", role="admin")
    return _login(test_app.test_client(), "site_admin", "pass")


@pytest.fixture()
def user_client(test_app):
    create_user("plain_user", password="pass", role="user")
    return _login(test_app.test_client(), "plain_user", "pass")
