import pytest

from portfolio.models import ContactMessage, HireRequest, Project
from portfolio.services import analytics_service
from tests.factories import create_project, create_testimonial, project_payload

pytestmark = pytest.mark.db_isolation


@pytest.mark.parametrize("method,endpoint", [
    ("get", "/api/admin/dashboard"),
    ("get", "/api/admin/projects"),
    ("post", "/api/admin/projects"),
    ("delete", "/api/admin/contacts/1"),
    ("post", "/api/admin/hire-requests/1/respond"),
    ("put", "/api/admin/testimonials/1/approve"),
    ("get", "/api/admin/analytics/geo"),
])
def test_content_admin_requires_admin(client, user_client, method, endpoint):
    assert getattr(client, method)(endpoint).status_code == 401
    assert getattr(user_client, method)(endpoint).status_code == 403


def test_project_crud(admin_client):
    created = admin_client.post("/api/admin/projects", json=project_payload("Site"))
    assert created.status_code == 201
    project_id = created.get_json()["id"]

    updated = admin_client.put(f"/api/admin/projects/{project_id}", json={"liveUrl": "https://example.com"})
    assert updated.status_code == 200
    body = updated.get_json()
    assert body["liveUrl"] == "https://example.com"
    assert body["title"] == "Site"

    assert admin_client.get(f"/api/admin/projects/{project_id}").get_json()["technologies"] == ["Python", "Flask"]
    deleted = admin_client.delete(f"/api/admin/projects/{project_id}")
    assert deleted.get_json() == {"message": "Project deleted successfully"}
    assert Project.query.count() == 0
    assert admin_client.delete(f"/api/admin/projects/{project_id}").status_code == 404


def test_project_create_validates_every_field(admin_client):
    r = admin_client.post(
        "/api/admin/projects",
        json=project_payload("Bad", technologies="Python", image="", githubUrl=42),
    )
    assert r.status_code == 400
    errors = r.get_json()["errors"]
    assert "technologies must be a list of strings" in errors
    assert "Missing required field: image" in errors
    assert "githubUrl must be a string" in errors
    assert Project.query.count() == 0


def test_project_update_rejects_bad_values(admin_client):
    project = create_project("Keep")
    r = admin_client.put(f"/api/admin/projects/{project.id}", json={"technologies": []})
    assert r.status_code == 400
    assert r.get_json()["errors"] == ["technologies must not be empty"]
    assert admin_client.put("/api/admin/projects/999", json={"title": "x"}).status_code == 404


def test_contact_reply_and_status(admin_client, client):
    client.post("/api/contact", json={"name": "Sam", "email": "sam@example.com", "message": "Hi"})
    contact = ContactMessage.query.one()

    assert admin_client.post(f"/api/admin/contacts/{contact.id}/reply", json={}).status_code == 400
    r = admin_client.post(f"/api/admin/contacts/{contact.id}/reply", json={"replyMessage": "Thanks!"})
    assert r.status_code == 200
    assert r.get_json()["status"] == "responded"
    assert r.get_json()["reply"] == "Thanks!"
    assert admin_client.post("/api/admin/contacts/999/reply", json={"replyMessage": "x"}).status_code == 404

    bad = admin_client.put(f"/api/admin/contacts/{contact.id}", json={"status": "archived"})
    assert bad.status_code == 400
    assert bad.get_json()["errors"] == ["status must be one of: pending, responded"]
    assert [c["name"] for c in admin_client.get("/api/admin/contacts").get_json()] == ["Sam"]


def test_contacts_cannot_be_created_by_admin(admin_client):
    assert admin_client.post("/api/admin/contacts", json={}).status_code == 405


def test_hire_request_respond(admin_client, client):
    client.post(
        "/api/hire",
        json={"name": "Ada", "email": "ada@example.com", "message": "m", "budget": "5k", "timeline": "Q3"},
    )
    hire = HireRequest.query.one()
    r = admin_client.post(f"/api/admin/hire-requests/{hire.id}/respond", json={"responseMessage": "Let's talk"})
    assert r.status_code == 200
    assert r.get_json()["status"] == "responded"
    assert r.get_json()["response"] == "Let's talk"


def test_testimonial_approve_and_feature(admin_client, client):
    row = create_testimonial("Dana")
    assert admin_client.put(f"/api/admin/testimonials/{row.id}/approve").get_json()["approved"] is True
    assert admin_client.put(f"/api/admin/testimonials/{row.id}/feature").get_json()["featured"] is True
    assert admin_client.put(f"/api/admin/testimonials/{row.id}/feature").get_json()["featured"] is False
    assert [t["name"] for t in client.get("/api/testimonials").get_json()] == ["Dana"]
    assert admin_client.put("/api/admin/testimonials/999/approve").status_code == 404


def test_admin_can_create_approved_testimonial(admin_client):
    r = admin_client.post(
        "/api/admin/testimonials",
        json={"name": "Kim", "email": "kim@example.com", "message": "Solid", "approved": "yes"},
    )
    assert r.status_code == 400
    assert r.get_json()["errors"] == ["approved must be a boolean"]
    r = admin_client.post(
        "/api/admin/testimonials",
        json={"name": "Kim", "email": "kim@example.com", "message": "Solid", "approved": True},
    )
    assert r.status_code == 201
    assert r.get_json()["approved"] is True


def test_dashboard_stats(admin_client, client):
    create_project("Old", views=3)
    create_project("New", views=4)
    client.post("/api/contact", json={"name": "Sam", "email": "sam@example.com", "message": "Hi"})
    create_testimonial("Pending")
    stats = admin_client.get("/api/admin/dashboard").get_json()
    assert stats["totalProjects"] == 2
    assert stats["totalViews"] == 7
    assert [p["title"] for p in stats["recentProjects"]] == ["New", "Old"]
    assert stats["pendingContacts"] == 1
    assert stats["pendingHireRequests"] == 0
    assert stats["pendingTestimonials"] == 1


def test_dashboard_stats_empty(admin_client):
    stats = admin_client.get("/api/admin/dashboard").get_json()
    assert stats["totalProjects"] == 0
    assert stats["totalViews"] == 0
    assert stats["recentProjects"] == []


def test_project_analytics_ordered_by_views(admin_client):
    create_project("Quiet", views=1)
    create_project("Popular", views=9)
    data = admin_client.get("/api/admin/analytics/projects").get_json()
    assert [p["title"] for p in data] == ["Popular", "Quiet"]


def test_traffic_geo_and_timeline_reports(admin_client):
    analytics_service.track("home", "page_view", location="Berlin")
    analytics_service.track("home", "page_view", location="Berlin")
    analytics_service.track("about", "page_view", location="Lisbon")
    analytics_service.track("experience", "experience_view")

    traffic = admin_client.get("/api/admin/analytics/traffic").get_json()
    assert len(traffic) == 3
    assert all(e["event"] == "page_view" for e in traffic)

    geo = admin_client.get("/api/admin/analytics/geo").get_json()
    assert geo[0] == {"location": "Berlin", "count": 2}
    assert {"location": "Lisbon", "count": 1} in geo

    timeline = admin_client.get("/api/admin/analytics/timeline").get_json()
    assert sum(day["count"] for day in timeline) == 4
