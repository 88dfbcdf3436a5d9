"""Tests for the page-data endpoints behind both guards."""

from reviewdesk.models import Review


def test_home_is_public(client, make_user, headers):
    assert client.get("/").json()["user"] is None
    user = make_user(role="user")
    assert client.get("/", headers=headers(user)).json()["dashboard_url"] == "/dashboard"


def test_login_page_sends_signed_in_users_on(client, make_reviewer, headers):
    assert client.get("/login").json() == {"page": "login", "next": None}
    reviewer_user, _ = make_reviewer("alice")
    response = client.get("/login", headers=headers(reviewer_user))
    assert response.status_code == 302
    assert response.headers["location"] == "/creator"


def test_public_reviewer_page(client, make_user, make_reviewer, headers):
    make_reviewer("alice", headline="Hiring manager at a fintech")
    assert client.get("/r/alice").json()["reviewer"]["headline"] == "Hiring manager at a fintech"
    assert client.get("/r/nobody").status_code == 404


def test_dashboard_lists_own_resumes(client, make_user, make_reviewer, make_resume, headers):
    make_reviewer("alice")
    user = make_user(role="user")
    make_resume(user, reviewer_slug="alice", status="Completed")

    page = client.get("/dashboard", headers=headers(user)).json()
    assert len(page["resumes"]) == 1
    assert page["status_counts"]["Completed"] == 1
    assert page["resumes"][0]["reviewer"]["slug"] == "alice"


def test_creator_pages(client, db, make_user, make_reviewer, make_resume, headers):
    reviewer_user, _ = make_reviewer("alice")
    resume = make_resume(make_user(), reviewer_slug="alice")
    db.add(Review(reviewer_id=reviewer_user.id, resume_id=resume.id, score=8, feedback="Good"))
    db.commit()
    h = headers(reviewer_user)

    home = client.get("/creator", headers=h).json()
    assert home["reviewer"]["slug"] == "alice"
    assert [r["id"] for r in home["resumes"]] == [resume.id]

    analytics = client.get("/creator/analytics", headers=h).json()
    assert analytics["review_count"] == 1
    assert analytics["score_distribution"]["8"] == 1

    review_page = client.get(f"/creator/review/{resume.id}", headers=h).json()
    assert review_page["review"] == {"score": 8, "feedback": "Good"}
    assert review_page["score_range"] == [1, 10]

    assert client.get("/creator/profile", headers=h).json()["headline_word_limit"] == 50
    assert len(client.get("/creator/reviews", headers=h).json()["reviews"]) == 1


def test_reviewer_role_without_record_is_sent_to_signup(client, make_user, headers):
    user = make_user(role="reviewer")
    response = client.get("/creator", headers=headers(user))
    assert response.status_code == 302
    assert response.headers["location"] == "/become-reviewer"


def test_admin_pages(client, make_user, make_resume, headers):
    admin = make_user(role="admin")
    resume = make_resume(make_user())
    h = headers(admin)

    assert client.get("/admin", headers=h).json()["status_counts"]["Pending"] == 1
    assert client.get("/admin/users", headers=h).status_code == 200
    assert client.get("/admin/reviewers", headers=h).json()["reviewers"] == []
    assert len(client.get("/admin/resumes", headers=h).json()["resumes"]) == 1

    edit = client.get(f"/admin/{resume.id}", headers=h).json()
    assert edit["form_action"] == f"/api/v1/admin/resumes/{resume.id}"

    missing = client.get("/admin/999", headers=h)
    assert missing.status_code == 302
    assert missing.headers["location"] == "/admin"


def test_settings_open_to_every_role(client, make_user, make_reviewer, headers):
    reviewer_user, _ = make_reviewer("alice")
    for user in (make_user(role="user"), reviewer_user, make_user(role="admin")):
        assert client.get("/settings/profile", headers=headers(user)).status_code == 200


def test_page_guard_applies_without_edge_guard(db, make_user, headers):
    """The handler-level guard redirects even when mounted without the middleware."""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    from reviewdesk.core.role_guard import PageRedirect, page_redirect_handler
    from reviewdesk.pages import router

    bare = FastAPI()
    bare.add_exception_handler(PageRedirect, page_redirect_handler)
    bare.include_router(router)
    client = TestClient(bare, follow_redirects=False)

    anonymous = client.get("/admin")
    assert anonymous.status_code == 302
    assert anonymous.headers["location"] == "/login"

    user = make_user(role="user")
    denied = client.get("/admin", headers=headers(user))
    assert denied.headers["location"] == "/dashboard"
