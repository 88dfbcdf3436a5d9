"""Tests for sharing resumes with reviewers."""

from reviewdesk.models import Resume


def test_first_share_creates_resume(client, db, make_user, make_reviewer, headers):
    make_reviewer("alice")
    owner = make_user()

    response = client.post(
        "/api/v1/resumes",
        json={"file_url": "https://files/v1.pdf", "reviewer_slug": "Alice"},
        headers=headers(owner),
    )

    assert response.status_code == 200
    assert response.json()["action"] == "created"
    resume = db.query(Resume).one()
    assert resume.reviewer_slug == "alice"
    assert resume.status == "Pending"


def test_sharing_again_replaces_file_and_resets_review(client, db, make_user, make_reviewer, make_resume, headers):
    make_reviewer("alice")
    owner = make_user()
    existing = make_resume(owner, reviewer_slug="alice", status="Completed", score=8, notes="Nice")

    response = client.post(
        "/api/v1/resumes",
        json={"file_url": "https://files/v2.pdf", "reviewer_slug": "alice"},
        headers=headers(owner),
    )

    body = response.json()
    assert body["action"] == "updated"
    assert body["id"] == existing.id
    db.expire_all()
    stored = db.get(Resume, existing.id)
    assert (stored.file_url, stored.status, stored.score, stored.notes) == (
        "https://files/v2.pdf", "Pending", None, None,
    )
    assert db.query(Resume).count() == 1


def test_different_reviewer_starts_new_resume(client, db, make_user, make_reviewer, make_resume, headers):
    make_reviewer("alice")
    make_reviewer("bob")
    owner = make_user()
    make_resume(owner, reviewer_slug="alice")

    response = client.post(
        "/api/v1/resumes",
        json={"file_url": "https://files/v2.pdf", "reviewer_slug": "bob"},
        headers=headers(owner),
    )
    assert response.json()["action"] == "created"
    assert db.query(Resume).count() == 2


def test_file_url_required(client, make_user, headers):
    response = client.post("/api/v1/resumes", json={"file_url": "  "}, headers=headers(make_user()))
    assert response.status_code == 400
    assert response.json()["field"] == "file_url"


def test_list_and_get_only_own_resumes(client, make_user, make_reviewer, make_resume, headers):
    make_reviewer("alice", display_name="Alice A.")
    owner, stranger = make_user(), make_user()
    resume = make_resume(owner, reviewer_slug="alice")

    listing = client.get("/api/v1/resumes", headers=headers(owner)).json()
    assert listing["total"] == 1
    assert listing["resumes"][0]["reviewer"]["display_name"] == "Alice A."

    assert client.get(f"/api/v1/resumes/{resume.id}", headers=headers(owner)).status_code == 200
    assert client.get(f"/api/v1/resumes/{resume.id}", headers=headers(stranger)).status_code == 404
    assert client.get("/api/v1/resumes", headers=headers(stranger)).json()["total"] == 0


def test_reviews_for_own_resume(client, db, make_user, make_reviewer, make_resume, headers):
    from reviewdesk.models import Review

    reviewer_user, _ = make_reviewer("alice")
    owner, stranger = make_user(), make_user()
    resume = make_resume(owner, reviewer_slug="alice")
    db.add(Review(reviewer_id=reviewer_user.id, resume_id=resume.id, score=7, feedback="Solid"))
    db.commit()

    reviews = client.get("/api/v1/reviews", params={"resume_id": resume.id}, headers=headers(owner)).json()
    assert reviews["reviews"][0]["score"] == 7
    assert reviews["reviews"][0]["reviewer"]["slug"] == "alice"

    assert client.get("/api/v1/reviews", params={"resume_id": resume.id}, headers=headers(stranger)).status_code == 404
    assert client.get("/api/v1/reviews", headers=headers(stranger)).status_code == 403
    written = client.get("/api/v1/reviews", headers=headers(reviewer_user)).json()
    assert len(written["reviews"]) == 1
