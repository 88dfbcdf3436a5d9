"""Tests for reviewer ratings and resume conversations."""

import pytest

from reviewdesk.models import Review


@pytest.fixture
def reviewed_resume(db, make_user, make_reviewer, make_resume):
    reviewer_user, reviewer = make_reviewer("alice")
    owner = make_user()
    resume = make_resume(owner, reviewer_slug="alice")
    db.add(Review(reviewer_id=reviewer_user.id, resume_id=resume.id, score=8, feedback="Good"))
    db.commit()
    return owner, reviewer_user, reviewer, resume


def test_rating_is_upserted(client, reviewed_resume, headers):
    owner, _, reviewer, resume = reviewed_resume
    payload = {"reviewer_id": reviewer.id, "resume_id": resume.id, "rating": 4}

    first = client.post("/api/v1/reviewer-ratings", json=payload, headers=headers(owner)).json()
    second = client.post(
        "/api/v1/reviewer-ratings", json={**payload, "rating": 5, "comment": "Great"}, headers=headers(owner)
    ).json()

    assert first["rating"]["id"] == second["rating"]["id"]
    fetched = client.get(
        "/api/v1/reviewer-ratings",
        params={"resume_id": resume.id, "reviewer_id": reviewer.id},
        headers=headers(owner),
    ).json()
    assert fetched["rating"]["rating"] == 5
    assert fetched["rating"]["comment"] == "Great"


@pytest.mark.parametrize("rating", [0, 6, 3.5])
def test_rating_must_be_integer_one_to_five(client, reviewed_resume, headers, rating):
    owner, _, reviewer, resume = reviewed_resume
    response = client.post(
        "/api/v1/reviewer-ratings",
        json={"reviewer_id": reviewer.id, "resume_id": resume.id, "rating": rating},
        headers=headers(owner),
    )
    assert response.status_code == 400
    assert response.json()["field"] == "rating"


def test_cannot_rate_without_review(client, make_user, make_reviewer, make_resume, headers):
    _, reviewer = make_reviewer("alice")
    owner = make_user()
    resume = make_resume(owner, reviewer_slug="alice")
    response = client.post(
        "/api/v1/reviewer-ratings",
        json={"reviewer_id": reviewer.id, "resume_id": resume.id, "rating": 5},
        headers=headers(owner),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "not_reviewed"


def test_cannot_rate_someone_elses_resume(client, make_user, reviewed_resume, headers):
    _, _, reviewer, resume = reviewed_resume
    response = client.post(
        "/api/v1/reviewer-ratings",
        json={"reviewer_id": reviewer.id, "resume_id": resume.id, "rating": 5},
        headers=headers(make_user()),
    )
    assert response.status_code == 404


def test_conversation_created_on_first_open(client, reviewed_resume, headers):
    owner, reviewer_user, _, resume = reviewed_resume

    opened = client.get("/api/v1/conversations", params={"resume_id": resume.id}, headers=headers(owner)).json()
    assert opened["messages"] == []
    conversation = opened["conversation"]
    assert conversation["user_id"] == owner.id
    assert conversation["reviewer_id"] == reviewer_user.id

    again = client.get(
        "/api/v1/conversations", params={"resume_id": resume.id}, headers=headers(reviewer_user)
    ).json()
    assert again["conversation"]["id"] == conversation["id"]


def test_participants_exchange_messages(client, reviewed_resume, headers):
    owner, reviewer_user, _, resume = reviewed_resume
    conversation_id = client.get(
        "/api/v1/conversations", params={"resume_id": resume.id}, headers=headers(owner)
    ).json()["conversation"]["id"]

    client.post("/api/v1/conversations", json={"conversation_id": conversation_id, "message": "Thanks!"},
                headers=headers(owner))
    client.post("/api/v1/conversations", json={"conversation_id": conversation_id, "message": "Anytime"},
                headers=headers(reviewer_user))

    messages = client.get(
        "/api/v1/conversations", params={"resume_id": resume.id}, headers=headers(owner)
    ).json()["messages"]
    assert [(m["sender_id"], m["message"]) for m in messages] == [
        (owner.id, "Thanks!"),
        (reviewer_user.id, "Anytime"),
    ]


def test_outsiders_cannot_read_or_post(client, make_user, reviewed_resume, headers):
    owner, _, _, resume = reviewed_resume
    outsider = make_user()

    assert client.get(
        "/api/v1/conversations", params={"resume_id": resume.id}, headers=headers(outsider)
    ).status_code == 403

    conversation_id = client.get(
        "/api/v1/conversations", params={"resume_id": resume.id}, headers=headers(owner)
    ).json()["conversation"]["id"]
    response = client.post(
        "/api/v1/conversations",
        json={"conversation_id": conversation_id, "message": "hi"},
        headers=headers(outsider),
    )
    assert response.status_code == 403
