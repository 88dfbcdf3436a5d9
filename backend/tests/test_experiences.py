"""Tests for reviewer work history."""

EXPERIENCE = {
    "title": "Staff Engineer",
    "company": "Shopify",
    "employment_type": "Full-time",
    "start_date": "2021-03-01",
    "end_date": "2023-01-01",
    "location_type": "Remote",
}


def test_crud_on_own_experiences(client, make_reviewer, headers):
    user, _ = make_reviewer("alice")
    h = headers(user)

    created = client.post("/api/v1/experiences", json=EXPERIENCE, headers=h).json()["experience"]
    assert created["end_date"] == "2023-01-01"

    updated = client.put(
        f"/api/v1/experiences/{created['id']}",
        json={**EXPERIENCE, "currently_working": True},
        headers=h,
    ).json()["experience"]
    assert updated["currently_working"] is True
    assert updated["end_date"] is None

    listing = client.get("/api/v1/experiences", headers=h).json()["experiences"]
    assert [e["id"] for e in listing] == [created["id"]]

    assert client.delete(f"/api/v1/experiences/{created['id']}", headers=h).json() == {"success": True}
    assert client.get("/api/v1/experiences", headers=h).json() == {"experiences": []}


def test_required_fields(client, make_reviewer, headers):
    user, _ = make_reviewer("alice")
    response = client.post("/api/v1/experiences", json={**EXPERIENCE, "company": ""}, headers=headers(user))
    assert response.status_code == 400
    assert response.json()["field"] == "company"


def test_caller_without_reviewer_record(client, make_user, headers):
    user = make_user()
    assert client.get("/api/v1/experiences", headers=headers(user)).json() == {"experiences": []}
    assert client.post("/api/v1/experiences", json=EXPERIENCE, headers=headers(user)).status_code == 404


def test_cannot_touch_another_reviewers_experience(client, make_reviewer, headers):
    alice, _ = make_reviewer("alice")
    bob, _ = make_reviewer("bob")
    created = client.post("/api/v1/experiences", json=EXPERIENCE, headers=headers(alice)).json()["experience"]

    assert client.put(f"/api/v1/experiences/{created['id']}", json=EXPERIENCE, headers=headers(bob)).status_code == 404
    assert client.delete(f"/api/v1/experiences/{created['id']}", headers=headers(bob)).status_code == 404


def test_public_listing_by_slug(client, make_reviewer, headers):
    alice, _ = make_reviewer("alice")
    client.post("/api/v1/experiences", json=EXPERIENCE, headers=headers(alice))

    response = client.get("/api/v1/reviewer-experiences/alice")
    assert response.status_code == 200
    assert response.json()["experiences"][0]["company"] == "Shopify"
    assert client.get("/api/v1/reviewer-experiences/nobody").status_code == 404
