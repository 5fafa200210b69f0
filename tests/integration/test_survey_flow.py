"""
End-to-end tests for surveys: authoring, organization visibility,
learner submissions and result tallies.
"""

import pytest

QUESTIONS = [
    {"id": "fav", "type": "single_choice", "prompt": "Favourite module?", "required": True, "options": ["a", "b"]},
    {"id": "rate", "type": "rating", "prompt": "Rate the course"},
    {"id": "notes", "type": "text", "prompt": "Anything else?"},
]


@pytest.fixture
async def admin_headers(seed, bearer):
    return bearer(await seed.user("survey-admin@example.com", role="admin"))


async def _create(api_client, headers, **fields):
    body = {"title": "Feedback", "questions": QUESTIONS, "status": "published", **fields}
    response = await api_client.post("/api/admin/surveys", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]


async def test_create_requires_title(api_client, admin_headers):
    response = await api_client.post("/api/admin/surveys", json={"questions": []}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"]["fields"] == ["title"]


async def test_update_bumps_version(api_client, admin_headers):
    survey = await _create(api_client, admin_headers, status="draft")

    response = await api_client.put(
        f"/api/admin/surveys/{survey['id']}", json={"title": "Feedback v2"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Feedback v2"
    assert response.json()["data"]["version"] == survey["version"] + 1


async def test_learner_visibility_by_status_and_org(api_client, seed, bearer, admin_headers):
    learner = await seed.user("taker@example.com")
    mine = await seed.organization("Mine")
    other = await seed.organization("Other")
    await seed.membership(mine.id, learner.id)

    await _create(api_client, admin_headers, title="Everyone")
    await _create(api_client, admin_headers, title="Mine only", assigned_org_ids=[str(mine.id)])
    await _create(api_client, admin_headers, title="Other only", assigned_org_ids=[str(other.id)])
    await _create(api_client, admin_headers, title="Draft", status="draft")

    published = await api_client.get("/api/client/surveys", headers=bearer(learner))
    everything = await api_client.get("/api/client/surveys?status=all", headers=bearer(learner))

    assert sorted(s["title"] for s in published.json()["data"]) == ["Everyone", "Mine only"]
    assert sorted(s["title"] for s in everything.json()["data"]) == ["Draft", "Everyone", "Mine only"]


async def test_submission_and_results(api_client, seed, bearer, admin_headers):
    survey = await _create(api_client, admin_headers)
    alice = await seed.user("alice@example.com")
    bob = await seed.user("bob@example.com")
    url = f"/api/client/surveys/{survey['id']}/responses"

    missing = await api_client.post(url, json={"answers": {"rate": 4}}, headers=bearer(alice))
    assert missing.status_code == 400
    assert missing.json()["detail"]["question_ids"] == ["fav"]

    first = await api_client.post(url, json={"answers": {"fav": "a", "rate": 2}}, headers=bearer(alice))
    again = await api_client.post(url, json={"answers": {"fav": "b", "rate": 4}}, headers=bearer(alice))
    assert first.status_code == 201
    assert again.json()["data"]["id"] == first.json()["data"]["id"]

    await api_client.post(url, json={"answers": {"fav": "b", "rate": 5, "notes": "great"}}, headers=bearer(bob))

    results = await api_client.get(f"/api/admin/surveys/{survey['id']}/responses", headers=admin_headers)
    assert results.status_code == 200
    body = results.json()
    assert len(body["data"]) == 2
    summary = body["summary"]
    assert summary["response_count"] == 2
    assert summary["questions"]["fav"]["counts"] == {"b": 2}
    assert summary["questions"]["rate"]["average"] == 4.5
    assert summary["questions"]["notes"] == {"answered": 1}


async def test_draft_survey_rejects_submissions(api_client, seed, bearer, admin_headers):
    survey = await _create(api_client, admin_headers, status="draft")
    learner = await seed.user("early@example.com")

    response = await api_client.post(
        f"/api/client/surveys/{survey['id']}/responses", json={"answers": {"fav": "a"}}, headers=bearer(learner)
    )

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Survey is not accepting responses"


async def test_submission_for_foreign_org_forbidden(api_client, seed, bearer, admin_headers):
    survey = await _create(api_client, admin_headers)
    learner = await seed.user("stranger@example.com")
    org = await seed.organization("Closed")

    response = await api_client.post(
        f"/api/client/surveys/{survey['id']}/responses",
        json={"answers": {"fav": "a"}, "organization_id": str(org.id)},
        headers=bearer(learner),
    )

    assert response.status_code == 403


async def test_delete_survey(api_client, admin_headers):
    survey = await _create(api_client, admin_headers)

    deleted = await api_client.delete(f"/api/admin/surveys/{survey['id']}", headers=admin_headers)
    missing = await api_client.get(f"/api/admin/surveys/{survey['id']}", headers=admin_headers)

    assert deleted.status_code == 204
    assert missing.status_code == 404


async def test_learner_cannot_author(api_client, seed, bearer):
    learner = await seed.user("nope@example.com")

    response = await api_client.post("/api/admin/surveys", json={"title": "x"}, headers=bearer(learner))

    assert response.status_code == 403
