"""Submission workflow endpoints, end to end."""

from __future__ import annotations

import pytest_asyncio
from httpx import AsyncClient

CONTENT = " ".join(["curiosity"] * 210)


@pytest_asyncio.fixture
async def submission(client: AsyncClient, auth_headers) -> dict:
    response = await client.post(
        "/api/v1/submissions",
        headers=auth_headers,
        json={"title": "Why I Ask Why", "content": CONTENT, "challenge_id": "1"},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestPublish:
    async def test_publish(self, submission):
        assert submission["state"] == "pending_review"
        assert submission["read_time"] == 2
        assert submission["read_time_label"] == "2 min read"
        assert submission["excerpt"] == CONTENT[:150]
        assert submission["is_public"] is False
        assert submission["version_count"] == 1

    async def test_publish_missing_fields(self, client: AsyncClient, auth_headers):
        response = await client.post("/api/v1/submissions", headers=auth_headers, json={"title": "Only a title"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Please enter both title and content"

    async def test_publish_unauthenticated(self, client: AsyncClient):
        response = await client.post("/api/v1/submissions", json={"title": "T", "content": "C"})
        assert response.status_code == 401

    async def test_partner_acknowledges(self, client: AsyncClient, auth_headers, submission):
        messages = (await client.get("/api/v1/partner/messages", headers=auth_headers)).json()["messages"]
        assert messages[-1]["is_partner"] is True
        assert "Why I Ask Why" in messages[-1]["text"]

    async def test_review_queue(self, client: AsyncClient, auth_headers, submission):
        response = await client.get("/api/v1/submissions/review-queue", headers=auth_headers)
        assert [s["id"] for s in response.json()["submissions"]] == [submission["id"]]


class TestWorkflow:
    async def test_full_lifecycle(self, client: AsyncClient, auth_headers, submission):
        sid = submission["id"]

        response = await client.post(f"/api/v1/submissions/{sid}/share", headers=auth_headers)
        assert response.status_code == 409

        response = await client.post(f"/api/v1/submissions/{sid}/validate", headers=auth_headers, json={"feedback": ""})
        assert response.status_code == 400
        assert response.json()["error"] == "missing_feedback"

        response = await client.post(
            f"/api/v1/submissions/{sid}/validate", headers=auth_headers, json={"feedback": "Lovely rhythm."},
        )
        assert response.status_code == 200
        assert response.json()["state"] == "approved"
        assert response.json()["validated_by_partner"] is True

        response = await client.post(f"/api/v1/submissions/{sid}/share", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["shared"] is True
        assert response.json()["submission"]["state"] == "published"

        response = await client.post(f"/api/v1/submissions/{sid}/share", headers=auth_headers)
        assert response.json()["shared"] is False

        feed = (await client.get("/api/v1/feed")).json()
        assert feed["items"][0]["id"] == sid

        me = (await client.get("/api/v1/auth/me", headers=auth_headers)).json()
        assert me["published_essays"] == [sid]

    async def test_edit_appends_versions(self, client: AsyncClient, auth_headers, submission):
        sid = submission["id"]
        response = await client.patch(f"/api/v1/submissions/{sid}", headers=auth_headers, json={"content": "Shorter."})
        assert response.status_code == 200
        assert response.json()["version_count"] == 2
        assert response.json()["read_time"] == 1

        versions = (await client.get(f"/api/v1/submissions/{sid}/versions", headers=auth_headers)).json()["versions"]
        assert [v["content"] for v in versions] == [CONTENT, "Shorter."]

    async def test_other_users_cannot_act(self, client: AsyncClient, signup, submission):
        other = await signup(email="grace@example.com", name="Grace Hopper")
        sid = submission["id"]
        response = await client.post(f"/api/v1/submissions/{sid}/validate", headers=other, json={"feedback": "ok"})
        assert response.status_code == 403
        assert (await client.get(f"/api/v1/submissions/{sid}", headers=other)).status_code == 404

    async def test_list_mine(self, client: AsyncClient, auth_headers, submission):
        response = await client.get("/api/v1/submissions", headers=auth_headers)
        assert response.json()["total"] == 1


class TestDelete:
    async def test_delete(self, client: AsyncClient, auth_headers, submission):
        sid = submission["id"]
        response = await client.delete(f"/api/v1/submissions/{sid}", headers=auth_headers)
        assert response.status_code == 204
        assert (await client.get(f"/api/v1/submissions/{sid}", headers=auth_headers)).status_code == 404

    async def test_delete_unauthenticated(self, client: AsyncClient, submission):
        response = await client.delete(f"/api/v1/submissions/{submission['id']}")
        assert response.status_code == 401
