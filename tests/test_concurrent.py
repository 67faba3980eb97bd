"""Tests that the server handles multiple concurrent connections correctly.

The app is async (FastAPI + asyncpg pool) and code uniqueness is enforced by
storage. These tests assert that many simultaneous requests succeed, codes
stay unique and exactly one claimant wins a contested code.
"""

import asyncio
import pytest


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
class TestConcurrentConnections:
    """Prove the server handles many simultaneous requests."""

    async def test_concurrent_health_requests(self, client):
        """Many concurrent GET /api/health requests all succeed."""
        concurrency = 50
        tasks = [client.get("/api/health") for _ in range(concurrency)]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 200, f"Request {i}: status {r.status_code}"
            assert r.json()["status"] == "healthy"

    async def test_concurrent_shorten_requests(self, client, owner):
        """Many concurrent POST /shorten with different URLs; all succeed and codes are unique."""
        concurrency = 30
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]
        tasks = [
            client.post("/shorten", json={"url": url}, headers=bearer(owner["token"]))
            for url in urls
        ]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        codes = []
        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 200, f"Request {i}: status {r.status_code} body={r.text}"
            data = r.json()
            assert data["targetURL"] == urls[i]
            codes.append(data["code"])

        assert len(codes) == len(set(codes)), "All codes must be unique under concurrency"

        listing = await client.get("/allCodes", headers=bearer(owner["token"]))
        assert len(listing.json()["codes"]) == concurrency

    async def test_concurrent_same_code(self, client, owner, other_user):
        """Concurrent requests for one custom code: exactly one wins, the rest conflict."""
        users = [owner, other_user] * 10
        tasks = [
            client.post(
                "/shorten",
                json={"url": f"https://example.com/claim_{i}", "code": "contested"},
                headers=bearer(user["token"]),
            )
            for i, user in enumerate(users)
        ]
        responses = await asyncio.gather(*tasks)

        statuses = [r.status_code for r in responses]
        assert statuses.count(200) == 1
        assert statuses.count(409) == len(users) - 1

        winner = next(r for r in responses if r.status_code == 200).json()
        redirect = await client.get("/contested")
        assert redirect.headers["location"] == winner["targetURL"]

    async def test_concurrent_redirect_requests(self, client, owner):
        """Create one short URL, then many concurrent redirect (GET /{code}) requests all succeed."""
        create_resp = await client.post(
            "/shorten",
            json={"url": "https://example.com/redirect-target"},
            headers=bearer(owner["token"]),
        )
        assert create_resp.status_code == 200
        code = create_resp.json()["code"]

        tasks = [
            client.get(f"/{code}", follow_redirects=False)
            for _ in range(20)
        ]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 302, f"Request {i}: status {r.status_code}"
            assert r.headers.get("location") == "https://example.com/redirect-target"

    async def test_concurrent_delete(self, client, owner):
        """Concurrent deletes of one link: exactly one reports the deletion."""
        create_resp = await client.post(
            "/shorten",
            json={"url": "https://example.com/delete-target"},
            headers=bearer(owner["token"]),
        )
        link_id = create_resp.json()["id"]

        tasks = [client.delete(f"/{link_id}", headers=bearer(owner["token"])) for _ in range(10)]
        responses = await asyncio.gather(*tasks)

        statuses = [r.status_code for r in responses]
        assert statuses.count(200) == 1
        assert statuses.count(404) == 9
