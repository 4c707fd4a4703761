"""
Concurrent resolution must not lose click increments.

Requests go through httpx's ASGI transport, which only returns once the
application (background tasks included) has finished with the request.
"""

import asyncio

import httpx
import pytest

from app.main import app

CONCURRENT_REQUESTS = 20


@pytest.mark.asyncio
async def test_concurrent_redirects_count_every_click():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        created = (await client.post("/api/url", json={"url": "https://example.com/hot"})).json()
        slug, secret = created["slug"], created["secret"]

        responses = await asyncio.gather(
            *(client.get(f"/{slug}") for _ in range(CONCURRENT_REQUESTS))
        )

        assert all(r.status_code == 302 for r in responses)
        assert all(r.headers["location"] == "https://example.com/hot" for r in responses)

        data = (await client.get(f"/api/url/{slug}", params={"secret": secret})).json()

    assert data["clicks"] == CONCURRENT_REQUESTS


@pytest.mark.asyncio
async def test_concurrent_creates_get_distinct_slugs():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        responses = await asyncio.gather(
            *(
                client.post("/api/url", json={"url": f"https://example.com/{i}"})
                for i in range(10)
            )
        )

    assert all(r.status_code == 200 for r in responses)
    slugs = {r.json()["slug"] for r in responses}
    secrets = {r.json()["secret"] for r in responses}
    assert len(slugs) == 10
    assert len(secrets) == 10
