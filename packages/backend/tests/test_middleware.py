"""Tests for middleware — security headers, request IDs, error shape.

Rate limiting is skipped in tests (no Redis configured).
"""

import pytest


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/api/health")
    r2 = await client.get("/api/health")
    assert "X-Request-ID" in r1.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    custom_id = "test-trace-12345"
    r = await client.get("/api/health", headers={"X-Request-ID": custom_id})
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    r = await client.get("/api/health")
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_errors_carry_detail_and_error_keys(client):
    """The SPA reads data.error; FastAPI clients read detail."""
    r = await client.get("/api/products/999999")
    assert r.status_code == 404
    assert r.json() == {"detail": "Product not found", "error": "Product not found"}


@pytest.mark.asyncio
async def test_validation_errors_carry_error_message(client):
    r = await client.post("/api/auth/login", json={"email": "x@example.com"})
    assert r.status_code == 422
    body = r.json()
    assert isinstance(body["detail"], list)
    assert "password" in body["error"]
