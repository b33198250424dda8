"""Tests for request middleware."""

from app.core.middleware import REQUEST_ID_HEADER


async def test_request_id_middleware_generates_id(client):
    """Middleware should generate a UUID request ID if not provided."""
    response = await client.get("/health")

    request_id = response.headers.get(REQUEST_ID_HEADER)
    assert request_id is not None
    assert len(request_id) == 36


async def test_request_id_middleware_preserves_provided_id(client):
    """Middleware should echo a client-provided request ID."""
    response = await client.get("/health", headers={REQUEST_ID_HEADER: "dash-req-42"})

    assert response.headers[REQUEST_ID_HEADER] == "dash-req-42"


async def test_request_id_on_error_responses(client):
    """Problem responses carry the request ID too."""
    response = await client.get(
        "/dashboard/metrics",
        params={"range_mode": "fortnight"},
        headers={REQUEST_ID_HEADER: "dash-req-422"},
    )

    assert response.status_code == 422
    assert response.headers[REQUEST_ID_HEADER] == "dash-req-422"


async def test_request_id_middleware_different_ids_per_request(client):
    """Each request should get a unique ID if not provided."""
    first = await client.get("/health")
    second = await client.get("/health")

    assert first.headers[REQUEST_ID_HEADER] != second.headers[REQUEST_ID_HEADER]
