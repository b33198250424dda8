"""Tests for dashboard API routes.

The record source and clock are overridden with in-memory fixtures, so
these run without PostgreSQL.
"""

from datetime import datetime

from httpx import AsyncClient

from app.core.exceptions import SourceUnavailableError
from app.features.dashboard.schemas import AttendanceRecord
from app.features.dashboard.sources import InMemoryRecordSource, get_record_source
from app.main import app


class FailingSource(InMemoryRecordSource):
    """Source whose attendance backend is down."""

    async def fetch_attendance(
        self,
        start: datetime,
        end: datetime,
        store: str | None = None,
        employee: str | None = None,
    ) -> list[AttendanceRecord]:
        raise SourceUnavailableError(
            "Could not read attendance records", details={"source": "attendance"}
        )


class TestMetricsEndpoint:
    """Tests for GET /dashboard/metrics."""

    async def test_defaults(self, client: AsyncClient) -> None:
        response = await client.get("/dashboard/metrics")

        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        data = response.json()
        assert data["filters"]["range_mode"] == "month"
        assert data["filters"]["range_value"] == "2024-03"
        assert data["filters"]["sales_status"] == "all"
        assert data["sales"]["total_revenue"] == "1000.00"
        assert data["kpis"]["sales"]["delta_percent"] == 150.0
        assert data["available_statuses"] == ["completed", "Pending", "refunded"]
        assert len(data["heatmaps"]["attendance"]) == 7

    async def test_filters_are_applied_and_echoed(self, client: AsyncClient) -> None:
        response = await client.get(
            "/dashboard/metrics",
            params={
                "range_mode": "day",
                "range_value": "2024-03-01",
                "store": "S1",
                "attendance_status": "check-in",
                "time_from": "9:00",
                "time_to": "17:00",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["filters"]["store"] == "S1"
        assert data["filters"]["time_from"] == "09:00"
        assert data["filters"]["attendance_status"] == "check-in"
        assert data["sales"]["total_revenue"] == "300.00"
        assert data["attendance"]["total"] == 0
        assert [b["date_key"] for b in data["timeline"]] == ["2024-03-01"]

    async def test_malformed_range_value_falls_back(self, client: AsyncClient) -> None:
        response = await client.get(
            "/dashboard/metrics", params={"range_mode": "month", "range_value": "March"}
        )

        assert response.status_code == 200
        assert response.json()["period"]["defaulted"] is True
        assert response.json()["filters"]["range_value"] == "2024-03"

    async def test_unknown_range_mode_is_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/dashboard/metrics", params={"range_mode": "fortnight"})

        assert response.status_code == 422
        assert response.headers["content-type"] == "application/problem+json"
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["errors"][0]["field"] == "range_mode"

    async def test_source_unavailable_is_503(self, client: AsyncClient) -> None:
        app.dependency_overrides[get_record_source] = lambda: FailingSource()

        response = await client.get("/dashboard/metrics")

        assert response.status_code == 503
        assert response.headers["content-type"] == "application/problem+json"
        assert response.json()["code"] == "SERVICE_UNAVAILABLE"


class TestSnapshotEndpoint:
    """Tests for GET /dashboard/snapshot."""

    async def test_snapshot(self, client: AsyncClient) -> None:
        response = await client.get("/dashboard/snapshot")

        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        data = response.json()
        assert data["period"]["range_value"] == "2024-03-11"
        assert data["totals"]["products"] == 2
        assert len(data["sales"]["daily_trend"]) == 7
        assert data["sales"]["top_products"][0]["product_name"] == "Shampoo"
        assert "x-request-id" in response.headers

    async def test_snapshot_source_unavailable(self, client: AsyncClient) -> None:
        app.dependency_overrides[get_record_source] = lambda: FailingSource()

        response = await client.get("/dashboard/snapshot")

        assert response.status_code == 503
