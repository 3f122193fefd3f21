"""
Tests for Actual Usage API — variance scoring, overwrite semantics, alerts.
"""

import pytest
from httpx import AsyncClient


async def _order(client: AsyncClient, order_id="O1", qty=100, rate=50):
    await client.post(
        "/api/v1/orders/",
        json={"order_id": order_id, "item_name": "Steel", "planned_qty": qty, "planned_rate": rate},
    )


async def _usage(client: AsyncClient, order_id="O1", qty=100, rate=60):
    return await client.post(
        "/api/v1/actual-usage/",
        json={"order_id": order_id, "actual_qty": qty, "actual_rate": rate},
    )


@pytest.mark.asyncio
class TestRecordUsage:
    async def test_first_submission_creates(self, client: AsyncClient):
        await _order(client)
        response = await _usage(client)
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Actual usage saved"
        usage = data["actual_usage"]
        assert usage["actual_amount"] == 6000
        assert usage["variance"] == 1000
        assert usage["status"] == "Loss"

    async def test_resubmission_overwrites(self, client: AsyncClient):
        await _order(client)
        await _usage(client)
        response = await _usage(client, rate=45)

        assert response.status_code == 200
        usage = response.json()["actual_usage"]
        assert usage["actual_amount"] == 4500
        assert usage["variance"] == -500
        assert usage["status"] == "Profit"

        listing = (await client.get("/api/v1/actual-usage/")).json()
        assert len(listing) == 1

    async def test_balanced_usage(self, client: AsyncClient):
        await _order(client)
        usage = (await _usage(client, rate=50)).json()["actual_usage"]
        assert usage["variance"] == 0
        assert usage["status"] == "Balanced"

    async def test_unknown_order(self, client: AsyncClient):
        response = await _usage(client, order_id="NOPE")
        assert response.status_code == 404
        assert response.json() == {"error": "Order not found"}
        assert (await client.get("/api/v1/actual-usage/")).json() == []

    async def test_rejects_non_positive_values(self, client: AsyncClient):
        await _order(client)
        response = await _usage(client, qty=0)
        assert response.status_code == 400
        assert (await client.get("/api/v1/actual-usage/")).json() == []


@pytest.mark.asyncio
class TestUsageAlerts:
    async def test_variance_over_threshold_raises_alert(self, client: AsyncClient):
        await _order(client)
        await _usage(client)

        alerts = (await client.get("/api/v1/alerts/")).json()
        assert len(alerts) == 1
        assert alerts[0]["alert_type"] == "variance"
        assert alerts[0]["priority"] == "high"
        assert alerts[0]["item_name"] == "Steel"
        assert alerts[0]["message"] == "High variance for order O1: Loss of ₹1000.00"
        assert alerts[0]["is_read"] is False

    async def test_variance_at_threshold_no_alert(self, client: AsyncClient):
        await _order(client, qty=10, rate=100)
        await _usage(client, qty=10, rate=110)
        assert (await client.get("/api/v1/alerts/")).json() == []

    async def test_each_overwrite_alerts_again(self, client: AsyncClient):
        await _order(client)
        await _usage(client)
        await _usage(client, rate=65)
        assert len((await client.get("/api/v1/alerts/")).json()) == 2


@pytest.mark.asyncio
class TestReadUsage:
    async def test_get_by_order(self, client: AsyncClient):
        await _order(client)
        await _usage(client)
        response = await client.get("/api/v1/actual-usage/O1")
        assert response.status_code == 200
        assert response.json()["actual_qty"] == 100

    async def test_get_missing(self, client: AsyncClient):
        await _order(client)
        response = await client.get("/api/v1/actual-usage/O1")
        assert response.status_code == 404
        assert response.json() == {"error": "Actual usage not found for this order"}
