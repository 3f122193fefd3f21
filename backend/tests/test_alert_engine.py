"""
Tests for the Alert Engine — Variance and Reorder Classification.

Covers:
  - Variance alert threshold (strictly above 10%) and urgent band (above 20%)
  - Reorder alert priority bands
  - Alert staging on the repository
"""

import pytest

from alerts.engine import (
    classify_reorder_alert,
    classify_reorder_priority,
    classify_variance_alert,
    classify_variance_priority,
    create_alerts,
)
from db.models import Alert

# ── Variance Priority ──────────────────────────────────────────────────


class TestVariancePriority:
    def test_exactly_ten_percent_no_alert(self):
        assert classify_variance_priority(100, 1000) is None

    def test_just_over_ten_percent_alerts(self):
        assert classify_variance_priority(100.1, 1000) == "high"

    def test_exactly_twenty_percent_is_high(self):
        assert classify_variance_priority(1000, 5000) == "high"

    def test_over_twenty_percent_is_urgent(self):
        assert classify_variance_priority(1000.01, 5000) == "urgent"

    def test_negative_variance_uses_magnitude(self):
        assert classify_variance_priority(-300, 1000) == "urgent"
        assert classify_variance_priority(-150, 1000) == "high"
        assert classify_variance_priority(-50, 1000) is None

    def test_zero_variance(self):
        assert classify_variance_priority(0, 1000) is None


class TestVarianceAlert:
    def test_steel_scenario(self):
        draft = classify_variance_alert("O1", "Steel", 1000, 5000, currency="₹")
        assert draft is not None
        assert draft.priority == "high"
        assert draft.alert_type == "variance"
        assert draft.item_name == "Steel"
        assert draft.message == "High variance for order O1: Loss of ₹1000.00"

    def test_profit_message_uses_absolute_amount(self):
        draft = classify_variance_alert("O7", "Copper", -1234.5, 2000, currency="$")
        assert draft.message == "High variance for order O7: Profit of $1234.50"
        assert draft.priority == "urgent"

    def test_under_threshold_returns_none(self):
        assert classify_variance_alert("O1", "Steel", 500, 5000) is None


# ── Reorder Priority ───────────────────────────────────────────────────


class TestReorderPriority:
    def test_below_minimum_is_urgent(self):
        assert classify_reorder_priority(5, 10, 13) == "urgent"

    def test_below_reorder_band_is_high(self):
        assert classify_reorder_priority(12, 10, 13) == "high"

    def test_otherwise_medium(self):
        assert classify_reorder_priority(15, 10, 12.5) == "medium"


class TestReorderAlert:
    def test_bolt_scenario(self):
        draft = classify_reorder_alert("Bolt", current_stock=5, minimum_stock=10, reorder_level=13)
        assert draft is not None
        assert draft.priority == "urgent"
        assert draft.alert_type == "reorder"
        assert draft.message == "Bolt needs reorder. Current: 5, Reorder Qty: 8.00"

    def test_no_alert_when_stock_covers_level(self):
        assert classify_reorder_alert("Nut", current_stock=13, minimum_stock=5, reorder_level=13) is None

    def test_fractional_stock_in_message(self):
        draft = classify_reorder_alert("Wire", current_stock=2.5, minimum_stock=1, reorder_level=4)
        assert "Current: 2.5" in draft.message
        assert draft.priority == "high"


# ── Staging ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
class TestCreateAlerts:
    async def test_skips_none_and_pins_owner(self, repo):
        drafts = [
            classify_reorder_alert("Bolt", 5, 10, 13),
            None,
            classify_variance_alert("O1", "Steel", 1000, 5000),
        ]
        created = create_alerts(repo, drafts)
        await repo.commit()

        assert len(created) == 2
        assert all(isinstance(a, Alert) for a in created)
        assert all(a.user_id == repo.user_id for a in created)
        assert all(a.is_read is False for a in created)
        assert len(await repo.list_alerts()) == 2
