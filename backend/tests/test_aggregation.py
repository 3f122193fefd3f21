"""
Tests for the Reporting Engine — dashboard, reports and chat context.

Pure folds over in-memory records; SimpleNamespace stands in for ORM rows.
"""

from datetime import datetime, timedelta
from types import SimpleNamespace

from reports.aggregation import (
    build_chat_context,
    build_dashboard,
    build_order_summary,
    build_reorder_report,
    build_variance_report,
)

NOW = datetime(2026, 3, 1, 12, 0, 0)


def _order(order_id, item_name, planned_amount, minutes=0):
    return SimpleNamespace(
        order_id=order_id,
        item_name=item_name,
        planned_amount=planned_amount,
        created_at=NOW + timedelta(minutes=minutes),
    )


def _usage(order_id, actual_amount, variance, status):
    return SimpleNamespace(order_id=order_id, actual_amount=actual_amount, variance=variance, status=status)


def _item(name, current, minimum, level, qty):
    return SimpleNamespace(
        item_name=name,
        current_stock=current,
        minimum_stock=minimum,
        reorder_level=level,
        reorder_quantity=qty,
        alert_status=qty > 0,
    )


def _alert(alert_id, is_read, minutes):
    return SimpleNamespace(alert_id=alert_id, is_read=is_read, created_at=NOW + timedelta(minutes=minutes))


# ── Dashboard ──────────────────────────────────────────────────────────


class TestDashboard:
    def test_empty_owner(self):
        result = build_dashboard([], [], [], [])
        assert result["stats"] == {
            "total_orders": 0,
            "total_planned_cost": 0,
            "total_actual_cost": 0,
            "total_profit_loss": 0,
            "low_stock_items": 0,
            "recent_alerts": 0,
        }
        assert result["chart_data"] == {"planned_vs_actual": [], "inventory_levels": []}
        assert result["recent_alerts"] == []

    def test_profit_loss_is_negated_variance(self):
        orders = [_order("O1", "Steel", 5000), _order("O2", "Copper", 2000)]
        usages = [_usage("O1", 6000, 1000, "Loss"), _usage("O2", 1500, -500, "Profit")]
        stats = build_dashboard(orders, usages, [], [])["stats"]

        assert stats["total_orders"] == 2
        assert stats["total_planned_cost"] == 7000
        assert stats["total_actual_cost"] == 7500
        assert stats["total_profit_loss"] == -500

    def test_money_rounded_to_cents(self):
        orders = [_order("O1", "Steel", 0.1), _order("O2", "Steel", 0.2)]
        stats = build_dashboard(orders, [], [], [])["stats"]
        assert stats["total_planned_cost"] == 0.3

    def test_planned_vs_actual_pairs_missing_usage_with_zero(self):
        orders = [_order("O1", "Steel", 5000), _order("O2", "Copper", 2000)]
        usages = [_usage("O1", 6000, 1000, "Loss")]
        chart = build_dashboard(orders, usages, [], [])["chart_data"]["planned_vs_actual"]
        assert chart == [
            {"order_id": "O1", "planned": 5000, "actual": 6000},
            {"order_id": "O2", "planned": 2000, "actual": 0},
        ]

    def test_low_stock_and_unread_counts(self):
        items = [_item("Bolt", 5, 10, 13, 8), _item("Nut", 50, 10, 13, 0)]
        alerts = [_alert(1, False, 0), _alert(2, True, 1), _alert(3, False, 2)]
        stats = build_dashboard([], [], items, alerts)["stats"]
        assert stats["low_stock_items"] == 1
        assert stats["recent_alerts"] == 2

    def test_recent_alerts_newest_five(self):
        alerts = [_alert(i, False, i) for i in range(8)]
        recent = build_dashboard([], [], [], alerts)["recent_alerts"]
        assert [a.alert_id for a in recent] == [7, 6, 5, 4, 3]


# ── Reports ────────────────────────────────────────────────────────────


class TestReports:
    def test_variance_report_marks_pending(self):
        orders = [_order("O1", "Steel", 5000), _order("O2", "Copper", 2000)]
        usages = [_usage("O1", 6000, 1000, "Loss")]
        rows = build_variance_report(orders, usages)

        assert rows[0]["status"] == "Loss"
        assert rows[0]["variance"] == 1000
        assert rows[1] == {
            "order_id": "O2",
            "item_name": "Copper",
            "planned_amount": 2000,
            "actual_amount": 0,
            "variance": 0,
            "status": "Pending",
        }

    def test_reorder_report_priority(self):
        items = [
            _item("Bolt", 5, 10, 13, 8),
            _item("Washer", 11, 10, 13, 2),
            _item("Nut", 50, 10, 13, 0),
        ]
        rows = build_reorder_report(items)
        assert [(r["item_name"], r["priority"]) for r in rows] == [("Bolt", "Urgent"), ("Washer", "Normal")]

    def test_order_summary_carries_created_at(self):
        orders = [_order("O1", "Steel", 5000, minutes=3)]
        rows = build_order_summary(orders, [_usage("O1", 4000, -1000, "Profit")])
        assert rows[0]["total_planned_cost"] == 5000
        assert rows[0]["total_actual_cost"] == 4000
        assert rows[0]["total_variance"] == -1000
        assert rows[0]["status"] == "Profit"
        assert rows[0]["created_at"] == NOW + timedelta(minutes=3)


# ── Chat Context ───────────────────────────────────────────────────────


class TestChatContext:
    def test_counts_and_pending(self):
        orders = [_order(f"O{i}", "Steel", 100) for i in range(4)]
        usages = [_usage("O0", 120, 20, "Loss"), _usage("O1", 80, -20, "Profit"), _usage("O2", 100, 0, "Balanced")]
        context = build_chat_context(orders, usages, [], [_alert(1, False, 0)], currency="$")

        assert context.total_orders == 4
        assert context.profit_orders == 1
        assert context.loss_orders == 1
        assert context.pending_orders == 2
        assert context.unread_alerts == 1
        assert context.currency == "$"

    def test_recent_lists_capped_at_ten(self):
        orders = [_order(f"O{i}", "Steel", 100) for i in range(15)]
        usages = [_usage(f"O{i}", 100, 0, "Balanced") for i in range(15)]
        context = build_chat_context(orders, usages, [], [])
        assert len(context.recent_orders) == 10
        assert len(context.recent_usages) == 10
        assert context.total_orders == 15

    def test_low_stock_only_flagged_items(self):
        items = [_item("Bolt", 5, 10, 13, 8), _item("Nut", 50, 10, 13, 0)]
        context = build_chat_context([], [], items, [])
        assert [e.item_name for e in context.low_stock_items] == ["Bolt"]
        assert context.low_stock_items[0].reorder_quantity == 8
