"""
Reporting Engine — dashboard stats, reports and the chatbot context snapshot.

All functions fold in-memory collections of one owner's records; nothing
here touches the database. Orders are joined to actual usage by order_id
(left join), so an order without usage reports as Pending with zero actuals.

Report rows carry no ordering guarantee beyond the input order.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

PENDING_STATUS = "Pending"
RECENT_ALERTS_LIMIT = 5
CHAT_RECENT_LIMIT = 10


def _usage_by_order(usages: Iterable) -> dict[str, Any]:
    return {usage.order_id: usage for usage in usages}


def _money(value: float) -> float:
    return round(float(value), 2)


# ─── Dashboard ──────────────────────────────────────────────────────────────


def build_dashboard(
    orders: Sequence,
    usages: Sequence,
    items: Sequence,
    alerts: Sequence,
) -> dict[str, Any]:
    """
    Aggregate the dashboard payload.

    total_profit_loss is the negated variance sum, so a positive figure means
    the owner spent less than planned overall.
    """
    usage_map = _usage_by_order(usages)

    total_planned = sum(order.planned_amount for order in orders)
    total_actual = sum(usage.actual_amount for usage in usages)
    total_variance = sum(usage.variance for usage in usages)

    newest_alerts = sorted(alerts, key=lambda a: a.created_at or datetime.min, reverse=True)

    return {
        "stats": {
            "total_orders": len(orders),
            "total_planned_cost": _money(total_planned),
            "total_actual_cost": _money(total_actual),
            "total_profit_loss": _money(-total_variance),
            "low_stock_items": sum(1 for item in items if item.alert_status),
            "recent_alerts": sum(1 for alert in alerts if not alert.is_read),
        },
        "chart_data": {
            "planned_vs_actual": [
                {
                    "order_id": order.order_id,
                    "planned": order.planned_amount,
                    "actual": usage_map[order.order_id].actual_amount if order.order_id in usage_map else 0,
                }
                for order in orders
            ],
            "inventory_levels": [
                {
                    "item_name": item.item_name,
                    "current_stock": item.current_stock,
                    "minimum_stock": item.minimum_stock,
                    "reorder_level": item.reorder_level,
                }
                for item in items
            ],
        },
        "recent_alerts": newest_alerts[:RECENT_ALERTS_LIMIT],
    }


# ─── Reports ────────────────────────────────────────────────────────────────


def build_variance_report(orders: Sequence, usages: Sequence) -> list[dict[str, Any]]:
    usage_map = _usage_by_order(usages)
    rows = []
    for order in orders:
        usage = usage_map.get(order.order_id)
        rows.append(
            {
                "order_id": order.order_id,
                "item_name": order.item_name,
                "planned_amount": order.planned_amount,
                "actual_amount": usage.actual_amount if usage else 0,
                "variance": usage.variance if usage else 0,
                "status": usage.status if usage else PENDING_STATUS,
            }
        )
    return rows


def build_reorder_report(items: Sequence) -> list[dict[str, Any]]:
    return [
        {
            "item_name": item.item_name,
            "current_stock": item.current_stock,
            "minimum_stock": item.minimum_stock,
            "reorder_level": item.reorder_level,
            "reorder_quantity": item.reorder_quantity,
            "priority": "Urgent" if item.current_stock < item.minimum_stock else "Normal",
        }
        for item in items
        if item.alert_status
    ]


def build_order_summary(orders: Sequence, usages: Sequence) -> list[dict[str, Any]]:
    usage_map = _usage_by_order(usages)
    rows = []
    for order in orders:
        usage = usage_map.get(order.order_id)
        rows.append(
            {
                "order_id": order.order_id,
                "item_name": order.item_name,
                "total_planned_cost": order.planned_amount,
                "total_actual_cost": usage.actual_amount if usage else 0,
                "total_variance": usage.variance if usage else 0,
                "status": usage.status if usage else PENDING_STATUS,
                "created_at": order.created_at,
            }
        )
    return rows


# ─── Chatbot Context ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LowStockEntry:
    item_name: str
    current_stock: float
    reorder_quantity: float


@dataclass(frozen=True)
class OrderEntry:
    order_id: str
    item_name: str
    planned_amount: float


@dataclass(frozen=True)
class UsageEntry:
    order_id: str
    actual_amount: float
    variance: float
    status: str


@dataclass(frozen=True)
class ChatContext:
    """Snapshot of one owner's data handed to the chatbot."""

    total_orders: int = 0
    profit_orders: int = 0
    loss_orders: int = 0
    unread_alerts: int = 0
    low_stock_items: tuple[LowStockEntry, ...] = ()
    recent_orders: tuple[OrderEntry, ...] = ()
    recent_usages: tuple[UsageEntry, ...] = ()
    currency: str = "₹"

    @property
    def pending_orders(self) -> int:
        return self.total_orders - self.profit_orders - self.loss_orders


def build_chat_context(
    orders: Sequence,
    usages: Sequence,
    items: Sequence,
    unread_alerts: Sequence,
    currency: str = "₹",
) -> ChatContext:
    return ChatContext(
        total_orders=len(orders),
        profit_orders=sum(1 for usage in usages if usage.status == "Profit"),
        loss_orders=sum(1 for usage in usages if usage.status == "Loss"),
        unread_alerts=len(unread_alerts),
        low_stock_items=tuple(
            LowStockEntry(item.item_name, item.current_stock, item.reorder_quantity)
            for item in items
            if item.alert_status
        ),
        recent_orders=tuple(
            OrderEntry(order.order_id, order.item_name, order.planned_amount)
            for order in orders[:CHAT_RECENT_LIMIT]
        ),
        recent_usages=tuple(
            UsageEntry(usage.order_id, usage.actual_amount, usage.variance, usage.status)
            for usage in usages[:CHAT_RECENT_LIMIT]
        ),
        currency=currency,
    )
