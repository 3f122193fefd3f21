"""
Alert Engine — Variance and reorder detection, alert persistence.

Alert Types:
  - variance: actual cost deviates from plan by more than 10%
  - reorder:  inventory item has fallen below its reorder level
  - stockout: reserved for stock exhaustion notices

Every evaluation that crosses a threshold produces a new alert row. Repeated
writes for the same order or item are not collapsed.
"""

from dataclasses import dataclass

import structlog

from core.config import get_settings
from db.models import Alert
from db.repository import OwnerScopedRepository
from production.calculator import (
    classify_variance_status,
    compute_reorder_quantity,
    is_reorder_needed,
)

logger = structlog.get_logger()

# ──────────────────────────────────────────────────────────────────────────
# Detection Rules
# ──────────────────────────────────────────────────────────────────────────

VARIANCE_THRESHOLDS = {
    "alert": 0.10,  # |variance| > 10% of plan
    "urgent": 0.20,  # |variance| > 20% of plan
}

REORDER_HIGH_BAND = 1.2  # stock under 120% of reorder level


@dataclass(frozen=True)
class AlertDraft:
    """An alert decided on but not yet persisted."""

    item_name: str
    alert_type: str
    priority: str
    message: str


def classify_variance_priority(variance: float, planned_amount: float) -> str | None:
    """Return the priority for a variance, or None when under the alert threshold."""
    magnitude = abs(variance)
    if magnitude <= planned_amount * VARIANCE_THRESHOLDS["alert"]:
        return None
    if magnitude > planned_amount * VARIANCE_THRESHOLDS["urgent"]:
        return "urgent"
    return "high"


def classify_reorder_priority(current_stock: float, minimum_stock: float, reorder_level: float) -> str:
    if current_stock < minimum_stock:
        return "urgent"
    if current_stock < reorder_level * REORDER_HIGH_BAND:
        return "high"
    return "medium"


def classify_variance_alert(
    order_id: str,
    item_name: str,
    variance: float,
    planned_amount: float,
    currency: str | None = None,
) -> AlertDraft | None:
    priority = classify_variance_priority(variance, planned_amount)
    if priority is None:
        return None
    symbol = get_settings().currency_symbol if currency is None else currency
    status = classify_variance_status(variance)
    return AlertDraft(
        item_name=item_name,
        alert_type="variance",
        priority=priority,
        message=f"High variance for order {order_id}: {status} of {symbol}{abs(variance):.2f}",
    )


def _format_quantity(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


def classify_reorder_alert(
    item_name: str,
    current_stock: float,
    minimum_stock: float,
    reorder_level: float,
) -> AlertDraft | None:
    reorder_quantity = compute_reorder_quantity(reorder_level, current_stock)
    if not is_reorder_needed(reorder_quantity):
        return None
    return AlertDraft(
        item_name=item_name,
        alert_type="reorder",
        priority=classify_reorder_priority(current_stock, minimum_stock, reorder_level),
        message=(
            f"{item_name} needs reorder. Current: {_format_quantity(current_stock)}, "
            f"Reorder Qty: {reorder_quantity:.2f}"
        ),
    )


# ──────────────────────────────────────────────────────────────────────────
# Alert Creation
# ──────────────────────────────────────────────────────────────────────────


def create_alerts(repo: OwnerScopedRepository, drafts: list[AlertDraft | None]) -> list[Alert]:
    """Stage alerts on the repository's session; the caller commits."""
    created = []
    for draft in drafts:
        if draft is None:
            continue
        alert = Alert(
            item_name=draft.item_name,
            alert_type=draft.alert_type,
            priority=draft.priority,
            message=draft.message,
            is_read=False,
        )
        created.append(alert)
        logger.info(
            "alert.created",
            user_id=str(repo.user_id),
            alert_type=draft.alert_type,
            priority=draft.priority,
            item_name=draft.item_name,
        )
    repo.add_all(created)
    return created
