"""
Production Cost Calculator — planned vs actual amounts and reorder thresholds.

Formulas:
  planned_amount   = planned_qty × planned_rate
  actual_amount    = actual_qty × actual_rate
  variance         = actual_amount − planned_amount   (positive = overspend)
  status           = Loss if variance > 0, Profit if < 0, Balanced if 0
  reorder_level    = daily_consumption × lead_time + safety_stock
  reorder_quantity = max(0, reorder_level − current_stock)

Everything here is pure arithmetic. Callers validate request payloads before
reaching these functions; only the amount helpers re-check their inputs.
"""

import math
from dataclasses import dataclass

from core.errors import InvalidInputError

STATUS_PROFIT = "Profit"
STATUS_LOSS = "Loss"
STATUS_BALANCED = "Balanced"


def _require_positive(name: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number") from exc
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(f"{name} must be a finite number greater than 0")
    return number


def compute_planned_amount(qty: float, rate: float) -> float:
    return _require_positive("planned_qty", qty) * _require_positive("planned_rate", rate)


def compute_actual_amount(qty: float, rate: float) -> float:
    return _require_positive("actual_qty", qty) * _require_positive("actual_rate", rate)


def compute_variance(actual_amount: float, planned_amount: float) -> float:
    return actual_amount - planned_amount


def classify_variance_status(variance: float) -> str:
    """Loss means actual cost exceeded plan (overspend), not an accounting loss."""
    if variance > 0:
        return STATUS_LOSS
    if variance < 0:
        return STATUS_PROFIT
    return STATUS_BALANCED


def compute_reorder_level(daily_consumption: float, lead_time: float, safety_stock: float) -> float:
    return daily_consumption * lead_time + safety_stock


def compute_reorder_quantity(reorder_level: float, current_stock: float) -> float:
    return max(0.0, reorder_level - current_stock)


def is_reorder_needed(reorder_quantity: float) -> bool:
    return reorder_quantity > 0


# ── Bundled evaluations used by the write paths ───────────────────────────


@dataclass(frozen=True)
class UsageEvaluation:
    actual_amount: float
    variance: float
    status: str


@dataclass(frozen=True)
class InventoryEvaluation:
    reorder_level: float
    reorder_quantity: float
    alert_status: bool


def evaluate_usage(actual_qty: float, actual_rate: float, planned_amount: float) -> UsageEvaluation:
    actual_amount = compute_actual_amount(actual_qty, actual_rate)
    variance = compute_variance(actual_amount, planned_amount)
    return UsageEvaluation(
        actual_amount=actual_amount,
        variance=variance,
        status=classify_variance_status(variance),
    )


def evaluate_inventory(
    current_stock: float,
    daily_consumption: float,
    lead_time: float,
    safety_stock: float,
) -> InventoryEvaluation:
    reorder_level = compute_reorder_level(daily_consumption, lead_time, safety_stock)
    reorder_quantity = compute_reorder_quantity(reorder_level, current_stock)
    return InventoryEvaluation(
        reorder_level=reorder_level,
        reorder_quantity=reorder_quantity,
        alert_status=is_reorder_needed(reorder_quantity),
    )
