"""
Production Service — write workflows for orders, actual usage and inventory.

Each workflow validates, computes derived fields, stages any alerts, and
commits once, so a failed write leaves no partial state behind.
"""

from datetime import datetime

import structlog
from sqlalchemy.exc import SQLAlchemyError

from alerts.engine import classify_reorder_alert, classify_variance_alert, create_alerts
from core.errors import ConflictError, InternalError
from db.models import ActualUsage, InventoryItem, Order
from db.repository import OwnerScopedRepository
from production.calculator import compute_planned_amount, evaluate_inventory, evaluate_usage

logger = structlog.get_logger()


def _apply_usage_evaluation(usage: ActualUsage, order: Order) -> None:
    evaluation = evaluate_usage(usage.actual_qty, usage.actual_rate, order.planned_amount)
    usage.actual_amount = evaluation.actual_amount
    usage.variance = evaluation.variance
    usage.status = evaluation.status


# ─── Orders ─────────────────────────────────────────────────────────────────


async def create_order(
    repo: OwnerScopedRepository,
    order_id: str,
    item_name: str,
    planned_qty: float,
    planned_rate: float,
) -> Order:
    planned_amount = compute_planned_amount(planned_qty, planned_rate)
    if await repo.find_order(order_id) is not None:
        raise ConflictError("Order ID already exists")

    order = Order(
        order_id=order_id,
        item_name=item_name,
        planned_qty=float(planned_qty),
        planned_rate=float(planned_rate),
        planned_amount=planned_amount,
    )
    repo.add(order)
    await repo.commit(conflict_message="Order ID already exists")
    await repo.refresh(order)
    logger.info("order.created", user_id=str(repo.user_id), order_id=order_id, planned_amount=planned_amount)
    return order


async def update_order(
    repo: OwnerScopedRepository,
    order_id: str,
    item_name: str | None = None,
    planned_qty: float | None = None,
    planned_rate: float | None = None,
) -> Order:
    """
    Update an order and recompute its planned amount.

    When actual usage is already recorded, its variance and status are
    recomputed against the new plan and the variance rule is re-evaluated.
    """
    order = await repo.get_order(order_id)
    new_qty = order.planned_qty if planned_qty is None else planned_qty
    new_rate = order.planned_rate if planned_rate is None else planned_rate
    planned_amount = compute_planned_amount(new_qty, new_rate)

    if item_name is not None:
        order.item_name = item_name
    order.planned_qty = float(new_qty)
    order.planned_rate = float(new_rate)
    order.planned_amount = planned_amount

    usage = await repo.find_usage(order_id)
    if usage is not None:
        _apply_usage_evaluation(usage, order)
        create_alerts(
            repo,
            [classify_variance_alert(order.order_id, order.item_name, usage.variance, order.planned_amount)],
        )

    await repo.commit()
    await repo.refresh(order)
    logger.info("order.updated", user_id=str(repo.user_id), order_id=order_id, planned_amount=planned_amount)
    return order


async def delete_order(repo: OwnerScopedRepository, order_id: str) -> None:
    """Delete an order and its actual usage in one transaction, dependent first."""
    order = await repo.get_order(order_id)
    usage = await repo.find_usage(order_id)
    try:
        if usage is not None:
            await repo.delete(usage)
            await repo.flush()
        await repo.delete(order)
        await repo.commit()
    except (SQLAlchemyError, ConflictError) as exc:
        # commit() surfaces IntegrityError as ConflictError
        cause = exc.__cause__ or exc
        await repo.rollback()
        logger.error("order.delete_failed", user_id=str(repo.user_id), order_id=order_id, error=str(cause))
        raise InternalError(
            "Order deletion failed; order and actual usage were left unchanged",
            details=str(cause),
        ) from exc
    logger.info("order.deleted", user_id=str(repo.user_id), order_id=order_id, had_usage=usage is not None)


# ─── Actual Usage ───────────────────────────────────────────────────────────


async def record_actual_usage(
    repo: OwnerScopedRepository,
    order_id: str,
    actual_qty: float,
    actual_rate: float,
) -> tuple[ActualUsage, bool]:
    """
    Upsert the actual usage for an order.

    Returns (usage, created) where created is False when an existing record
    was overwritten.
    """
    order = await repo.get_order(order_id)
    evaluation = evaluate_usage(actual_qty, actual_rate, order.planned_amount)

    usage = await repo.find_usage(order_id)
    created = usage is None
    if created:
        usage = ActualUsage(order_id=order_id)
        repo.add(usage)

    usage.actual_qty = float(actual_qty)
    usage.actual_rate = float(actual_rate)
    usage.actual_amount = evaluation.actual_amount
    usage.variance = evaluation.variance
    usage.status = evaluation.status

    create_alerts(
        repo,
        [classify_variance_alert(order_id, order.item_name, evaluation.variance, order.planned_amount)],
    )

    await repo.commit(conflict_message="Actual usage already exists for this order")
    await repo.refresh(usage)
    logger.info(
        "actual_usage.saved",
        user_id=str(repo.user_id),
        order_id=order_id,
        variance=evaluation.variance,
        status=evaluation.status,
        created=created,
    )
    return usage, created


# ─── Inventory ──────────────────────────────────────────────────────────────


async def upsert_inventory_item(
    repo: OwnerScopedRepository,
    item_name: str,
    current_stock: float,
    minimum_stock: float,
    daily_consumption: float,
    lead_time: float,
    safety_stock: float,
) -> tuple[InventoryItem, bool]:
    """Create or overwrite an inventory item keyed by name; returns (item, created)."""
    evaluation = evaluate_inventory(current_stock, daily_consumption, lead_time, safety_stock)

    item = await repo.find_inventory_item(item_name)
    created = item is None
    if created:
        item = InventoryItem(item_name=item_name)
        repo.add(item)

    item.current_stock = float(current_stock)
    item.minimum_stock = float(minimum_stock)
    item.daily_consumption = float(daily_consumption)
    item.lead_time = float(lead_time)
    item.safety_stock = float(safety_stock)
    item.reorder_level = evaluation.reorder_level
    item.reorder_quantity = evaluation.reorder_quantity
    item.alert_status = evaluation.alert_status
    item.updated_at = datetime.utcnow()

    create_alerts(
        repo,
        [classify_reorder_alert(item_name, item.current_stock, item.minimum_stock, item.reorder_level)],
    )

    await repo.commit(conflict_message="Inventory item already exists")
    await repo.refresh(item)
    logger.info(
        "inventory.saved",
        user_id=str(repo.user_id),
        item_name=item_name,
        reorder_quantity=evaluation.reorder_quantity,
        created=created,
    )
    return item, created
