"""
Owner-Scoped Repository

Every query and mutation on tenant data goes through this class. Each
statement is built from ``_scoped()``, which pins ``user_id`` to the owner
the repository was created for, so one user's session can never read or
touch another user's rows.
"""

import uuid
from collections.abc import Iterable

from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError, NotFoundError
from db.models import ActualUsage, Alert, InventoryItem, Order


class OwnerScopedRepository:
    """Data access for one owner's orders, usages, inventory and alerts."""

    def __init__(self, db: AsyncSession, user_id: uuid.UUID | str):
        self.db = db
        self.user_id = user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id))

    def _scoped(self, model) -> Select:
        return select(model).where(model.user_id == self.user_id)

    async def _all(self, query: Select) -> list:
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _one_or_none(self, query: Select):
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    # ── Unit of work ───────────────────────────────────────────────────

    def add(self, record) -> None:
        record.user_id = self.user_id
        self.db.add(record)

    def add_all(self, records: Iterable) -> None:
        for record in records:
            self.add(record)

    async def delete(self, record) -> None:
        if record.user_id != self.user_id:
            raise NotFoundError()
        await self.db.delete(record)

    async def flush(self) -> None:
        await self.db.flush()

    async def commit(self, conflict_message: str = "Record already exists") -> None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(conflict_message) from exc

    async def rollback(self) -> None:
        await self.db.rollback()

    async def refresh(self, record) -> None:
        await self.db.refresh(record)

    # ── Orders ─────────────────────────────────────────────────────────

    async def list_orders(self, newest_first: bool = False) -> list[Order]:
        query = self._scoped(Order)
        if newest_first:
            query = query.order_by(Order.created_at.desc())
        return await self._all(query)

    async def find_order(self, order_id: str) -> Order | None:
        return await self._one_or_none(self._scoped(Order).where(Order.order_id == order_id))

    async def get_order(self, order_id: str) -> Order:
        order = await self.find_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    # ── Actual usage ───────────────────────────────────────────────────

    async def list_usages(self, newest_first: bool = False) -> list[ActualUsage]:
        query = self._scoped(ActualUsage)
        if newest_first:
            query = query.order_by(ActualUsage.created_at.desc())
        return await self._all(query)

    async def find_usage(self, order_id: str) -> ActualUsage | None:
        return await self._one_or_none(self._scoped(ActualUsage).where(ActualUsage.order_id == order_id))

    async def get_usage(self, order_id: str) -> ActualUsage:
        usage = await self.find_usage(order_id)
        if usage is None:
            raise NotFoundError("Actual usage not found for this order")
        return usage

    # ── Inventory ──────────────────────────────────────────────────────

    async def list_inventory(self, newest_first: bool = False) -> list[InventoryItem]:
        query = self._scoped(InventoryItem)
        if newest_first:
            query = query.order_by(InventoryItem.updated_at.desc())
        return await self._all(query)

    async def list_low_stock(self) -> list[InventoryItem]:
        query = (
            self._scoped(InventoryItem)
            .where(InventoryItem.alert_status.is_(True))
            .order_by(InventoryItem.current_stock.asc())
        )
        return await self._all(query)

    async def find_inventory_item(self, item_name: str) -> InventoryItem | None:
        return await self._one_or_none(self._scoped(InventoryItem).where(InventoryItem.item_name == item_name))

    async def get_inventory_item(self, item_name: str) -> InventoryItem:
        item = await self.find_inventory_item(item_name)
        if item is None:
            raise NotFoundError("Inventory item not found")
        return item

    # ── Alerts ─────────────────────────────────────────────────────────

    async def list_alerts(self, unread_only: bool = False, limit: int | None = None) -> list[Alert]:
        query = self._scoped(Alert)
        if unread_only:
            query = query.where(Alert.is_read.is_(False))
        query = query.order_by(Alert.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return await self._all(query)

    async def get_alert(self, alert_id: uuid.UUID) -> Alert:
        alert = await self._one_or_none(self._scoped(Alert).where(Alert.alert_id == alert_id))
        if alert is None:
            raise NotFoundError("Alert not found")
        return alert

    async def mark_all_alerts_read(self) -> int:
        result = await self.db.execute(
            update(Alert)
            .where(Alert.user_id == self.user_id, Alert.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def count_alerts(self, *conditions) -> int:
        query = select(func.count()).select_from(Alert).where(Alert.user_id == self.user_id, *conditions)
        return (await self.db.execute(query)).scalar() or 0

