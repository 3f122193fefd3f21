"""
ProdTrack Database Models

5 tables for production cost and inventory tracking.
Multi-tenant via user_id on every table except users.

Tables:
  1. users            - Accounts (tenant boundary)
  2. production_orders - Planned quantity x rate per order
  3. actual_usages    - Recorded consumption, one per order
  4. inventory_items  - Stock levels and reorder thresholds
  5. alerts           - Variance and reorder notifications
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    TypeDecorator,
    UniqueConstraint,
    types,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID


class GUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses PostgreSQL UUID when available, stores as CHAR(36) on SQLite.
    """

    impl = types.String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(types.String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if dialect.name == "postgresql":
            return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        return str(value) if isinstance(value, uuid.UUID) else str(uuid.UUID(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))


from db.session import Base

VARIANCE_STATUSES = ("Profit", "Loss", "Balanced")
ALERT_PRIORITIES = ("low", "medium", "high", "urgent")
ALERT_TYPES = ("reorder", "variance", "stockout")
USER_ROLES = ("admin", "manager")

# ─── 1. Users ───────────────────────────────────────────────────────────────


class User(Base):
    __tablename__ = "users"

    user_id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    username = Column(String(80), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="admin")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (CheckConstraint("role IN ('admin', 'manager')", name="ck_user_role"),)


# ─── 2. Production Orders ───────────────────────────────────────────────────


class Order(Base):
    __tablename__ = "production_orders"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID(), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    order_id = Column(String(100), nullable=False)
    item_name = Column(String(255), nullable=False)
    planned_qty = Column(Float, nullable=False)
    planned_rate = Column(Float, nullable=False)
    planned_amount = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "order_id", name="uq_order_user_order_id"),
        CheckConstraint("planned_qty > 0", name="ck_order_planned_qty"),
        CheckConstraint("planned_rate > 0", name="ck_order_planned_rate"),
    )


# ─── 3. Actual Usages ───────────────────────────────────────────────────────


class ActualUsage(Base):
    __tablename__ = "actual_usages"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID(), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    order_id = Column(String(100), nullable=False)
    actual_qty = Column(Float, nullable=False)
    actual_rate = Column(Float, nullable=False)
    actual_amount = Column(Float, nullable=False)
    variance = Column(Float, nullable=False)
    status = Column(String(20), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "order_id", name="uq_usage_user_order_id"),
        CheckConstraint("status IN ('Profit', 'Loss', 'Balanced')", name="ck_usage_status"),
    )


# ─── 4. Inventory Items ─────────────────────────────────────────────────────


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID(), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    item_name = Column(String(255), nullable=False)
    current_stock = Column(Float, nullable=False)
    minimum_stock = Column(Float, nullable=False)
    daily_consumption = Column(Float, nullable=False)
    lead_time = Column(Float, nullable=False)
    safety_stock = Column(Float, nullable=False)
    reorder_level = Column(Float, nullable=False)
    reorder_quantity = Column(Float, nullable=False)
    alert_status = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "item_name", name="uq_inventory_user_item"),
        CheckConstraint("reorder_quantity >= 0", name="ck_inventory_reorder_qty"),
    )


# ─── 5. Alerts ──────────────────────────────────────────────────────────────


class Alert(Base):
    __tablename__ = "alerts"

    alert_id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID(), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    item_name = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(20), nullable=False, default="medium")
    alert_type = Column(String(20), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_alerts_user_read", "user_id", "is_read"),
        CheckConstraint("priority IN ('low', 'medium', 'high', 'urgent')", name="ck_alert_priority"),
        CheckConstraint("alert_type IN ('reorder', 'variance', 'stockout')", name="ck_alert_type"),
    )
