"""
Reports Router — variance, reorder and order-summary reports.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_repository
from db.repository import OwnerScopedRepository
from reports.aggregation import build_order_summary, build_reorder_report, build_variance_report

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class VarianceRow(BaseModel):
    order_id: str
    item_name: str
    planned_amount: float
    actual_amount: float
    variance: float
    status: str


class ReorderRow(BaseModel):
    item_name: str
    current_stock: float
    minimum_stock: float
    reorder_level: float
    reorder_quantity: float
    priority: str


class OrderSummaryRow(BaseModel):
    order_id: str
    item_name: str
    total_planned_cost: float
    total_actual_cost: float
    total_variance: float
    status: str
    created_at: datetime


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.get("/variance", response_model=list[VarianceRow])
async def variance_report(repo: OwnerScopedRepository = Depends(get_repository)):
    """One row per order; orders without usage report as Pending."""
    return build_variance_report(await repo.list_orders(), await repo.list_usages())


@router.get("/reorder", response_model=list[ReorderRow])
async def reorder_report(repo: OwnerScopedRepository = Depends(get_repository)):
    return build_reorder_report(await repo.list_low_stock())


@router.get("/order-summary", response_model=list[OrderSummaryRow])
async def order_summary_report(repo: OwnerScopedRepository = Depends(get_repository)):
    return build_order_summary(await repo.list_orders(newest_first=True), await repo.list_usages())
