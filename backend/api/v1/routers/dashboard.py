"""
Dashboard Router — aggregate stats and chart series.
"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_repository
from db.repository import OwnerScopedRepository
from reports.aggregation import build_dashboard

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class DashboardStats(BaseModel):
    total_orders: int
    total_planned_cost: float
    total_actual_cost: float
    total_profit_loss: float
    low_stock_items: int
    recent_alerts: int


class PlannedVsActualPoint(BaseModel):
    order_id: str
    planned: float
    actual: float


class InventoryLevelPoint(BaseModel):
    item_name: str
    current_stock: float
    minimum_stock: float
    reorder_level: float


class ChartData(BaseModel):
    planned_vs_actual: list[PlannedVsActualPoint]
    inventory_levels: list[InventoryLevelPoint]


class RecentAlert(BaseModel):
    alert_id: UUID
    item_name: str
    message: str
    priority: str
    alert_type: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class DashboardResponse(BaseModel):
    stats: DashboardStats
    chart_data: ChartData
    recent_alerts: list[RecentAlert]


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.get("/stats", response_model=DashboardResponse)
async def get_dashboard_stats(repo: OwnerScopedRepository = Depends(get_repository)):
    return build_dashboard(
        orders=await repo.list_orders(),
        usages=await repo.list_usages(),
        items=await repo.list_inventory(),
        alerts=await repo.list_alerts(),
    )
