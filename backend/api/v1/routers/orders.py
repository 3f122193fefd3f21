"""
Orders Router — CRUD for production orders.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.deps import get_repository
from db.repository import OwnerScopedRepository
from production import service

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class OrderCreate(BaseModel):
    order_id: str = Field(..., min_length=1, max_length=100)
    item_name: str = Field(..., min_length=1, max_length=255)
    planned_qty: float = Field(..., gt=0, allow_inf_nan=False)
    planned_rate: float = Field(..., gt=0, allow_inf_nan=False)


class OrderUpdate(BaseModel):
    item_name: str | None = Field(None, min_length=1, max_length=255)
    planned_qty: float | None = Field(None, gt=0, allow_inf_nan=False)
    planned_rate: float | None = Field(None, gt=0, allow_inf_nan=False)


class OrderResponse(BaseModel):
    order_id: str
    item_name: str
    planned_qty: float
    planned_rate: float
    planned_amount: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OrderMutationResponse(BaseModel):
    message: str
    order: OrderResponse


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.post("/", response_model=OrderMutationResponse, status_code=201)
async def create_order(
    body: OrderCreate,
    repo: OwnerScopedRepository = Depends(get_repository),
):
    """Create an order; planned_amount is derived from quantity × rate."""
    order = await service.create_order(repo, body.order_id, body.item_name, body.planned_qty, body.planned_rate)
    return {"message": "Order created successfully", "order": order}


@router.get("/", response_model=list[OrderResponse])
async def list_orders(repo: OwnerScopedRepository = Depends(get_repository)):
    """List orders, newest first."""
    return await repo.list_orders(newest_first=True)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, repo: OwnerScopedRepository = Depends(get_repository)):
    return await repo.get_order(order_id)


@router.put("/{order_id}", response_model=OrderMutationResponse)
async def update_order(
    order_id: str,
    body: OrderUpdate,
    repo: OwnerScopedRepository = Depends(get_repository),
):
    order = await service.update_order(
        repo,
        order_id,
        item_name=body.item_name,
        planned_qty=body.planned_qty,
        planned_rate=body.planned_rate,
    )
    return {"message": "Order updated successfully", "order": order}


@router.delete("/{order_id}")
async def delete_order(order_id: str, repo: OwnerScopedRepository = Depends(get_repository)):
    """Delete an order together with its recorded actual usage."""
    await service.delete_order(repo, order_id)
    return {"message": "Order deleted successfully"}
