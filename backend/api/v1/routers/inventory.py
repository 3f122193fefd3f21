"""
Inventory Router — Stock levels and reorder status.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from api.deps import get_repository
from db.repository import OwnerScopedRepository
from production import service

router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class InventoryUpsert(BaseModel):
    item_name: str = Field(..., min_length=1, max_length=255)
    current_stock: float = Field(..., ge=0, allow_inf_nan=False)
    minimum_stock: float = Field(..., gt=0, allow_inf_nan=False)
    daily_consumption: float = Field(..., gt=0, allow_inf_nan=False)
    lead_time: float = Field(..., gt=0, allow_inf_nan=False)
    safety_stock: float = Field(..., ge=0, allow_inf_nan=False)


class InventoryItemResponse(BaseModel):
    item_name: str
    current_stock: float
    minimum_stock: float
    daily_consumption: float
    lead_time: float
    safety_stock: float
    reorder_level: float
    reorder_quantity: float
    alert_status: bool
    updated_at: datetime

    model_config = {"from_attributes": True}


class InventorySaved(BaseModel):
    message: str
    inventory: InventoryItemResponse


class InventorySummary(BaseModel):
    total_items: int
    in_stock: int
    low_stock: int
    urgent: int


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.post("/", response_model=InventorySaved, status_code=201)
async def upsert_inventory_item(
    body: InventoryUpsert,
    repo: OwnerScopedRepository = Depends(get_repository),
):
    """Create or overwrite an item by name and recompute its reorder figures."""
    item, created = await service.upsert_inventory_item(repo, **body.model_dump())
    payload = InventorySaved(
        message="Inventory item created successfully" if created else "Inventory updated successfully",
        inventory=InventoryItemResponse.model_validate(item),
    )
    return JSONResponse(status_code=201 if created else 200, content=jsonable_encoder(payload))


@router.get("/", response_model=list[InventoryItemResponse])
async def list_inventory(repo: OwnerScopedRepository = Depends(get_repository)):
    """List items, most recently updated first."""
    return await repo.list_inventory(newest_first=True)


@router.get("/low-stock", response_model=list[InventoryItemResponse])
async def list_low_stock(repo: OwnerScopedRepository = Depends(get_repository)):
    """Items that need reordering, lowest stock first."""
    return await repo.list_low_stock()


@router.get("/summary", response_model=InventorySummary)
async def get_inventory_summary(repo: OwnerScopedRepository = Depends(get_repository)):
    """Get high-level inventory status counts."""
    items = await repo.list_inventory()
    low = [item for item in items if item.alert_status]
    urgent = sum(1 for item in low if item.current_stock < item.minimum_stock)
    return InventorySummary(
        total_items=len(items),
        in_stock=len(items) - len(low),
        low_stock=len(low),
        urgent=urgent,
    )


@router.delete("/{item_name}")
async def delete_inventory_item(item_name: str, repo: OwnerScopedRepository = Depends(get_repository)):
    item = await repo.get_inventory_item(item_name)
    await repo.delete(item)
    await repo.commit()
    return {"message": "Inventory item deleted successfully"}
