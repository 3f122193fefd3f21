"""
Actual Usage Router — record consumption against orders.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from api.deps import get_repository
from db.repository import OwnerScopedRepository
from production import service

router = APIRouter(prefix="/api/v1/actual-usage", tags=["actual-usage"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class ActualUsageCreate(BaseModel):
    order_id: str = Field(..., min_length=1, max_length=100)
    actual_qty: float = Field(..., gt=0, allow_inf_nan=False)
    actual_rate: float = Field(..., gt=0, allow_inf_nan=False)


class ActualUsageResponse(BaseModel):
    order_id: str
    actual_qty: float
    actual_rate: float
    actual_amount: float
    variance: float
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ActualUsageSaved(BaseModel):
    message: str
    actual_usage: ActualUsageResponse


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.post("/", response_model=ActualUsageSaved, status_code=201)
async def save_actual_usage(
    body: ActualUsageCreate,
    repo: OwnerScopedRepository = Depends(get_repository),
):
    """
    Record actual usage for an order.

    Re-submitting for the same order overwrites the earlier record and
    answers 200 instead of 201.
    """
    usage, created = await service.record_actual_usage(repo, body.order_id, body.actual_qty, body.actual_rate)
    payload = ActualUsageSaved(
        message="Actual usage saved",
        actual_usage=ActualUsageResponse.model_validate(usage),
    )
    return JSONResponse(status_code=201 if created else 200, content=jsonable_encoder(payload))


@router.get("/", response_model=list[ActualUsageResponse])
async def list_actual_usage(repo: OwnerScopedRepository = Depends(get_repository)):
    return await repo.list_usages(newest_first=True)


@router.get("/{order_id}", response_model=ActualUsageResponse)
async def get_actual_usage(order_id: str, repo: OwnerScopedRepository = Depends(get_repository)):
    return await repo.get_usage(order_id)
