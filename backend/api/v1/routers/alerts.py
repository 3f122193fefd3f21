"""
Alerts Router — Alert listing, read state and deletion.
"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from api.deps import get_repository
from db.models import Alert
from db.repository import OwnerScopedRepository

router = APIRouter(prefix="/api/v1/alerts", tags=["alerts"])


# ─── Schemas ────────────────────────────────────────────────────────────────


class AlertResponse(BaseModel):
    alert_id: UUID
    item_name: str
    message: str
    priority: str
    alert_type: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AlertSummary(BaseModel):
    total: int
    unread: int
    urgent: int
    high: int
    variance: int
    reorder: int


class AlertMutationResponse(BaseModel):
    message: str
    alert: AlertResponse


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.get("/", response_model=list[AlertResponse])
async def list_alerts(
    limit: int | None = Query(None, ge=1, le=500),
    repo: OwnerScopedRepository = Depends(get_repository),
):
    """List alerts, newest first."""
    return await repo.list_alerts(limit=limit)


@router.get("/unread", response_model=list[AlertResponse])
async def list_unread_alerts(repo: OwnerScopedRepository = Depends(get_repository)):
    return await repo.list_alerts(unread_only=True)


@router.get("/summary", response_model=AlertSummary)
async def get_alert_summary(repo: OwnerScopedRepository = Depends(get_repository)):
    """Get alert summary counts."""
    return AlertSummary(
        total=await repo.count_alerts(),
        unread=await repo.count_alerts(Alert.is_read.is_(False)),
        urgent=await repo.count_alerts(Alert.priority == "urgent"),
        high=await repo.count_alerts(Alert.priority == "high"),
        variance=await repo.count_alerts(Alert.alert_type == "variance"),
        reorder=await repo.count_alerts(Alert.alert_type == "reorder"),
    )


@router.patch("/read-all")
async def mark_all_alerts_read(repo: OwnerScopedRepository = Depends(get_repository)):
    """Mark every unread alert as read."""
    updated = await repo.mark_all_alerts_read()
    await repo.commit()
    return {"message": "All alerts marked as read", "updated": updated}


@router.patch("/{alert_id}/read", response_model=AlertMutationResponse)
async def mark_alert_read(alert_id: UUID, repo: OwnerScopedRepository = Depends(get_repository)):
    alert = await repo.get_alert(alert_id)
    alert.is_read = True
    await repo.commit()
    await repo.refresh(alert)
    return {"message": "Alert marked as read", "alert": alert}


@router.delete("/{alert_id}")
async def delete_alert(alert_id: UUID, repo: OwnerScopedRepository = Depends(get_repository)):
    alert = await repo.get_alert(alert_id)
    await repo.delete(alert)
    await repo.commit()
    return {"message": "Alert deleted successfully"}
