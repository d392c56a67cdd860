"""Analytics routes."""

from fastapi import APIRouter

from app.api.deps import CurrentUser, StorageDep, require
from app.schemas.analytics import SystemStats
from app.services.permissions import Action

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/stats", response_model=SystemStats)
async def get_stats(current_user: CurrentUser, storage: StorageDep) -> SystemStats:
    """Platform-wide counts. Admin only."""
    require(current_user, Action.ANALYTICS_VIEW)
    return SystemStats(**await storage.get_system_stats())
