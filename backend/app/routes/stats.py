"""
Stats Routes
"""
from fastapi import APIRouter, Depends

from app.models.summary import StatsResponse
from app.services.storage_service import StorageService, get_storage_service
from app.routes.auth import get_current_user_id

router = APIRouter()


@router.get("", response_model=StatsResponse)
async def get_stats(
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """Summary and bookmark totals plus recent daily activity."""
    stats = await db.get_user_stats(user_id)
    return StatsResponse(**stats)
