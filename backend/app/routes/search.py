"""
Search Routes
"""
from fastapi import APIRouter, Depends, Query
from typing import List

from app.models.summary import SummaryResponse
from app.services.storage_service import StorageService, get_storage_service
from app.routes.auth import get_current_user_id

router = APIRouter()


@router.get("", response_model=List[SummaryResponse])
async def search_summaries(
    q: str = Query(..., min_length=1, max_length=200, description="Search text"),
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """
    Search the user's summaries.

    Matches the query case-insensitively against titles and summary text.
    """
    results = await db.search_summaries(user_id, q)
    return [SummaryResponse(**s) for s in results]
