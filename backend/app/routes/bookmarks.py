"""
Bookmark Routes
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import List

from app.models.summary import BookmarkCreate, BookmarkResponse, SummaryResponse, MessageResponse
from app.services.storage_service import StorageService, get_storage_service
from app.routes.auth import get_current_user_id

router = APIRouter()


@router.post("", response_model=BookmarkResponse)
async def create_bookmark(
    request: BookmarkCreate,
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """Bookmark one of the user's summaries. Bookmarking twice is a no-op."""
    bookmark = await db.create_bookmark(user_id, request.summary_id)
    if not bookmark:
        raise HTTPException(status_code=404, detail="Summary not found")

    return BookmarkResponse(**bookmark)


@router.get("", response_model=List[SummaryResponse])
async def list_bookmarks(
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """List bookmarked summaries, most recently bookmarked first."""
    summaries = await db.list_bookmarked_summaries(user_id)
    return [SummaryResponse(**s) for s in summaries]


@router.delete("/{summary_id}", response_model=MessageResponse)
async def delete_bookmark(
    summary_id: str,
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """Remove a bookmark."""
    removed = await db.delete_bookmark(user_id, summary_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Bookmark not found")

    return MessageResponse(message="Bookmark removed successfully")
