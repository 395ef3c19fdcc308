"""
Summary Routes
"""
import logging
from fastapi import APIRouter, HTTPException, Depends
from typing import List

from app.models.summary import SummaryCreate, SummaryResponse, MessageResponse
from app.services.generation_service import GenerationFailed
from app.services.storage_service import StorageService, get_storage_service
from app.services.summarization_service import (
    InvalidRequestError, SummarizationService, get_summarization_service
)
from app.routes.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=SummaryResponse)
async def create_summary(
    request: SummaryCreate,
    user_id: str = Depends(get_current_user_id),
    summarization: SummarizationService = Depends(get_summarization_service),
    db: StorageService = Depends(get_storage_service)
):
    """
    Summarize a YouTube video and save it to the library.

    This will:
    1. Resolve the video's title, duration and captions
    2. Generate a plain-text study summary
    3. Store the summary for the user
    """
    try:
        result = await summarization.create_summary(request.video_url)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationFailed as e:
        logger.error(f"Summary generation failed for {request.video_url}: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    summary = await db.create_summary(
        user_id=user_id,
        title=result.title,
        video_url=request.video_url.strip(),
        video_id=result.video_id,
        summary=result.summary_text,
        video_duration=result.video_duration,
        channel_title=result.channel_title,
        thumbnail_url=result.thumbnail_url
    )

    return SummaryResponse(**summary)


@router.get("", response_model=List[SummaryResponse])
async def list_summaries(
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """List the user's summaries, newest first."""
    summaries = await db.list_summaries(user_id)
    return [SummaryResponse(**s) for s in summaries]


@router.get("/{summary_id}", response_model=SummaryResponse)
async def get_summary(
    summary_id: str,
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """Get a specific summary by ID."""
    summary = await db.get_summary(summary_id, user_id)
    if not summary:
        raise HTTPException(status_code=404, detail="Summary not found")

    return SummaryResponse(**summary)


@router.delete("/{summary_id}", response_model=MessageResponse)
async def delete_summary(
    summary_id: str,
    user_id: str = Depends(get_current_user_id),
    db: StorageService = Depends(get_storage_service)
):
    """
    Delete a summary from the library.

    Bookmarks pointing at it are removed as well.
    """
    deleted = await db.delete_summary(summary_id, user_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Summary not found")

    return MessageResponse(message="Summary deleted successfully")
