"""
Explain Routes
"""
import logging
from fastapi import APIRouter, HTTPException, Depends

from app.models.explanation import ExplainMode, ExplainRequest, ExplainResponse, ExplainStyle
from app.services.generation_service import GenerationFailed
from app.services.output_normalizer import count_words
from app.services.summarization_service import (
    InvalidRequestError, SummarizationService, get_summarization_service
)
from app.routes.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ExplainResponse)
async def explain_text(
    request: ExplainRequest,
    user_id: str = Depends(get_current_user_id),
    summarization: SummarizationService = Depends(get_summarization_service)
):
    """
    Explain a piece of text in simpler terms.

    - mode: short, medium (default), long, or comprehensive (spoken narration)
    - style: standard (default), teacher, expert, or accessible

    Unknown mode or style values are rejected.
    """
    mode = request.mode or ExplainMode.MEDIUM
    style = request.style or ExplainStyle.STANDARD

    try:
        explanation = await summarization.explain_text(
            request.text,
            mode=mode,
            style=style,
            duration=request.duration,
            coverage=request.coverage
        )
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationFailed as e:
        logger.error(f"Explanation failed for user {user_id}: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return ExplainResponse(
        explanation=explanation,
        mode=mode,
        style=style,
        word_count=count_words(explanation)
    )
