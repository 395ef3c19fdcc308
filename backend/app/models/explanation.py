"""
Explanation Models
"""
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional


class ExplainMode(str, Enum):
    """Explanation length modes"""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    COMPREHENSIVE = "comprehensive"  # Spoken narration, no word cap


class ExplainStyle(str, Enum):
    """Explanation voice"""
    STANDARD = "standard"
    TEACHER = "teacher"
    EXPERT = "expert"
    ACCESSIBLE = "accessible"


class ExplainRequest(BaseModel):
    """Schema for an explanation request.

    Unknown mode/style values are rejected by the enum types rather than
    falling back to a default.
    """
    text: str = Field(..., max_length=20000)
    mode: Optional[ExplainMode] = None
    style: Optional[ExplainStyle] = None
    duration: Optional[str] = Field(None, max_length=100, description="Narration length hint (comprehensive only)")
    coverage: Optional[str] = Field(None, max_length=200, description="Coverage hint (comprehensive only)")


class ExplainResponse(BaseModel):
    """Schema for an explanation result"""
    explanation: str
    mode: ExplainMode
    style: ExplainStyle
    word_count: int
