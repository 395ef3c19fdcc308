"""
AutoMindMap - Data Models
"""
from .video import VideoDetails, SummaryResult
from .summary import SummaryCreate, SummaryResponse, BookmarkCreate, BookmarkResponse, StatsResponse
from .explanation import ExplainMode, ExplainStyle, ExplainRequest, ExplainResponse
from .chat import Attachment, ChatMessage, ChatCreate, ChatUpdate, SendMessageRequest, ChatResponse

__all__ = [
    "VideoDetails", "SummaryResult",
    "SummaryCreate", "SummaryResponse", "BookmarkCreate", "BookmarkResponse", "StatsResponse",
    "ExplainMode", "ExplainStyle", "ExplainRequest", "ExplainResponse",
    "Attachment", "ChatMessage", "ChatCreate", "ChatUpdate", "SendMessageRequest", "ChatResponse"
]
