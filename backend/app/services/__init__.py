"""
AutoMindMap - Services
"""
from .generation_service import GenerationClient, GenerationFailed
from .youtube_service import YouTubeService
from .summarization_service import SummarizationService, InvalidRequestError
from .chat_service import ChatService
from .storage_service import StorageService

__all__ = [
    "GenerationClient",
    "GenerationFailed",
    "YouTubeService",
    "SummarizationService",
    "InvalidRequestError",
    "ChatService",
    "StorageService"
]
