"""
Chat Models
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime


class Attachment(BaseModel):
    """Metadata of a file shared in a chat. File content is never sent to the model."""
    file_name: str = Field(..., max_length=255)
    file_type: str = Field(..., max_length=100)
    file_size: int = Field(..., ge=0)
    file_url: Optional[str] = None


class ChatMessage(BaseModel):
    """A single turn in a chat thread"""
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime
    attachments: List[Attachment] = []


class ChatCreate(BaseModel):
    """Schema for creating a chat thread"""
    title: Optional[str] = Field(None, max_length=100)


class ChatUpdate(BaseModel):
    """Schema for renaming or starring a chat"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    starred: Optional[bool] = None


class SendMessageRequest(BaseModel):
    """Schema for sending a user message"""
    content: str = Field(..., min_length=1, max_length=10000)
    attachments: List[Attachment] = []


class ChatResponse(BaseModel):
    """Schema for chat data returned from API"""
    id: str
    title: str
    starred: bool = False
    messages: List[ChatMessage] = []
    created_at: datetime
    updated_at: datetime


class ChatSummaryResponse(BaseModel):
    """Chat entry in a list (no messages)"""
    id: str
    title: str
    starred: bool = False
    message_count: int = 0
    created_at: datetime
    updated_at: datetime


class SendMessageResponse(BaseModel):
    """Result of sending a message: the updated chat and the assistant reply"""
    chat: ChatResponse
    reply: ChatMessage
