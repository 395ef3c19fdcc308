"""
Chat Service

Handles tutoring chat threads:
- Creating, listing, renaming, starring and deleting chats
- Sending a message: the student turn is stored, a reply is generated from
  the recent history and stored after it
- Naming a new chat from its first message
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, TYPE_CHECKING

from app.models.chat import Attachment
from app.settings import get_settings
from .generation_service import GenerationClient, GenerationFailed, get_generation_client
from .output_normalizer import normalize_output
from .prompt_service import MAX_TITLE_CHARS, PromptKind, compose

if TYPE_CHECKING:
    from app.services.storage_service import StorageService

logger = logging.getLogger(__name__)

DEFAULT_CHAT_TITLE = "New Chat"
CHAT_SYSTEM_MESSAGE = "You are a friendly study tutor. Answer in plain text."


def _message(role: str, content: str, attachments: Optional[List[Attachment]] = None) -> Dict[str, Any]:
    return {
        "role": role,
        "content": content,
        "timestamp": datetime.now(timezone.utc),
        "attachments": [a.model_dump() for a in attachments or []]
    }


def _clip_title(title: str) -> str:
    title = title.strip().strip('"').strip()
    if not title:
        return DEFAULT_CHAT_TITLE
    if len(title) > MAX_TITLE_CHARS:
        return title[:MAX_TITLE_CHARS - 3].rstrip() + "..."
    return title


class ChatService:
    """Service for tutoring chat operations"""

    def __init__(self, generation_client: Optional[GenerationClient] = None):
        """Initialize Chat service"""
        self.settings = get_settings()
        self.generation = generation_client or get_generation_client()
        self.db: Optional["StorageService"] = None

        logger.info("Chat service initialized")

    def set_database(self, db: "StorageService"):
        """Inject storage service"""
        self.db = db
        logger.info("Storage service injected into Chat service")

    async def create_chat(self, user_id: str, title: Optional[str] = None) -> Dict[str, Any]:
        """Create an empty chat"""
        if not self.db:
            return {"success": False, "error": "Storage service not available"}

        chat = await self.db.create_chat(user_id, (title or "").strip() or DEFAULT_CHAT_TITLE)
        return {"success": True, "chat": chat}

    async def generate_title(self, first_message: str) -> str:
        """
        Title for a chat from its first message.

        Uses a single attempt; any failure falls back to "New Chat".
        """
        try:
            raw = await self.generation.generate(
                compose(PromptKind.CHAT_TITLE, message=first_message),
                model=self.settings.chat_model,
                max_attempts=1
            )
        except GenerationFailed as e:
            logger.warning(f"Chat title generation failed: {e}")
            return DEFAULT_CHAT_TITLE

        first_line = normalize_output(raw).split("\n")[0]
        return _clip_title(first_line)

    async def generate_reply(
        self,
        history: List[Dict[str, Any]],
        user_message: str,
        attachments: Optional[List[Attachment]] = None
    ) -> str:
        """
        Generate the assistant reply for a student message.

        Raises:
            GenerationFailed: The model could not produce a reply
        """
        prompt = compose(
            PromptKind.CHAT,
            history=history,
            user_message=user_message,
            attachments=attachments,
            max_turns=self.settings.chat_history_turns
        )
        raw = await self.generation.generate(
            prompt,
            model=self.settings.chat_model,
            system_prompt=CHAT_SYSTEM_MESSAGE
        )
        return normalize_output(raw)

    async def send_message(
        self,
        user_id: str,
        chat_id: str,
        content: str,
        attachments: Optional[List[Attachment]] = None
    ) -> Dict[str, Any]:
        """
        Send a student message and store the generated reply.

        The student message is stored only together with a successful reply,
        so a failed generation leaves the thread unchanged.

        Returns:
            Dict with success, chat and reply; or success False with error
            and not_found

        Raises:
            GenerationFailed: The model could not produce a reply
        """
        if not self.db:
            return {"success": False, "error": "Storage service not available"}

        chat = await self.db.get_chat(chat_id, user_id)
        if not chat:
            return {"success": False, "error": "Chat not found", "not_found": True}

        history = chat["messages"]
        reply_text = await self.generate_reply(history, content, attachments)

        user_turn = _message("user", content, attachments)
        reply_turn = _message("assistant", reply_text)
        updated = await self.db.append_messages(chat_id, user_id, [user_turn, reply_turn])

        if not history and chat["title"] == DEFAULT_CHAT_TITLE:
            title = await self.generate_title(content)
            if title != DEFAULT_CHAT_TITLE:
                updated = await self.db.update_chat(chat_id, user_id, title=title)

        logger.info(f"Chat {chat_id}: stored message pair ({len(updated['messages'])} messages)")
        return {"success": True, "chat": updated, "reply": reply_turn}


# Singleton instance
_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Get or create Chat service singleton"""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service
