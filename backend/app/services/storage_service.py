"""
Storage Service - In-process library store

Keeps summaries, bookmarks and chat threads per user. Records are plain
dicts shaped like the documents of the production database, so routes and
services do not depend on how they are persisted.

Every read and write is scoped by user_id: a record owned by another user
behaves exactly like a missing one.
"""
import copy
import logging
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

STATS_RECENT_SUMMARIES = 30


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StorageService:
    """Service for library persistence"""

    def __init__(self):
        """Initialize empty collections"""
        self._summaries: Dict[str, Dict[str, Any]] = {}
        self._bookmarks: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self._chats: Dict[str, Dict[str, Any]] = {}
        logger.info("Storage service initialized (in-process)")

    async def close(self):
        """Release resources (nothing to release in-process)"""
        logger.info("Storage service closed")

    # =========================================================================
    # Summaries
    # =========================================================================

    async def create_summary(
        self,
        user_id: str,
        title: str,
        video_url: str,
        video_id: str,
        summary: str,
        video_duration: str = "Unknown",
        channel_title: str = "",
        thumbnail_url: str = ""
    ) -> Dict[str, Any]:
        """Store a generated summary"""
        now = _now()
        record = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "title": title,
            "video_url": video_url,
            "video_id": video_id,
            "video_duration": video_duration,
            "channel_title": channel_title,
            "thumbnail_url": thumbnail_url,
            "summary": summary,
            "created_at": now,
            "updated_at": now
        }
        self._summaries[record["id"]] = record
        logger.info(f"Created summary {record['id']} for user {user_id}")
        return self._with_bookmark_flag(record, user_id)

    def _with_bookmark_flag(self, record: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        result = dict(record)
        result["is_bookmarked"] = (user_id, record["id"]) in self._bookmarks
        return result

    def _user_summaries(self, user_id: str) -> List[Dict[str, Any]]:
        # Insertion order is creation order
        return [s for s in reversed(self._summaries.values()) if s["user_id"] == user_id]

    async def list_summaries(self, user_id: str) -> List[Dict[str, Any]]:
        """All summaries of a user, newest first, with is_bookmarked"""
        return [self._with_bookmark_flag(s, user_id) for s in self._user_summaries(user_id)]

    async def get_summary(self, summary_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Summary by ID if it belongs to the user"""
        record = self._summaries.get(summary_id)
        if not record or record["user_id"] != user_id:
            return None
        return self._with_bookmark_flag(record, user_id)

    async def delete_summary(self, summary_id: str, user_id: str) -> bool:
        """Delete a summary and every bookmark pointing at it"""
        record = self._summaries.get(summary_id)
        if not record or record["user_id"] != user_id:
            return False

        del self._summaries[summary_id]
        for key in [k for k in self._bookmarks if k[1] == summary_id]:
            del self._bookmarks[key]

        logger.info(f"Deleted summary {summary_id} for user {user_id}")
        return True

    async def search_summaries(self, user_id: str, query: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on title and summary text"""
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            self._with_bookmark_flag(s, user_id)
            for s in self._user_summaries(user_id)
            if needle in s["title"].lower() or needle in s["summary"].lower()
        ]

    # =========================================================================
    # Bookmarks
    # =========================================================================

    async def create_bookmark(self, user_id: str, summary_id: str) -> Optional[Dict[str, Any]]:
        """
        Bookmark a summary. Bookmarks are unique per user and summary, so
        bookmarking twice returns the existing bookmark.

        Returns:
            Bookmark dict, or None if the summary does not belong to the user
        """
        summary = self._summaries.get(summary_id)
        if not summary or summary["user_id"] != user_id:
            return None

        key = (user_id, summary_id)
        if key not in self._bookmarks:
            self._bookmarks[key] = {"user_id": user_id, "summary_id": summary_id, "created_at": _now()}
            logger.info(f"User {user_id} bookmarked summary {summary_id}")
        return dict(self._bookmarks[key])

    async def delete_bookmark(self, user_id: str, summary_id: str) -> bool:
        """Remove a bookmark; False if there was none"""
        return self._bookmarks.pop((user_id, summary_id), None) is not None

    async def list_bookmarked_summaries(self, user_id: str) -> List[Dict[str, Any]]:
        """Bookmarked summaries, most recently bookmarked first"""
        bookmarks = [b for (uid, _), b in reversed(self._bookmarks.items()) if uid == user_id]
        return [
            self._with_bookmark_flag(self._summaries[b["summary_id"]], user_id)
            for b in bookmarks
            if b["summary_id"] in self._summaries
        ]

    # =========================================================================
    # Stats
    # =========================================================================

    async def get_user_stats(self, user_id: str) -> Dict[str, Any]:
        """Totals plus per-day counts over the most recent summaries"""
        summaries = self._user_summaries(user_id)
        recent = summaries[:STATS_RECENT_SUMMARIES]
        daily = Counter(s["created_at"].date().isoformat() for s in recent)

        return {
            "total_summaries": len(summaries),
            "total_bookmarks": sum(1 for (uid, _) in self._bookmarks if uid == user_id),
            "daily_activity": [{"date": date, "summaries": count} for date, count in sorted(daily.items())]
        }

    # =========================================================================
    # Chats
    # =========================================================================

    async def create_chat(self, user_id: str, title: str) -> Dict[str, Any]:
        """Create an empty chat thread"""
        now = _now()
        chat = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "title": title,
            "starred": False,
            "messages": [],
            "created_at": now,
            "updated_at": now
        }
        self._chats[chat["id"]] = chat
        logger.info(f"Created chat {chat['id']} for user {user_id}")
        return copy.deepcopy(chat)

    async def list_chats(self, user_id: str) -> List[Dict[str, Any]]:
        """Chats of a user, most recently updated first"""
        chats = [c for c in self._chats.values() if c["user_id"] == user_id]
        chats.sort(key=lambda c: c["updated_at"], reverse=True)
        return copy.deepcopy(chats)

    async def get_chat(self, chat_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Chat by ID if it belongs to the user"""
        chat = self._chats.get(chat_id)
        if not chat or chat["user_id"] != user_id:
            return None
        return copy.deepcopy(chat)

    async def append_messages(
        self,
        chat_id: str,
        user_id: str,
        messages: List[Dict[str, Any]]
    ) -> Optional[Dict[str, Any]]:
        """Append messages to a chat and bump updated_at"""
        chat = self._chats.get(chat_id)
        if not chat or chat["user_id"] != user_id:
            return None
        chat["messages"].extend(copy.deepcopy(messages))
        chat["updated_at"] = _now()
        return copy.deepcopy(chat)

    async def update_chat(
        self,
        chat_id: str,
        user_id: str,
        title: Optional[str] = None,
        starred: Optional[bool] = None
    ) -> Optional[Dict[str, Any]]:
        """Rename and/or star a chat"""
        chat = self._chats.get(chat_id)
        if not chat or chat["user_id"] != user_id:
            return None
        if title is not None:
            chat["title"] = title
        if starred is not None:
            chat["starred"] = starred
        chat["updated_at"] = _now()
        return copy.deepcopy(chat)

    async def delete_chat(self, chat_id: str, user_id: str) -> bool:
        """Delete a chat thread"""
        chat = self._chats.get(chat_id)
        if not chat or chat["user_id"] != user_id:
            return False
        del self._chats[chat_id]
        logger.info(f"Deleted chat {chat_id} for user {user_id}")
        return True


# Singleton instance
_storage_service: Optional[StorageService] = None


async def get_storage_service() -> StorageService:
    """Get or create storage service singleton"""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
