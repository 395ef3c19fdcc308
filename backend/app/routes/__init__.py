"""
AutoMindMap - API Routes
"""
from . import summaries, search, bookmarks, stats, explain, chats

__all__ = ["summaries", "search", "bookmarks", "stats", "explain", "chats"]
