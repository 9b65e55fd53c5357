from typing import Optional

from fastapi import APIRouter, Depends, Query

from portfolio.deps import get_analytics_store, get_conversation_store, require_admin
from portfolio.errors import APIError, NotFound, ValidationFailed
from portfolio.services.analytics import AnalyticsStore
from portfolio.services.conversation_store import ConversationStore

router = APIRouter(prefix="/api", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/chats")
async def list_chats(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str = "",
    session_id: Optional[str] = Query(None, alias="sessionId"),
    store: ConversationStore = Depends(get_conversation_store),
):
    """Chat transcripts: one session with its messages, or a paginated session list."""
    if session_id:
        result = await store.get_session(session_id)
        if not result.available:
            raise APIError("Failed to fetch chat sessions")
        if result.value is None:
            raise NotFound("Session not found")
        return {"session": result.value}

    result = await store.list_sessions(page=page, limit=limit, search=search)
    if not result.available:
        raise APIError("Failed to fetch chat sessions")
    return result.value


@router.delete("/chats")
async def delete_chat(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    store: ConversationStore = Depends(get_conversation_store),
):
    if not session_id:
        raise ValidationFailed("Session ID required")

    result = await store.delete_session(session_id)
    if not result.available:
        raise APIError("Failed to delete chat session")
    return {"success": True}


@router.get("/analytics/stats")
async def analytics_stats(
    days: int = Query(30, ge=1, le=365),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    result = await store.stats(days=days)
    if not result.available:
        raise APIError("Failed to fetch analytics")
    return result.value
