"""
Conversation Store: chat sessions and their messages in Supabase.

Tables:
    chat_sessions(id uuid pk, session_id text unique, ip_address, user_agent,
                  device, browser, os, country, city, started_at)
    chat_messages(id uuid pk, session_id uuid -> chat_sessions.id on delete cascade,
                  role text, content text, created_at)

Nothing in here raises: every call returns a StoreResult.
"""
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from portfolio.services.supabase_store import StoreResult, SupabaseStore, camelize
from portfolio.utils.logger import logger

SESSIONS_TABLE = "chat_sessions"
MESSAGES_TABLE = "chat_messages"

# Characters that would break a PostgREST or=(...) filter.
_FILTER_UNSAFE = re.compile(r"[,()*%\\]")


@dataclass(frozen=True)
class ClientMeta:
    ip_address: str = "unknown"
    user_agent: Optional[str] = None
    device: str = "desktop"
    browser: str = "unknown"
    os: str = "unknown"
    country: Optional[str] = None
    city: Optional[str] = None


class ConversationStore(SupabaseStore):

    async def get_or_create_session(self, session_token: str, meta: ClientMeta) -> StoreResult[str]:
        """Returns the row id for a session token, creating the session on first contact."""
        existing = await self._find_session(session_token)
        if not existing.available or existing.value:
            return existing

        created = await self._execute(
            "create chat session",
            lambda c: c.table(SESSIONS_TABLE).insert({
                "session_id": session_token,
                "ip_address": meta.ip_address,
                "user_agent": meta.user_agent,
                "device": meta.device,
                "browser": meta.browser,
                "os": meta.os,
                "country": meta.country,
                "city": meta.city,
            }),
        )
        if created.available and created.value.data:
            logger.info(f"Chat session created: {session_token}")
            return StoreResult.ok(created.value.data[0]["id"])

        # A concurrent request may have created it between the lookup and the insert.
        retry = await self._find_session(session_token)
        if retry.available and retry.value:
            return retry
        return StoreResult.unavailable(created.error or "session insert returned no rows")

    async def append_message(self, session_handle: str, role: str, content: str) -> StoreResult[None]:
        result = await self._execute(
            f"save {role} message",
            lambda c: c.table(MESSAGES_TABLE).insert({
                "session_id": session_handle,
                "role": role,
                "content": content,
            }),
        )
        return StoreResult.ok() if result.available else StoreResult.unavailable(result.error)

    async def count_user_messages(self, session_handle: str) -> StoreResult[int]:
        """Fresh count of persisted user messages; never cached between requests."""
        result = await self._execute(
            "count user messages",
            lambda c: c.table(MESSAGES_TABLE)
                .select("id", count="exact")
                .eq("session_id", session_handle)
                .eq("role", "user"),
        )
        if not result.available:
            return StoreResult.unavailable(result.error)
        return StoreResult.ok(result.value.count or 0)

    # ---- Admin ----

    async def list_sessions(self, page: int = 1, limit: int = 20, search: str = "") -> StoreResult[Dict[str, Any]]:
        page = max(page, 1)
        limit = min(max(limit, 1), 100)
        start = (page - 1) * limit
        term = _FILTER_UNSAFE.sub("", search).strip()

        def build(c):
            query = (
                c.table(SESSIONS_TABLE)
                .select(
                    "*, message_count:chat_messages(count), "
                    "last_message:chat_messages(content,role,created_at)",
                    count="exact",
                )
                .order("started_at", desc=True)
                .order("created_at", desc=True, foreign_table="last_message")
                .limit(1, foreign_table="last_message")
            )
            if term:
                pattern = f"*{term}*"
                query = query.or_(",".join(
                    f"{column}.ilike.{pattern}"
                    for column in ("session_id", "country", "city", "browser", "device")
                ))
            return query.range(start, start + limit - 1)

        result = await self._execute("list chat sessions", build)
        if not result.available:
            return StoreResult.unavailable(result.error)

        total = result.value.count or 0
        sessions = [_shape_session_summary(row) for row in result.value.data or []]
        return StoreResult.ok({
            "sessions": sessions,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit) if total else 0,
            },
        })

    async def get_session(self, row_id: str) -> StoreResult[Optional[Dict[str, Any]]]:
        result = await self._execute(
            "fetch chat session",
            lambda c: c.table(SESSIONS_TABLE)
                .select("*, messages:chat_messages(*)")
                .eq("id", row_id)
                .order("created_at", foreign_table="messages")
                .limit(1),
        )
        if not result.available:
            return StoreResult.unavailable(result.error)
        rows = result.value.data or []
        return StoreResult.ok(camelize(rows[0]) if rows else None)

    async def delete_session(self, row_id: str) -> StoreResult[None]:
        messages = await self._execute(
            "delete chat messages",
            lambda c: c.table(MESSAGES_TABLE).delete().eq("session_id", row_id),
        )
        if not messages.available:
            return StoreResult.unavailable(messages.error)

        session = await self._execute(
            "delete chat session",
            lambda c: c.table(SESSIONS_TABLE).delete().eq("id", row_id),
        )
        if not session.available:
            return StoreResult.unavailable(session.error)
        logger.info(f"Chat session deleted: {row_id}")
        return StoreResult.ok()

    async def _find_session(self, session_token: str) -> StoreResult[Optional[str]]:
        result = await self._execute(
            "look up chat session",
            lambda c: c.table(SESSIONS_TABLE).select("id").eq("session_id", session_token).limit(1),
        )
        if not result.available:
            return StoreResult.unavailable(result.error)
        rows = result.value.data or []
        return StoreResult.ok(rows[0]["id"] if rows else None)


def _shape_session_summary(row: Dict[str, Any]) -> Dict[str, Any]:
    counts: List[Dict[str, Any]] = row.pop("message_count", None) or []
    last: List[Dict[str, Any]] = row.pop("last_message", None) or []
    summary = camelize(row)
    summary["messageCount"] = counts[0].get("count", 0) if counts else 0
    summary["lastMessage"] = camelize(last[0]) if last else None
    return summary
