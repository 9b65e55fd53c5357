from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from portfolio.services.supabase_store import StoreResult, SupabaseStore
from portfolio.utils.logger import logger
from portfolio.utils.user_agent import parse_user_agent

PAGE_VIEWS_TABLE = "page_views"


class AnalyticsStore(SupabaseStore):
    """Page-view collector and the admin summary built from it."""

    async def track_page_view(
        self,
        page_path: Optional[str],
        referrer: Optional[str],
        session_id: Optional[str],
        user_agent: Optional[str],
    ) -> StoreResult[None]:
        info = parse_user_agent(user_agent)
        result = await self._execute(
            "track page view",
            lambda c: c.table(PAGE_VIEWS_TABLE).insert({
                "page_path": page_path or "/",
                "referrer": referrer or None,
                "user_agent": user_agent or "",
                "device": info.device,
                "browser": info.browser,
                "os": info.os,
                "session_id": session_id or None,
            }),
        )
        return StoreResult.ok() if result.available else StoreResult.unavailable(result.error)

    async def stats(self, days: int = 30, now: Optional[datetime] = None) -> StoreResult[Dict[str, Any]]:
        now = now or datetime.now(timezone.utc)
        start = now - timedelta(days=days)

        result = await self._execute(
            "fetch page views",
            lambda c: c.table(PAGE_VIEWS_TABLE)
                .select("page_path, referrer, browser, device, session_id, created_at")
                .gte("created_at", start.isoformat()),
        )
        if not result.available:
            return StoreResult.unavailable(result.error)

        rows = result.value.data or []
        logger.info(f"Summarizing {len(rows)} page views over {days} days")
        return StoreResult.ok(summarize_page_views(rows))


def summarize_page_views(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    pages = Counter(row.get("page_path") or "/" for row in rows)
    browsers = Counter(row["browser"] for row in rows if row.get("browser"))
    devices = Counter(row["device"] for row in rows if row.get("device"))
    referrers = Counter(row["referrer"] for row in rows if row.get("referrer"))
    days = Counter(str(row.get("created_at", ""))[:10] for row in rows if row.get("created_at"))
    sessions = {row["session_id"] for row in rows if row.get("session_id")}

    return {
        "totalViews": len(rows),
        "uniqueVisitors": len(sessions),
        "topPages": [{"path": path, "views": n} for path, n in pages.most_common(10)],
        "viewsByDay": [{"date": day, "views": days[day]} for day in sorted(days, reverse=True)],
        "topBrowsers": [{"browser": b, "count": n} for b, n in browsers.most_common(5)],
        "topDevices": [{"device": d, "count": n} for d, n in devices.most_common()],
        "topReferrers": [{"referrer": r, "count": n} for r, n in referrers.most_common(10)],
    }
