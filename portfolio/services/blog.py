import re
import unicodedata
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from portfolio.schemas.blog import PostCreate, PostUpdate
from portfolio.services.supabase_store import StoreResult, SupabaseStore, camelize
from portfolio.utils.logger import logger

POSTS_TABLE = "blog_posts"
PUBLIC_COLUMNS = "id, title, slug, excerpt, content, featured_image, created_at, published_at"

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


def slugify(text: str) -> str:
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-zA-Z0-9_\s-]", "", text).strip().lower()
    return re.sub(r"[\s_-]+", "-", text).strip("-")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BlogStore(SupabaseStore):

    async def list_published(self, limit: Optional[int] = None) -> StoreResult[List[Dict[str, Any]]]:
        def build(c):
            query = (
                c.table(POSTS_TABLE)
                .select(PUBLIC_COLUMNS)
                .eq("status", "published")
                .order("published_at", desc=True)
            )
            return query.limit(limit) if limit else query

        result = await self._execute("list published posts", build)
        if not result.available:
            return StoreResult.unavailable(result.error)
        return StoreResult.ok(camelize(result.value.data or []))

    async def list_all(self) -> StoreResult[List[Dict[str, Any]]]:
        result = await self._execute(
            "list posts",
            lambda c: c.table(POSTS_TABLE).select("*").order("created_at", desc=True),
        )
        if not result.available:
            return StoreResult.unavailable(result.error)
        return StoreResult.ok(camelize(result.value.data or []))

    async def get_post(self, post_id: str) -> StoreResult[Optional[Dict[str, Any]]]:
        result = await self._execute(
            "fetch post",
            lambda c: c.table(POSTS_TABLE).select("*").eq("id", post_id).limit(1),
        )
        if not result.available:
            return StoreResult.unavailable(result.error)
        rows = result.value.data or []
        return StoreResult.ok(camelize(rows[0]) if rows else None)

    async def create_post(self, post: PostCreate) -> StoreResult[Dict[str, Any]]:
        row = {
            "title": post.title.strip(),
            "slug": slugify(post.slug or post.title),
            "content": post.content,
            "excerpt": post.excerpt,
            "featured_image": post.featured_image,
            "status": post.status,
            "published_at": _now() if post.status == "published" else None,
        }
        result = await self._execute("create post", lambda c: c.table(POSTS_TABLE).insert(row))
        if not result.available:
            return StoreResult.unavailable(result.error, code=result.error_code)
        logger.info(f"Blog post created: {row['slug']} ({post.status})")
        return StoreResult.ok(camelize(result.value.data[0] if result.value.data else row))

    async def update_post(self, update: PostUpdate) -> StoreResult[Optional[Dict[str, Any]]]:
        changes = update.model_dump(exclude_unset=True, exclude={"id"})
        if "slug" in changes and changes["slug"]:
            changes["slug"] = slugify(changes["slug"])

        # Publishing keeps the original publish date; drafting clears it.
        if changes.get("status") == "published":
            existing = await self.get_post(update.id)
            if not existing.available:
                return existing
            if existing.value is None:
                return StoreResult.ok(None)
            if not existing.value.get("publishedAt"):
                changes["published_at"] = _now()
        elif changes.get("status") == "draft":
            changes["published_at"] = None

        changes["updated_at"] = _now()
        result = await self._execute(
            "update post",
            lambda c: c.table(POSTS_TABLE).update(changes).eq("id", update.id),
        )
        if not result.available:
            return StoreResult.unavailable(result.error, code=result.error_code)
        rows = result.value.data or []
        return StoreResult.ok(camelize(rows[0]) if rows else None)

    async def delete_post(self, post_id: str) -> StoreResult[None]:
        result = await self._execute(
            "delete post",
            lambda c: c.table(POSTS_TABLE).delete().eq("id", post_id),
        )
        if not result.available:
            return StoreResult.unavailable(result.error)
        logger.info(f"Blog post deleted: {post_id}")
        return StoreResult.ok()
