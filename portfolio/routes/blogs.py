from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from portfolio.deps import get_blog_store, require_admin
from portfolio.errors import APIError, NotFound, ValidationFailed
from portfolio.routes.common import parse_model, read_json
from portfolio.schemas.blog import PostCreate, PostUpdate
from portfolio.services.blog import UNIQUE_VIOLATION, BlogStore, slugify

router = APIRouter(prefix="/api", tags=["blog"])


@router.get("/blogs")
async def list_posts(
    request: Request,
    status: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=100),
    store: BlogStore = Depends(get_blog_store),
):
    """Published posts are public; the full list (drafts included) is admin-only."""
    if status == "published":
        result = await store.list_published(limit)
        if not result.available:
            raise APIError("Failed to fetch posts")
        return result.value

    await require_admin(request.headers.get("authorization"))
    result = await store.list_all()
    if not result.available:
        raise APIError("Failed to fetch posts")
    return result.value


@router.post("/blogs", status_code=201, dependencies=[Depends(require_admin)])
async def create_post(request: Request, store: BlogStore = Depends(get_blog_store)):
    post = parse_model(PostCreate, await read_json(request))
    if not slugify(post.slug or post.title):
        raise ValidationFailed("A slug could not be derived from the title")

    result = await store.create_post(post)
    if not result.available:
        if result.error_code == UNIQUE_VIOLATION:
            raise ValidationFailed("Slug already exists")
        raise APIError("Failed to create post")
    return result.value


@router.put("/blogs", dependencies=[Depends(require_admin)])
async def update_post(request: Request, store: BlogStore = Depends(get_blog_store)):
    body = await read_json(request)
    if not isinstance(body, dict) or not body.get("id"):
        raise ValidationFailed("Post ID is required")
    update = parse_model(PostUpdate, body)

    result = await store.update_post(update)
    if not result.available:
        if result.error_code == UNIQUE_VIOLATION:
            raise ValidationFailed("Slug already exists")
        raise APIError("Failed to update post")
    if result.value is None:
        raise NotFound("Post not found")
    return result.value


@router.delete("/blogs", dependencies=[Depends(require_admin)])
async def delete_post(
    post_id: Optional[str] = Query(None, alias="id"),
    store: BlogStore = Depends(get_blog_store),
):
    if not post_id:
        raise ValidationFailed("Post ID is required")

    result = await store.delete_post(post_id)
    if not result.available:
        raise APIError("Failed to delete post")
    return {"message": "Post deleted successfully"}
