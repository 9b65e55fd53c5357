import pytest
from fastapi.testclient import TestClient

from portfolio.config import settings
from portfolio.deps import get_analytics_store, get_blog_store, get_conversation_store
from portfolio.main import create_app
from portfolio.services.analytics import AnalyticsStore
from portfolio.services.blog import UNIQUE_VIOLATION, BlogStore
from portfolio.services.conversation_store import ConversationStore

from conftest import FakeSupabase

ADMIN = {"Authorization": "Bearer admin-secret"}


class DuplicateKey(Exception):
    code = UNIQUE_VIOLATION


@pytest.fixture(autouse=True)
def admin_token(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_TOKEN", "admin-secret")


def _client(supabase):
    app = create_app()
    app.dependency_overrides[get_conversation_store] = lambda: ConversationStore(supabase)
    app.dependency_overrides[get_analytics_store] = lambda: AnalyticsStore(supabase)
    app.dependency_overrides[get_blog_store] = lambda: BlogStore(supabase)
    return TestClient(app)


# ---- Access control ----

@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer wrong"}, {"Authorization": "admin-secret"}],
)
def test_admin_routes_require_bearer_token(headers):
    supabase = FakeSupabase()
    client = _client(supabase)

    assert client.get("/api/chats", headers=headers).status_code == 401
    assert client.delete("/api/chats?sessionId=row-1", headers=headers).status_code == 401
    assert client.get("/api/analytics/stats", headers=headers).status_code == 401
    assert client.get("/api/blogs", headers=headers).status_code == 401
    assert client.post("/api/blogs", json={"title": "T", "content": "x"}, headers=headers).status_code == 401
    assert client.put("/api/blogs", json={"id": "p1", "title": "T"}, headers=headers).status_code == 401
    assert client.delete("/api/blogs?id=p1", headers=headers).status_code == 401
    assert supabase.executed == []


def test_admin_refused_when_no_token_configured(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_TOKEN", None)
    response = _client(FakeSupabase()).get("/api/chats", headers=ADMIN)
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


# ---- Chat transcripts ----

def test_list_chat_sessions():
    rows = [{
        "id": "row-1",
        "session_id": "sess_1",
        "started_at": "2026-10-19T09:00:00+00:00",
        "message_count": [{"count": 2}],
        "last_message": [],
    }]
    response = _client(FakeSupabase(responses=[(rows, 1)])).get("/api/chats?search=safari", headers=ADMIN)

    assert response.status_code == 200
    body = response.json()
    session = body["sessions"][0]
    assert session["sessionId"] == "sess_1"
    assert session["startedAt"] == "2026-10-19T09:00:00+00:00"
    assert session["messageCount"] == 2
    assert session["lastMessage"] is None
    assert not any("_" in key for key in session)
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}


def test_chat_session_detail_and_missing():
    session = {
        "id": "row-1",
        "session_id": "sess_1",
        "messages": [{"role": "user", "content": "hi", "created_at": "2026-10-19T09:00:00+00:00"}],
    }
    client = _client(FakeSupabase(responses=[([session], None), ([], None)]))

    found = client.get("/api/chats?sessionId=row-1", headers=ADMIN)
    missing = client.get("/api/chats?sessionId=row-404", headers=ADMIN)

    detail = found.json()["session"]
    assert detail["sessionId"] == "sess_1"
    assert detail["messages"][0]["createdAt"] == "2026-10-19T09:00:00+00:00"
    assert missing.status_code == 404
    assert missing.json() == {"error": "Session not found"}


def test_chat_list_store_failure():
    response = _client(FakeSupabase(error=ConnectionError("db down"))).get("/api/chats", headers=ADMIN)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch chat sessions"}


def test_delete_chat_session():
    supabase = FakeSupabase()
    client = _client(supabase)

    assert client.delete("/api/chats", headers=ADMIN).json() == {"error": "Session ID required"}

    response = client.delete("/api/chats?sessionId=row-1", headers=ADMIN)
    assert response.json() == {"success": True}
    assert [query.table for query in supabase.executed] == ["chat_messages", "chat_sessions"]


def test_analytics_stats_bounds():
    client = _client(FakeSupabase())
    assert client.get("/api/analytics/stats?days=7", headers=ADMIN).json()["totalViews"] == 0
    assert client.get("/api/analytics/stats?days=0", headers=ADMIN).status_code == 422


# ---- Blog ----

def test_published_posts_are_public():
    posts = [{
        "id": "p1",
        "title": "Hello",
        "slug": "hello",
        "featured_image": "/img/hello.png",
        "published_at": "2026-10-01T08:00:00+00:00",
    }]
    supabase = FakeSupabase(responses=[(posts, None)])

    response = _client(supabase).get("/api/blogs?status=published&limit=3")

    assert response.json() == [{
        "id": "p1",
        "title": "Hello",
        "slug": "hello",
        "featuredImage": "/img/hello.png",
        "publishedAt": "2026-10-01T08:00:00+00:00",
    }]
    query = supabase.executed[0]
    assert ("eq", ("status", "published"), {}) in query.ops
    assert query.op("limit")[1] == (3,)


def test_admin_lists_all_posts():
    drafts = [{"id": "p2", "status": "draft"}]
    response = _client(FakeSupabase(responses=[(drafts, None)])).get("/api/blogs", headers=ADMIN)
    assert response.json() == drafts


def test_create_post():
    supabase = FakeSupabase(responses=[([{"id": "p1", "slug": "hello-world"}], None)])

    response = _client(supabase).post(
        "/api/blogs", json={"title": "Hello World", "content": "Body"}, headers=ADMIN
    )

    assert response.status_code == 201
    assert response.json()["slug"] == "hello-world"


def test_create_post_rejections():
    client = _client(FakeSupabase(error=DuplicateKey("duplicate key")))

    no_slug = client.post("/api/blogs", json={"title": "???", "content": "x"}, headers=ADMIN)
    duplicate = client.post("/api/blogs", json={"title": "Hello", "content": "x"}, headers=ADMIN)
    missing_content = client.post("/api/blogs", json={"title": "Hello"}, headers=ADMIN)

    assert no_slug.json() == {"error": "A slug could not be derived from the title"}
    assert duplicate.status_code == 400
    assert duplicate.json() == {"error": "Slug already exists"}
    assert missing_content.status_code == 400


def test_update_post():
    client = _client(FakeSupabase(responses=[([{"id": "p1", "title": "New"}], None), ([], None)]))

    updated = client.put("/api/blogs", json={"id": "p1", "title": "New"}, headers=ADMIN)
    missing = client.put("/api/blogs", json={"id": "p9", "title": "New"}, headers=ADMIN)
    no_id = client.put("/api/blogs", json={"title": "New"}, headers=ADMIN)

    assert updated.json()["title"] == "New"
    assert missing.status_code == 404
    assert no_id.json() == {"error": "Post ID is required"}


def test_delete_post():
    supabase = FakeSupabase()
    client = _client(supabase)

    assert client.delete("/api/blogs", headers=ADMIN).status_code == 400
    response = client.delete("/api/blogs?id=p1", headers=ADMIN)

    assert response.json() == {"message": "Post deleted successfully"}
    assert supabase.executed[0].op("eq")[1] == ("id", "p1")
