"""
Shared pytest configuration and in-memory collaborators.

This file ensures the project root is on sys.path so that `import portfolio`
works consistently in all tests.
"""

import asyncio
import json
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from portfolio.errors import UpstreamConfigError  # noqa: E402
from portfolio.services.llm_service import CompletionStream  # noqa: E402
from portfolio.services.supabase_store import StoreResult  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeConversationStore:
    """
    Conversation Store double. ``fail`` makes every call report "unavailable";
    ``assistant_delay`` slows down transcript writes only.
    """

    def __init__(self, fail: bool = False, assistant_delay: float = 0.0) -> None:
        self.fail = fail
        self.assistant_delay = assistant_delay
        self.sessions: Dict[str, str] = {}
        self.messages: List[tuple] = []
        self.calls: List[str] = []

    async def get_or_create_session(self, session_token, meta):
        self.calls.append("get_or_create_session")
        if self.fail:
            return StoreResult.unavailable("database is down")
        if session_token not in self.sessions:
            self.sessions[session_token] = f"row-{len(self.sessions) + 1}"
        return StoreResult.ok(self.sessions[session_token])

    async def append_message(self, session_handle, role, content):
        self.calls.append(f"append_message:{role}")
        if role == "assistant" and self.assistant_delay:
            await asyncio.sleep(self.assistant_delay)
        if self.fail:
            return StoreResult.unavailable("database is down")
        self.messages.append((session_handle, role, content))
        return StoreResult.ok()

    async def count_user_messages(self, session_handle):
        self.calls.append("count_user_messages")
        if self.fail:
            return StoreResult.unavailable("database is down")
        return StoreResult.ok(
            sum(1 for handle, role, _ in self.messages if handle == session_handle and role == "user")
        )

    def contents(self, role: str) -> List[str]:
        return [content for _, r, content in self.messages if r == role]


class FakeProvider:
    """
    Completion Provider double that streams ``chunks``.

    ``open_error`` is raised when opening; ``fail_after`` raises mid-stream after
    that many chunks.
    """

    def __init__(
        self,
        chunks: Optional[List[str]] = None,
        open_error: Optional[Exception] = None,
        fail_after: Optional[int] = None,
    ) -> None:
        self.chunks = chunks if chunks is not None else ["Hello", ", ", "world", "!"]
        self.open_error = open_error
        self.fail_after = fail_after
        self.calls: List[dict] = []
        self.closed = False

    async def open_completion_stream(self, system_prompt, history, max_tokens=500, temperature=0.7):
        self.calls.append({
            "system_prompt": system_prompt,
            "history": history,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.open_error is not None:
            raise self.open_error
        stream = CompletionStream("fake", self._generate())
        await stream.prime()
        return stream

    async def _generate(self):
        try:
            for index, chunk in enumerate(self.chunks):
                if self.fail_after is not None and index >= self.fail_after:
                    raise RuntimeError("upstream connection reset: secret-provider-detail")
                yield chunk
                await asyncio.sleep(0)
        finally:
            self.closed = True


class FakeEmailService:
    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.sent: List[tuple] = []

    async def send_contact(self, params):
        self.sent.append(("contact", params))
        return self.succeed

    async def send_inquiry(self, params):
        self.sent.append(("inquiry", params))
        return self.succeed


def parse_sse(body: str) -> List[object]:
    """Decodes an SSE body into payloads; the done marker comes back as "[DONE]"."""
    events: List[object] = []
    for frame in body.split("\n\n"):
        frame = frame.strip()
        if not frame.startswith("data: "):
            continue
        data = frame[len("data: "):]
        events.append(data if data == "[DONE]" else json.loads(data))
    return events


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_store() -> FakeConversationStore:
    return FakeConversationStore()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def unconfigured_provider() -> FakeProvider:
    return FakeProvider(open_error=UpstreamConfigError())


class FakeQuery:
    """Chainable stand-in for a supabase query builder; records every call."""

    def __init__(self, client: "FakeSupabase", table: str) -> None:
        self.client = client
        self.table = table
        self.ops: List[tuple] = []

    def __getattr__(self, name: str):
        def method(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self
        return method

    def op(self, name: str) -> tuple:
        return next(o for o in self.ops if o[0] == name)

    def execute(self):
        self.client.executed.append(self)
        if self.client.error is not None:
            raise self.client.error
        data, count = self.client.responses.pop(0) if self.client.responses else ([], None)
        return SimpleNamespace(data=data, count=count)


class FakeSupabase:
    """Minimal supabase client: ``responses`` is a queue of (data, count) per execute()."""

    def __init__(self, responses: Optional[List[tuple]] = None, error: Optional[Exception] = None) -> None:
        self.responses = list(responses or [])
        self.error = error
        self.executed: List[FakeQuery] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)
