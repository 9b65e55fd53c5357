"""
Streaming Completion Relay for the portfolio chatbot.

A chat turn goes through two phases:

1. ``open()`` resolves the conversation session, stores the user's latest
   message, checks the question quota and opens the upstream stream. Anything
   that fails here (other than storage) becomes a plain JSON error response.
2. ``events()`` forwards each upstream chunk as a server-sent event the moment
   it arrives, then hands the full transcript to a detached task so the
   response never waits on the database.
"""
import asyncio
import json
from dataclasses import dataclass
from typing import AsyncIterator, Coroutine, Dict, List, Optional, Set

import anyio
from fastapi.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

from portfolio.errors import UpstreamTransientError
from portfolio.prompts.templates import CHAT_SYSTEM_PROMPT, QUESTION_LIMIT_MESSAGE
from portfolio.schemas.chat import ChatRequest
from portfolio.services.admission import AdmissionGate
from portfolio.services.conversation_store import ClientMeta, ConversationStore
from portfolio.services.llm_service import CompletionStream, LLMService
from portfolio.utils.logger import logger

DONE_FRAME = "data: [DONE]\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def sse_frame(payload: Dict[str, str]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


class SSEResponse(StreamingResponse):
    """Event stream for one relay turn.

    The upstream is released when the response finishes, including when the
    client leaves before the first frame is written and the relay generator
    never starts.
    """
    media_type = "text/event-stream"

    def __init__(self, content: AsyncIterator[str], upstream: CompletionStream):
        super().__init__(content, headers=SSE_HEADERS)
        self.upstream = upstream

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            with anyio.CancelScope(shield=True):
                await self.upstream.aclose()


async def _single_chunk(text: str):
    yield text


@dataclass
class RelayTurn:
    session_handle: Optional[str]
    stream: CompletionStream
    limited: bool = False


class ChatRelay:
    def __init__(
        self,
        store: ConversationStore,
        provider: LLMService,
        gate: AdmissionGate,
        system_prompt: str = CHAT_SYSTEM_PROMPT,
        limit_message: str = QUESTION_LIMIT_MESSAGE,
        history_limit: int = 10,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ):
        self.store = store
        self.provider = provider
        self.gate = gate
        self.system_prompt = system_prompt
        self.limit_message = limit_message
        self.history_limit = history_limit
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._pending: Set[asyncio.Task] = set()

    async def open(self, request: ChatRequest, meta: ClientMeta) -> RelayTurn:
        """Prepares a turn up to the point where the first upstream chunk is in hand."""
        session = await self.store.get_or_create_session(request.session_id, meta)
        handle = session.value if session.available else None
        if handle is None:
            logger.warning(f"Chat session {request.session_id} unbound; continuing without transcript logging")

        latest = request.latest_user_message
        if handle and latest:
            saved = await self.store.append_message(handle, "user", latest)
            if not saved.available:
                logger.warning(f"User message not recorded for {request.session_id}")

        quota = await self.gate.check_quota(handle)
        if quota.exceeded:
            return RelayTurn(handle, CompletionStream("limit", _single_chunk(self.limit_message)), limited=True)

        history = [
            {"role": msg.role, "content": msg.content}
            for msg in request.messages[-self.history_limit:]
        ]
        stream = await self.provider.open_completion_stream(
            self.system_prompt,
            history,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        return RelayTurn(handle, stream)

    async def events(self, turn: RelayTurn) -> AsyncIterator[str]:
        """SSE frames for one turn: content chunks, then [DONE] or a single error frame."""
        parts: List[str] = []
        completed = False
        try:
            async for chunk in turn.stream:
                parts.append(chunk)
                yield sse_frame({"content": chunk})
            completed = True
        except Exception as e:
            logger.error(f"Chat stream from {turn.stream.provider} aborted after {len(parts)} chunks: {str(e)}")
            yield sse_frame({"error": UpstreamTransientError.default_message})
        finally:
            # Also reached when the client disconnects; the upstream is released either way.
            self._spawn(turn.stream.aclose(), "close upstream stream")

        if completed:
            self.persist_detached(turn.session_handle, "".join(parts))
            yield DONE_FRAME

    def persist_detached(self, session_handle: Optional[str], text: str) -> None:
        """Stores the assistant transcript without making anyone wait for it."""
        if not session_handle or not text:
            return
        self._spawn(self._persist_transcript(session_handle, text), "persist transcript")

    async def wait_for_pending(self) -> None:
        """Waits for detached writes still in flight (used on shutdown and in tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _persist_transcript(self, session_handle: str, text: str) -> None:
        result = await self.store.append_message(session_handle, "assistant", text)
        if not result.available:
            logger.warning(f"Assistant transcript dropped for session {session_handle}: {result.error}")

    def _spawn(self, coro: Coroutine, label: str) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)

        def _done(finished: asyncio.Task) -> None:
            self._pending.discard(finished)
            if not finished.cancelled() and finished.exception() is not None:
                logger.error(f"Background task '{label}' failed: {str(finished.exception())}")

        task.add_done_callback(_done)
