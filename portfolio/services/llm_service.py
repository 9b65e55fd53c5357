from typing import AsyncIterator, Callable, Dict, List, Optional

import google.generativeai as genai
import groq
from google.api_core import exceptions as google_exceptions
from groq import AsyncGroq

from portfolio.config import settings
from portfolio.errors import UpstreamConfigError, UpstreamTransientError
from portfolio.utils.logger import logger

History = List[Dict[str, str]]


class CompletionStream:
    """An upstream token stream that has already produced its first chunk.

    Opening eagerly means credential and quota errors surface before any
    response bytes are sent, while the client can still get a clean JSON error.
    """
    def __init__(self, provider: str, chunks: AsyncIterator[str]):
        self.provider = provider
        self._chunks = chunks
        self._buffered: List[str] = []
        self._closed = False

    async def prime(self) -> None:
        try:
            self._buffered.append(await self._chunks.__anext__())
        except StopAsyncIteration:
            pass

    def __aiter__(self) -> "CompletionStream":
        return self

    async def __anext__(self) -> str:
        if self._buffered:
            return self._buffered.pop(0)
        if self._closed:
            raise StopAsyncIteration
        return await self._chunks.__anext__()

    async def aclose(self) -> None:
        """Releases the provider-side stream. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._buffered.clear()
        aclose = getattr(self._chunks, "aclose", None)
        if aclose is not None:
            await aclose()


def is_auth_error(error: BaseException) -> bool:
    if isinstance(error, (groq.AuthenticationError, groq.PermissionDeniedError)):
        return True
    if isinstance(error, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)):
        return True
    # Gemini reports a bad key as INVALID_ARGUMENT
    if isinstance(error, google_exceptions.InvalidArgument) and "API key" in str(error):
        return True
    return False


class LLMService:
    """Completion Provider for the portfolio chatbot: Gemini first, Groq/xAI as fallback."""

    def __init__(
        self,
        gemini_key: Optional[str] = None,
        groq_key: Optional[str] = None,
    ):
        # Initialize Gemini
        self.gemini_key = gemini_key if gemini_key is not None else settings.GEMINI_API_KEY
        if self.gemini_key:
            genai.configure(api_key=self.gemini_key)
        self.gemini_model_id = settings.GEMINI_MODEL_ID

        # Initialize Groq
        self.groq_key = groq_key if groq_key is not None else (settings.GROQ_API_KEY or settings.XAI_API_KEY)
        self.is_xai = bool(self.groq_key) and self.groq_key.startswith("xai-")

        if self.groq_key:
            if self.is_xai:
                self.groq_client = AsyncGroq(api_key=self.groq_key, base_url="https://api.x.ai/v1")
            else:
                self.groq_client = AsyncGroq(api_key=self.groq_key)
        else:
            self.groq_client = None
        self.groq_model_id = settings.XAI_MODEL_ID if self.is_xai else settings.GROQ_MODEL_ID

        self.primary_provider = "gemini" if self.gemini_key else "groq" if self.groq_key else "none"

    def provider_order(self) -> List[str]:
        order = []
        if self.gemini_key:
            order.append("gemini")
        if self.groq_client:
            order.append("groq")
        return order

    async def open_completion_stream(
        self,
        system_prompt: str,
        history: History,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ) -> CompletionStream:
        """Opens a token stream with the first provider that accepts the request.

        Raises UpstreamConfigError when no provider is configured or the last
        one rejected our credentials, UpstreamTransientError otherwise.
        """
        providers = self.provider_order()
        if not providers:
            logger.error("No LLM API keys configured (GEMINI_API_KEY / GROQ_API_KEY).")
            raise UpstreamConfigError()

        streamers: Dict[str, Callable[..., AsyncIterator[str]]] = {
            "gemini": self._stream_gemini,
            "groq": self._stream_groq,
        }
        last_error: Optional[BaseException] = None

        for name in providers:
            stream = CompletionStream(name, streamers[name](system_prompt, history, max_tokens, temperature))
            try:
                await stream.prime()
                logger.info(f"Completion stream opened via {name}")
                return stream
            except Exception as e:
                await stream.aclose()
                logger.error(f"{name} stream failed to open: {str(e)}")
                last_error = e

        if last_error is not None and is_auth_error(last_error):
            raise UpstreamConfigError() from last_error
        raise UpstreamTransientError() from last_error

    async def _stream_gemini(self, system_prompt: str, history: History, max_tokens: int, temperature: float):
        model = genai.GenerativeModel(self.gemini_model_id, system_instruction=system_prompt)
        contents = [
            {"role": "model" if msg["role"] == "assistant" else "user", "parts": [msg["content"]]}
            for msg in history
        ]
        response = await model.generate_content_async(
            contents,
            generation_config=genai.GenerationConfig(max_output_tokens=max_tokens, temperature=temperature),
            stream=True,
        )
        async for chunk in response:
            text = _gemini_chunk_text(chunk)
            if text:
                yield text

    async def _stream_groq(self, system_prompt: str, history: History, max_tokens: int, temperature: float):
        response = await self.groq_client.chat.completions.create(
            messages=[{"role": "system", "content": system_prompt}, *history],
            model=self.groq_model_id,
            temperature=temperature,
            max_tokens=max_tokens,
            stream=True,
        )
        try:
            async for chunk in response:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content
        finally:
            await response.close()


def _gemini_chunk_text(chunk) -> str:
    # chunk.text raises when a candidate carries no parts (e.g. the final safety/finish chunk)
    candidates = getattr(chunk, "candidates", None) or []
    if not candidates or not candidates[0].content:
        return ""
    return "".join(getattr(part, "text", "") or "" for part in candidates[0].content.parts)
