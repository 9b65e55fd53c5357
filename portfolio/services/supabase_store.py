import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from supabase import Client, create_client

from portfolio.config import settings
from portfolio.utils.logger import logger

T = TypeVar("T")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of a store call: either a value, or "unavailable" with a reason.

    Store methods return this instead of raising, so every caller has to decide
    what an unavailable store means for it.
    """
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "StoreResult[T]":
        return cls(value=value)

    @classmethod
    def unavailable(cls, reason: str, code: Optional[str] = None) -> "StoreResult[T]":
        return cls(error=reason, error_code=code)


NOT_CONFIGURED = "store not configured"


def to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def camelize(value: Any) -> Any:
    """Rows come back with snake_case columns; API responses use camelCase keys."""
    if isinstance(value, dict):
        return {to_camel(key): camelize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [camelize(item) for item in value]
    return value


def create_supabase_client(url: Optional[str] = None, key: Optional[str] = None) -> Optional[Client]:
    """Connects to Supabase when SUPABASE_URL and SUPABASE_KEY are provided."""
    url = url or settings.SUPABASE_URL
    key = key or settings.SUPABASE_KEY
    if not (url and key):
        logger.warning("Supabase is not configured; persistence is disabled.")
        return None

    try:
        client = create_client(url, key)
        logger.info("Supabase client initialized.")
        return client
    except Exception as e:
        logger.warning(f"Could not initialize Supabase: {str(e)}")
        return None


class SupabaseStore:
    """Base for the Supabase-backed stores.

    The supabase client is synchronous, so each query runs in a worker thread
    to keep the event loop (and any open chat streams) moving.
    """
    def __init__(self, client: Optional[Client]):
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def _execute(self, operation: str, build: Callable[[Client], Any]) -> StoreResult[Any]:
        if self.client is None:
            return StoreResult.unavailable(NOT_CONFIGURED)

        try:
            response = await asyncio.to_thread(lambda: build(self.client).execute())
            return StoreResult.ok(response)
        except Exception as e:
            logger.error(f"Supabase {operation} failed: {str(e)}")
            return StoreResult.unavailable(str(e), code=getattr(e, "code", None))
