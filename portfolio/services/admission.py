from dataclasses import dataclass
from typing import Optional

from portfolio.services.conversation_store import ConversationStore
from portfolio.utils.logger import logger
from portfolio.utils.rate_limit import RateLimiter


@dataclass(frozen=True)
class QuotaStatus:
    remaining: int
    exceeded: bool = False


class AdmissionGate:
    """
    Decides whether a chat request may reach the completion provider.

    Two independent limits: a per-identity burst limit (the RateLimiter) and a
    per-conversation question quota read fresh from the Conversation Store.
    """
    def __init__(self, rate_limiter: RateLimiter, store: ConversationStore, question_quota: int = 10):
        self.rate_limiter = rate_limiter
        self.store = store
        self.question_quota = question_quota

    def check_rate(self, identity: str) -> bool:
        allowed = self.rate_limiter.is_allowed(identity)
        if not allowed:
            logger.warning(f"Chat rate limit hit for {identity}")
        return allowed

    def retry_after(self, identity: str) -> int:
        return self.rate_limiter.retry_after(identity)

    async def check_quota(self, session_handle: Optional[str]) -> QuotaStatus:
        """Soft quota: exceeded once the session has more than ``question_quota`` user messages.

        Fails open when there is no session bound or the store cannot be read.
        """
        if not session_handle:
            return QuotaStatus(remaining=self.question_quota)

        result = await self.store.count_user_messages(session_handle)
        if not result.available:
            logger.warning(f"Question quota check skipped (store unavailable): {result.error}")
            return QuotaStatus(remaining=self.question_quota)

        count = result.value or 0
        if count > self.question_quota:
            logger.info(f"Question quota reached for session {session_handle} ({count} questions)")
            return QuotaStatus(remaining=0, exceeded=True)
        return QuotaStatus(remaining=self.question_quota - count)
