"""
Lead capture: resume download gating and the records it leaves behind.
"""
import re
from dataclasses import dataclass
from typing import Optional

from portfolio.services.supabase_store import StoreResult, SupabaseStore
from portfolio.utils.logger import logger
from portfolio.utils.security import mask_email

RESUME_DOWNLOADS_TABLE = "resume_downloads"

# Personal mailbox providers; the resume is for professional/recruitment use.
BLOCKED_DOMAINS = frozenset({
    "gmail.com", "googlemail.com",
    "yahoo.com", "yahoo.co.uk", "yahoo.co.in", "ymail.com",
    "hotmail.com", "hotmail.co.uk",
    "outlook.com", "outlook.co.uk",
    "live.com", "live.co.uk", "msn.com",
    "icloud.com", "me.com", "mac.com",
    "aol.com",
    "protonmail.com", "proton.me", "pm.me",
    "mail.com", "zoho.com", "gmx.com", "gmx.net",
    "fastmail.com", "tutanota.com", "hey.com",
    "yandex.com", "rediffmail.com",
    "qq.com", "163.com", "126.com", "sina.com",
})

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def extract_domain(email: str) -> str:
    _, _, domain = email.partition("@")
    return domain.lower()


def is_business_email(email: str) -> bool:
    return extract_domain(email) not in BLOCKED_DOMAINS


@dataclass(frozen=True)
class ResumeRequest:
    email: str
    domain: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class LeadStore(SupabaseStore):

    async def record_resume_download(self, request: ResumeRequest) -> StoreResult[None]:
        result = await self._execute(
            "record resume download",
            lambda c: c.table(RESUME_DOWNLOADS_TABLE).insert({
                "email": request.email,
                "domain": request.domain,
                "ip_address": request.ip_address,
                "user_agent": request.user_agent,
            }),
        )
        if not result.available:
            return StoreResult.unavailable(result.error)
        logger.info(f"Resume requested by {mask_email(request.email)}")
        return StoreResult.ok()
