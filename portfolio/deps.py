from typing import Optional

from fastapi import Header, Request

from portfolio.errors import Unauthorized
from portfolio.services.admission import AdmissionGate
from portfolio.services.analytics import AnalyticsStore
from portfolio.services.blog import BlogStore
from portfolio.services.chat_relay import ChatRelay
from portfolio.services.conversation_store import ConversationStore
from portfolio.services.email_service import EmailService
from portfolio.services.github_stats import GitHubStatsService
from portfolio.services.leads import LeadStore
from portfolio.utils.security import verify_admin_token


def get_admission_gate(request: Request) -> AdmissionGate:
    return request.app.state.admission_gate


def get_chat_relay(request: Request) -> ChatRelay:
    return request.app.state.chat_relay


def get_conversation_store(request: Request) -> ConversationStore:
    return request.app.state.conversation_store


def get_analytics_store(request: Request) -> AnalyticsStore:
    return request.app.state.analytics_store


def get_lead_store(request: Request) -> LeadStore:
    return request.app.state.lead_store


def get_blog_store(request: Request) -> BlogStore:
    return request.app.state.blog_store


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_github_service(request: Request) -> GitHubStatsService:
    return request.app.state.github_service


async def require_admin(authorization: Optional[str] = Header(default=None)) -> None:
    if not verify_admin_token(authorization):
        raise Unauthorized()
