from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio.config import Settings, settings
from portfolio.errors import APIError, api_error_handler
from portfolio.routes import admin, blogs, chat, site
from portfolio.services.admission import AdmissionGate
from portfolio.services.analytics import AnalyticsStore
from portfolio.services.blog import BlogStore
from portfolio.services.chat_relay import ChatRelay
from portfolio.services.conversation_store import ConversationStore
from portfolio.services.email_service import EmailService
from portfolio.services.github_stats import GitHubStatsService
from portfolio.services.leads import LeadStore
from portfolio.services.llm_service import LLMService
from portfolio.services.supabase_store import create_supabase_client
from portfolio.utils.logger import logger
from portfolio.utils.rate_limit import RateLimiter


def create_app(config: Settings = settings) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Let detached transcript writes finish before the process exits
        await app.state.chat_relay.wait_for_pending()
        logger.info("Shutdown complete.")

    app = FastAPI(
        title="Portfolio API",
        description="Backend for the portfolio site: chatbot, analytics, lead capture and blog",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(APIError, api_error_handler)

    # One Supabase client shared by every store
    supabase = create_supabase_client(config.SUPABASE_URL, config.SUPABASE_KEY)
    conversation_store = ConversationStore(supabase)

    rate_limiter = RateLimiter(
        limit=config.CHAT_RATE_LIMIT,
        window_seconds=config.CHAT_RATE_WINDOW_SECONDS,
        max_entries=config.CHAT_RATE_MAX_TRACKED,
    )
    admission_gate = AdmissionGate(rate_limiter, conversation_store, question_quota=config.CHAT_QUESTION_QUOTA)

    app.state.conversation_store = conversation_store
    app.state.admission_gate = admission_gate
    app.state.chat_relay = ChatRelay(
        conversation_store,
        LLMService(gemini_key=config.GEMINI_API_KEY, groq_key=config.GROQ_API_KEY or config.XAI_API_KEY),
        admission_gate,
        history_limit=config.CHAT_HISTORY_LIMIT,
        max_tokens=config.CHAT_MAX_TOKENS,
        temperature=config.CHAT_TEMPERATURE,
    )
    app.state.analytics_store = AnalyticsStore(supabase)
    app.state.lead_store = LeadStore(supabase)
    app.state.blog_store = BlogStore(supabase)
    app.state.email_service = EmailService()
    app.state.github_service = GitHubStatsService()

    app.include_router(chat.router)
    app.include_router(admin.router)
    app.include_router(site.router)
    app.include_router(blogs.router)

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "running", "environment": config.ENVIRONMENT}

    return app


app = create_app()
