from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    ENVIRONMENT: str = "development"
    PORT: int = 8000
    HOST: str = "0.0.0.0"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # LLM Conf (Gemini is primary when both are configured)
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL_ID: str = "gemini-2.5-flash"
    GROQ_API_KEY: Optional[str] = None
    XAI_API_KEY: Optional[str] = None # xAI keys go through the Groq client with a different base_url
    GROQ_MODEL_ID: str = "llama-3.3-70b-versatile"
    XAI_MODEL_ID: str = "grok-beta"

    # Supabase (conversation store, analytics, leads, blog)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None

    # Chat admission + relay
    CHAT_RATE_LIMIT: int = 20  # requests per window per client IP
    CHAT_RATE_WINDOW_SECONDS: float = 60.0
    CHAT_RATE_MAX_TRACKED: int = 10000
    CHAT_QUESTION_QUOTA: int = 10  # user questions per conversation
    CHAT_HISTORY_LIMIT: int = 10
    CHAT_MAX_TOKENS: int = 500
    CHAT_TEMPERATURE: float = 0.7

    # Admin endpoints (chats, analytics stats, blog CMS)
    ADMIN_API_TOKEN: Optional[str] = None

    # EmailJS (contact form + service inquiries)
    EMAILJS_SERVICE_ID: Optional[str] = None
    EMAILJS_TEMPLATE_ID: Optional[str] = None
    EMAILJS_INQUIRY_TEMPLATE_ID: Optional[str] = None
    EMAILJS_PUBLIC_KEY: Optional[str] = None
    EMAILJS_PRIVATE_KEY: Optional[str] = None

    # GitHub stats
    GITHUB_USERNAME: str = "Legolasan"
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_CACHE_SECONDS: float = 3600.0

    RESUME_DOWNLOAD_URL: str = "/resume.pdf"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

settings = Settings()
