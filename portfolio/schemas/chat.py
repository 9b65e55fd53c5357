import re
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

from portfolio.utils.security import sanitize_text

MAX_MESSAGES = 20
MAX_MESSAGE_LENGTH = 1000
MAX_SESSION_ID_LENGTH = 100

SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        # Length is checked on the raw text so padding cannot smuggle in longer input.
        if len(value) > MAX_MESSAGE_LENGTH:
            raise ValueError(f"message content must be at most {MAX_MESSAGE_LENGTH} characters")
        value = sanitize_text(value)
        if not value:
            raise ValueError("message content must not be empty")
        return value


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1, max_length=MAX_MESSAGES)
    session_id: str = Field(..., alias="sessionId", min_length=1, max_length=MAX_SESSION_ID_LENGTH)

    @field_validator("session_id")
    @classmethod
    def check_session_id(cls, value: str) -> str:
        if not SESSION_ID_PATTERN.fullmatch(value):
            raise ValueError("sessionId may only contain letters, digits, '_' and '-'")
        return value

    @property
    def latest_user_message(self):
        last = self.messages[-1]
        return last.content if last.role == "user" else None
