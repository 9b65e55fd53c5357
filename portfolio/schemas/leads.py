from typing import Optional

from pydantic import BaseModel, Field, field_validator

from portfolio.services.leads import is_valid_email


class _EmailForm(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., max_length=320)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not is_valid_email(value):
            raise ValueError("Please enter a valid email address")
        return value


class ContactForm(_EmailForm):
    subject: Optional[str] = Field(default=None, max_length=300)
    message: str = Field(..., min_length=1, max_length=5000)


class ServiceInquiry(_EmailForm):
    company: Optional[str] = Field(default=None, max_length=200)
    service: Optional[str] = Field(default=None, max_length=200)
    budget: Optional[str] = Field(default=None, max_length=100)
    timeline: Optional[str] = Field(default=None, max_length=100)
    message: Optional[str] = Field(default=None, max_length=5000)
