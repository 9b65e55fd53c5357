from typing import Any, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from portfolio.errors import ValidationFailed

M = TypeVar("M", bound=BaseModel)


async def read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise ValidationFailed("Invalid request: body must be valid JSON")


def parse_model(model: Type[M], body: Any) -> M:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise ValidationFailed(describe_validation_error(e))


def describe_validation_error(exc: ValidationError) -> str:
    """First pydantic error as a short client-facing sentence."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"Invalid request: {location}: {message}" if location else f"Invalid request: {message}"
