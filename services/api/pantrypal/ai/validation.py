import json
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import OutputValidationError, ValidationIssue

T = TypeVar("T", bound=BaseModel)


def _format_loc(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "$"


def validate_payload(data: Any, response_model: Type[T], raw_text: str | None = None) -> T:
    """Validate already-parsed JSON against a provider contract.

    Does not mutate `data`. Raises OutputValidationError listing every
    offending path and the constraint it broke.
    """
    if not isinstance(data, dict):
        raise OutputValidationError(
            f"{response_model.__name__} must be a JSON object",
            [ValidationIssue("$", "object_type", f"expected object, got {type(data).__name__}")],
            raw_text,
        )

    try:
        return response_model.model_validate(data)
    except ValidationError as e:
        issues = [
            ValidationIssue(_format_loc(err["loc"]), err["type"], err["msg"])
            for err in e.errors()
        ]
        raise OutputValidationError(
            f"{response_model.__name__} failed validation", issues, raw_text
        ) from e


def parse_and_validate(raw_text: str, response_model: Type[T]) -> T:
    try:
        data = json.loads(raw_text)
    except (json.JSONDecodeError, TypeError) as e:
        raise OutputValidationError(
            "Response is not valid JSON",
            [ValidationIssue("$", "json_syntax", str(e))],
            raw_text,
        ) from e
    return validate_payload(data, response_model, raw_text)
