"""Generate → validate → repair-once pipeline.

At most two provider calls per invocation: the primary generation and, only
if its output fails to parse or validate, a single repair call on the
lightweight model at temperature 0. There is no second repair and no
fallback structure.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from ..settings import settings
from .errors import (
    OutputValidationError,
    ProviderError,
    RepairExhaustedError,
    RepairUnavailableError,
)
from .prompts import PromptPair, build_repair_prompt
from .validation import parse_and_validate

logger = logging.getLogger("pantrypal.ai")

T = TypeVar("T", bound=BaseModel)

REPAIR_TEMPERATURE = 0.0


@dataclass
class GenerationResult(Generic[T]):
    value: T
    raw_json: str  # exact text that validated, persisted verbatim
    model: str
    repaired: bool = False
    repair_model: Optional[str] = None  # set when raw_json came from the repair call


def _accept(raw_text: str, response_model: Type[T], check: Optional[Callable[[T], None]]) -> T:
    value = parse_and_validate(raw_text, response_model)
    if check is not None:
        try:
            check(value)
        except OutputValidationError as e:
            e.raw_text = raw_text
            raise
    return value


def generate_validated(
    client,
    prompt: PromptPair,
    response_model: Type[T],
    *,
    model: str,
    temperature: float,
    repair_schema: str,
    failure_message: str,
    repair_requirements: Optional[str] = None,
    check: Optional[Callable[[T], None]] = None,
) -> GenerationResult[T]:
    """
    Run one generation with a single bounded repair.

    `check` lets the caller enforce invariants the schema deliberately does
    not own (e.g. a plan's day count); it must raise OutputValidationError.
    Provider failures on the first call propagate untouched so they are not
    mistaken for bad output. A provider failure during repair is reported as
    RepairUnavailableError, since unusable output was already generated.
    """
    raw_text = client.complete(
        prompt.user,
        system_instruction=prompt.system,
        model=model,
        temperature=temperature,
        json_output=True,
    )

    try:
        value = _accept(raw_text, response_model, check)
        return GenerationResult(value=value, raw_json=raw_text, model=model)
    except OutputValidationError as e:
        first_error = e
        logger.warning(f"{response_model.__name__}: initial output invalid, attempting repair: {e}")

    repair_prompt = build_repair_prompt(repair_schema, raw_text, repair_requirements)
    try:
        repaired_text = client.complete(
            repair_prompt,
            model=settings.gemini_light_model,
            temperature=REPAIR_TEMPERATURE,
            json_output=True,
        )
    except ProviderError as provider_error:
        logger.error(f"{response_model.__name__}: repair call failed: {provider_error}")
        raise RepairUnavailableError(failure_message, first_error, provider_error) from provider_error

    try:
        value = _accept(repaired_text, response_model, check)
    except OutputValidationError as repair_error:
        logger.error(f"{response_model.__name__}: repair also failed: {repair_error}")
        raise RepairExhaustedError(failure_message, first_error, repair_error) from repair_error

    logger.info(f"{response_model.__name__}: repair successful")
    return GenerationResult(
        value=value,
        raw_json=repaired_text,
        model=model,
        repaired=True,
        repair_model=settings.gemini_light_model,
    )
