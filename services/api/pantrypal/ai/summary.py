import logging
from typing import Sequence

from ..schemas import FeedbackEvent
from ..settings import settings
from .errors import UnusableOutputError
from .prompts import build_summary_prompt

logger = logging.getLogger("pantrypal.ai")

SUMMARY_MAX_CHARS = 1200
SUMMARY_CLIP_CHARS = 1197
ELLIPSIS = "..."
SUMMARY_TEMPERATURE = 0.3
SUMMARY_MAX_TOKENS = 500


def clip_summary(text: str) -> str:
    """Hard positional clip: over-long text keeps 1197 chars plus '...'."""
    if len(text) > SUMMARY_MAX_CHARS:
        return text[:SUMMARY_CLIP_CHARS] + ELLIPSIS
    return text


def summarize_preferences(client, events: Sequence[FeedbackEvent]) -> str:
    """
    Compress recent feedback into a short plain-text preference profile.

    Best effort: the model is asked to stay under the limit and the result
    is clipped if it does not.
    """
    prompt = build_summary_prompt(events)

    text = client.complete(
        prompt,
        model=settings.gemini_light_model,
        temperature=SUMMARY_TEMPERATURE,
        json_output=False,
        max_output_tokens=SUMMARY_MAX_TOKENS,
    ).strip()

    if not text:
        logger.error("Preference summary came back empty")
        raise UnusableOutputError("Failed to generate a preference summary. Please try again.")

    clipped = clip_summary(text)
    if len(clipped) != len(text):
        logger.info(f"Preference summary clipped from {len(text)} to {len(clipped)} chars")
    return clipped
