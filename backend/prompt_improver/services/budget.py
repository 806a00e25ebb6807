"""
Token budget estimator - approximate request size against per-provider ceilings.
One token is estimated as four characters; this is admission control, not billing.
"""
import logging
import math
from typing import Iterable

from prompt_improver.config import DEFAULT_TOKEN_LIMITS
from prompt_improver.errors import BudgetExceededError
from prompt_improver.schemas import Attachment, BudgetReport

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4
DEFAULT_TOKEN_LIMIT = 8000

PROVIDER_DISPLAY_NAMES = {
    "gemini": "Gemini",
    "anthropic": "Claude",
    "openai": "GPT-4",
    "github": "GitHub",
}


def display_name(provider: str) -> str:
    return PROVIDER_DISPLAY_NAMES.get(provider, provider)


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def total_tokens(prompt: str, attachments: Iterable[Attachment]) -> int:
    """Prompt estimate plus each attachment's content estimate."""
    return estimate_tokens(prompt) + sum(estimate_tokens(att.content) for att in attachments)


def limit_for(provider: str, overrides: dict[str, int] | None = None) -> int:
    # Non-positive overrides are ignored
    limits = {**DEFAULT_TOKEN_LIMITS, **{p: n for p, n in (overrides or {}).items() if n > 0}}
    return limits.get(provider, DEFAULT_TOKEN_LIMIT)


def check_budget(
    provider: str,
    prompt: str,
    attachments: Iterable[Attachment],
    overrides: dict[str, int] | None = None
) -> BudgetReport:
    used = total_tokens(prompt, attachments)
    limit = limit_for(provider, overrides)
    return BudgetReport(
        provider=provider,
        used=used,
        limit=limit,
        over_limit=used > limit,
        usage_percent=round(min(used / limit * 100, 100.0), 1)
    )


def enforce_budget(
    provider: str,
    prompt: str,
    attachments: Iterable[Attachment],
    overrides: dict[str, int] | None = None
) -> BudgetReport:
    """
    Pre-flight gate for callers. Raises BudgetExceededError when over the ceiling,
    otherwise returns the report.
    """
    report = check_budget(provider, prompt, attachments, overrides)
    if report.over_limit:
        logger.warning(f"Token budget exceeded: provider={provider}, used={report.used}, limit={report.limit}")
        raise BudgetExceededError(provider, display_name(provider), report.used, report.limit)
    logger.debug(f"Token budget ok: provider={provider}, used={report.used}/{report.limit}")
    return report
