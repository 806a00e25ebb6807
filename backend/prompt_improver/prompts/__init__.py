"""
Centralized prompts for the prompt improver.

- analysis: system prompt, user message template and language directives
"""

from prompt_improver.prompts.analysis import (
    ANALYSIS_SYSTEM_PROMPT,
    ANALYSIS_USER_PROMPT,
    ATTACHMENT_BLOCK,
    LANGUAGE_DIRECTIVES,
    NO_ATTACHMENTS,
)

__all__ = [
    "ANALYSIS_SYSTEM_PROMPT",
    "ANALYSIS_USER_PROMPT",
    "ATTACHMENT_BLOCK",
    "LANGUAGE_DIRECTIVES",
    "NO_ATTACHMENTS",
]
