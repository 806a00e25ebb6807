"""
Backend adapters, one per provider, selected by the Provider enum.
"""

from prompt_improver.config import Settings
from prompt_improver.schemas import Provider
from prompt_improver.services.credentials import CredentialProvider

from .anthropic_adapter import AnthropicAdapter
from .base import BackendAdapter
from .gemini_adapter import GeminiAdapter
from .github_adapter import GitHubAdapter
from .openai_adapter import OpenAIAdapter


def build_adapters(
    settings: Settings,
    credentials: CredentialProvider | None = None
) -> dict[Provider, BackendAdapter]:
    """Default adapter for every provider, sharing one credential provider."""
    return {
        Provider.GEMINI: GeminiAdapter(settings, credentials),
        Provider.ANTHROPIC: AnthropicAdapter(settings),
        Provider.OPENAI: OpenAIAdapter(settings),
        Provider.GITHUB: GitHubAdapter(settings, credentials),
    }


__all__ = [
    "AnthropicAdapter",
    "BackendAdapter",
    "GeminiAdapter",
    "GitHubAdapter",
    "OpenAIAdapter",
    "build_adapters",
]
