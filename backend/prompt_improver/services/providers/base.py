"""
Backend adapter contract shared by every provider.
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class BackendAdapter(Protocol):
    """
    One adapter per provider. Adapters are stateless apart from their injected
    settings, make at most one network call per send and never retry.

    Attributes:
        name: Provider key (gemini, anthropic, openai, github)
        requires_static_credential: True when an interactive session cannot stand in for a key
        strict_json: True when the backend's JSON mode is trusted and output skips the forgiving parser
    """
    name: str
    requires_static_credential: bool
    strict_json: bool

    async def send_and_get_text(
        self,
        system_prompt: str,
        user_message: str,
        credential: str | None
    ) -> str:
        ...
