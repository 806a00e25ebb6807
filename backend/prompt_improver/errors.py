"""
Error taxonomy for prompt analysis.

Parse failures are not errors: the normalizer degrades to a fallback result.
"""


class PromptImproverError(RuntimeError):
    """Base class. Messages are shown to the user verbatim; never include secrets."""


class ConfigurationError(PromptImproverError):
    """Missing or invalid credential. Fixable via settings, never retried."""

    @property
    def is_missing_api_key(self) -> bool:
        return "API Key" in str(self)


class ProviderError(PromptImproverError):
    """Network failure, non-success HTTP status or SDK exception from a backend."""

    def __init__(self, provider: str, detail: str):
        self.provider = provider
        self.detail = detail
        super().__init__(f"AI Error ({provider}): {detail}")


class BudgetExceededError(PromptImproverError):
    """Raised at the call boundary when the estimated request is over the provider ceiling."""

    def __init__(self, provider: str, display_name: str, used: int, limit: int):
        self.provider = provider
        self.used = used
        self.limit = limit
        super().__init__(
            f"Token limit exceeded for {display_name} ({used:,}/{limit:,}). "
            "Please reduce your prompt or remove some attachments."
        )
