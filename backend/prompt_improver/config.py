from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

# Illustrative per-provider context ceilings (tokens)
DEFAULT_TOKEN_LIMITS: dict[str, int] = {
    "gemini": 32000,     # Free tier context window
    "anthropic": 100000,
    "openai": 16000,
    "github": 8000,      # Copilot chat window
}


class Settings(BaseSettings):
    # Active backend: gemini, anthropic, openai or github
    provider: str = "gemini"

    # Static credentials. Each one is also accepted under the editor's
    # settings key so a settings blob can be validated as-is.
    gemini_api_key: str = Field(
        default="", validation_alias=AliasChoices("gemini_api_key", "geminiApiKey")
    )
    anthropic_api_key: str = Field(
        default="", validation_alias=AliasChoices("anthropic_api_key", "anthropicApiKey")
    )
    openai_api_key: str = Field(
        default="", validation_alias=AliasChoices("openai_api_key", "openaiApiKey")
    )
    github_token: str = Field(
        default="", validation_alias=AliasChoices("github_token", "githubToken")
    )

    # Model selection per provider
    model_gemini: str = "gemini-2.0-flash"
    model_anthropic: str = "claude-3-opus-20240229"
    model_openai: str = "gpt-4-turbo-preview"
    model_github: str = "gpt-4o"

    # Endpoints
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    github_base_url: str = "https://models.inference.ai.azure.com"

    # Generation settings
    anthropic_max_tokens: int = 1024
    github_temperature: float = 1.0
    github_max_tokens: int = 4096
    github_top_p: float = 1.0

    # Upper bound for a single analyze call, in seconds
    request_timeout: float = 120.0

    # Overrides for DEFAULT_TOKEN_LIMITS
    token_limits: dict[str, PositiveInt] = Field(default_factory=dict)

    # Allow bearer tokens from a signed-in `gh` / `gcloud` CLI
    session_auth_enabled: bool = True

    # Attachment paths are resolved against this directory
    workspace_root: Path = Path(".")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    def credential_for(self, provider: str) -> str | None:
        """Return the configured static secret for a provider, if any."""
        key = {
            "gemini": self.gemini_api_key,
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
            "github": self.github_token,
        }.get(provider, "")
        key = (key or "").strip()
        return key or None

    def model_for(self, provider: str) -> str:
        return {
            "gemini": self.model_gemini,
            "anthropic": self.model_anthropic,
            "openai": self.model_openai,
            "github": self.model_github,
        }.get(provider, "")


@lru_cache
def get_settings() -> Settings:
    return Settings()
