"""
GitHub Models adapter - OpenAI-compatible endpoint authenticated with a GitHub token.
This backend sometimes wraps JSON in prose or markdown, so its output goes
through the forgiving normalizer.
"""
import logging
from typing import Any, Callable

from openai import AsyncOpenAI

from prompt_improver.config import Settings
from prompt_improver.errors import ConfigurationError
from prompt_improver.services.credentials import (
    GITHUB_SESSION_SCOPES,
    CredentialProvider,
    NoSessionCredentialProvider,
)

logger = logging.getLogger(__name__)


class GitHubAdapter:
    name = "github"
    requires_static_credential = False
    strict_json = False

    def __init__(
        self,
        settings: Settings,
        credentials: CredentialProvider | None = None,
        client_factory: Callable[[str, str], Any] | None = None
    ):
        self.settings = settings
        self.credentials = credentials or NoSessionCredentialProvider()
        self._client_factory = client_factory or (
            lambda api_key, base_url: AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        )

    async def send_and_get_text(
        self,
        system_prompt: str,
        user_message: str,
        credential: str | None
    ) -> str:
        # A configured personal access token wins over a session
        token = credential
        if not token:
            token = await self.credentials.get_or_prompt(self.name, GITHUB_SESSION_SCOPES)
        if not token:
            raise ConfigurationError(
                "GitHub Token not found. Please sign in with GitHub in settings or provide a token."
            )

        client = self._client_factory(token, self.settings.github_base_url)
        logger.debug(f"Calling GitHub Models: model={self.settings.model_github}")
        response = await client.chat.completions.create(
            model=self.settings.model_github,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message}
            ],
            temperature=self.settings.github_temperature,
            max_tokens=self.settings.github_max_tokens,
            top_p=self.settings.github_top_p
        )

        usage = response.usage
        if usage is not None:
            logger.info(f"Tokens: prompt={usage.prompt_tokens}, completion={usage.completion_tokens}, total={usage.total_tokens}")

        return response.choices[0].message.content or "{}"
