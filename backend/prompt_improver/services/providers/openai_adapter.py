"""
OpenAI adapter - JSON-mode chat completion. Output is treated as strict JSON.
"""
import logging
from typing import Any, Callable

from openai import AsyncOpenAI

from prompt_improver.config import Settings
from prompt_improver.errors import ConfigurationError

logger = logging.getLogger(__name__)


class OpenAIAdapter:
    name = "openai"
    requires_static_credential = True
    # JSON mode is trusted here; see DESIGN.md for the asymmetry with github
    strict_json = True

    def __init__(
        self,
        settings: Settings,
        client_factory: Callable[[str], Any] | None = None
    ):
        self.settings = settings
        self._client_factory = client_factory or (
            lambda api_key: AsyncOpenAI(api_key=api_key, max_retries=0)
        )

    async def send_and_get_text(
        self,
        system_prompt: str,
        user_message: str,
        credential: str | None
    ) -> str:
        if not credential:
            raise ConfigurationError("OpenAI API Key missing")

        client = self._client_factory(credential)
        logger.debug(f"Calling OpenAI: model={self.settings.model_openai}")
        response = await client.chat.completions.create(
            model=self.settings.model_openai,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message}
            ],
            response_format={"type": "json_object"}  # Force valid JSON
        )

        usage = response.usage
        if usage is not None:
            logger.info(f"Tokens: prompt={usage.prompt_tokens}, completion={usage.completion_tokens}, total={usage.total_tokens}")

        return response.choices[0].message.content or "{}"
