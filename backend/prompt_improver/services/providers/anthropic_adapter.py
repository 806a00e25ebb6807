"""
Anthropic adapter - single messages call, first content block's text.
"""
import logging
from typing import Any, Callable

from anthropic import AsyncAnthropic

from prompt_improver.config import Settings
from prompt_improver.errors import ConfigurationError

logger = logging.getLogger(__name__)


class AnthropicAdapter:
    name = "anthropic"
    requires_static_credential = True
    strict_json = False

    def __init__(
        self,
        settings: Settings,
        client_factory: Callable[[str], Any] | None = None
    ):
        self.settings = settings
        self._client_factory = client_factory or (
            lambda api_key: AsyncAnthropic(api_key=api_key, max_retries=0)
        )

    async def send_and_get_text(
        self,
        system_prompt: str,
        user_message: str,
        credential: str | None
    ) -> str:
        if not credential:
            raise ConfigurationError("Anthropic API Key missing")

        client = self._client_factory(credential)
        logger.debug(f"Calling Anthropic: model={self.settings.model_anthropic}")
        message = await client.messages.create(
            model=self.settings.model_anthropic,
            max_tokens=self.settings.anthropic_max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": user_message}]
        )

        usage = getattr(message, "usage", None)
        if usage is not None:
            logger.info(f"Tokens: input={usage.input_tokens}, output={usage.output_tokens}")

        if not message.content:
            return ""
        return message.content[0].text
