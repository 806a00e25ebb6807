"""
Gemini adapter.
Static API key → google-genai SDK. No key → bearer token from a Google session,
sent to the REST endpoint directly.
"""
import logging
from typing import Any, Callable

import httpx
from google import genai

from prompt_improver.config import Settings
from prompt_improver.errors import ConfigurationError, ProviderError
from prompt_improver.services.credentials import (
    GEMINI_SESSION_SCOPES,
    CredentialProvider,
    NoSessionCredentialProvider,
)

logger = logging.getLogger(__name__)


class GeminiAdapter:
    name = "gemini"
    requires_static_credential = False
    strict_json = False

    def __init__(
        self,
        settings: Settings,
        credentials: CredentialProvider | None = None,
        client_factory: Callable[[str], Any] | None = None,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        self.settings = settings
        self.credentials = credentials or NoSessionCredentialProvider()
        self._client_factory = client_factory or (lambda api_key: genai.Client(api_key=api_key))
        self._transport = transport

    async def send_and_get_text(
        self,
        system_prompt: str,
        user_message: str,
        credential: str | None
    ) -> str:
        contents = f"{system_prompt}\n\n{user_message}"

        if credential:
            return await self._send_with_key(credential, contents)

        token = await self.credentials.get_or_prompt(self.name, GEMINI_SESSION_SCOPES)
        if not token:
            raise ConfigurationError(
                "API Key for gemini is missing and no Google session found. "
                "Please set API key or sign in."
            )
        return await self._send_with_token(token, contents)

    async def _send_with_key(self, api_key: str, contents: str) -> str:
        client = self._client_factory(api_key)
        logger.debug(f"Calling Gemini SDK: model={self.settings.model_gemini}")
        response = await client.aio.models.generate_content(
            model=self.settings.model_gemini,
            contents=contents
        )
        return response.text or ""

    async def _send_with_token(self, token: str, contents: str) -> str:
        url = f"{self.settings.gemini_base_url}/models/{self.settings.model_gemini}:generateContent"
        payload = {"contents": [{"parts": [{"text": contents}]}]}

        logger.debug(f"Calling Gemini REST with session token: {url}")
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(self.settings.request_timeout)
        ) as client:
            response = await client.post(
                url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {token}",
                }
            )

        if not response.is_success:
            raise ProviderError(
                self.name,
                f"Gemini API Error: {response.status_code} {response.reason_phrase} - {response.text}"
            )

        data = response.json()
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            logger.warning("Gemini response had no candidate text")
            return "{}"
