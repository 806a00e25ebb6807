"""
Analysis orchestrator - the single entry point for prompt analysis.
Coordinates: credential check → prompt assembly → backend adapter → normalizer
"""
import asyncio
import logging
from typing import Iterable

from prompt_improver.config import Settings
from prompt_improver.errors import ConfigurationError, ProviderError
from prompt_improver.prompts.analysis import (
    ANALYSIS_SYSTEM_PROMPT,
    ANALYSIS_USER_PROMPT,
    ATTACHMENT_BLOCK,
    LANGUAGE_DIRECTIVES,
    NO_ATTACHMENTS,
)
from prompt_improver.schemas import (
    AnalysisRequest,
    AnalysisResult,
    Attachment,
    Provider,
    ResponseLanguage,
)
from prompt_improver.services.credentials import CredentialProvider
from prompt_improver.services.normalizer import normalize_response, parse_strict
from prompt_improver.services.providers import BackendAdapter, build_adapters

logger = logging.getLogger(__name__)


def build_system_prompt(language: ResponseLanguage = ResponseLanguage.EN) -> str:
    return ANALYSIS_SYSTEM_PROMPT.format(
        language_directive=LANGUAGE_DIRECTIVES[ResponseLanguage(language).value]
    )


def format_attachments(attachments: Iterable[Attachment]) -> str:
    """Delimited blocks in attachment order, or a placeholder when there are none."""
    blocks = [
        ATTACHMENT_BLOCK.format(name=att.name, content=att.content)
        for att in attachments
    ]
    return "\n\n".join(blocks) or NO_ATTACHMENTS


def build_user_message(request: AnalysisRequest) -> str:
    return ANALYSIS_USER_PROMPT.format(
        prompt=request.raw_prompt,
        editor_context=request.editor_context,
        attachments=format_attachments(request.attachments)
    )


class PromptAnalyzer:
    """
    Runs one analysis per call. Holds no mutable state between calls, so
    concurrent calls are independent and may complete in any order.
    """

    def __init__(
        self,
        settings: Settings,
        credentials: CredentialProvider | None = None,
        adapters: dict[Provider, BackendAdapter] | None = None
    ):
        self.settings = settings
        self.adapters = adapters if adapters is not None else build_adapters(settings, credentials)

    def resolve_provider(self, override: Provider | str | None = None) -> Provider:
        name = override or self.settings.provider or Provider.GEMINI.value
        try:
            return Provider(name)
        except ValueError:
            raise ConfigurationError(f"Provider {name} not supported.")

    async def analyze(
        self,
        prompt: str,
        editor_context: str = "",
        attachments: Iterable[Attachment] = (),
        language: ResponseLanguage | str = ResponseLanguage.EN,
        provider: Provider | str | None = None
    ) -> AnalysisResult:
        """
        Analyze a prompt and return the critique, intent and improved prompt.

        Args:
            prompt: User-authored prompt; may be empty only with attachments
            editor_context: Opaque editor context blob
            attachments: Realized attachments, in assembly order
            language: Response language directive (en or es)
            provider: Overrides the configured provider

        Returns:
            AnalysisResult (degraded, never absent, when the response is malformed)

        Raises:
            ConfigurationError: Missing credential or unsupported provider
            ProviderError: Network, HTTP, SDK or timeout failure
        """
        selected = self.resolve_provider(provider)
        adapter = self.adapters.get(selected)
        if adapter is None:
            raise ConfigurationError(f"Provider {selected.value} not supported.")

        credential = self.settings.credential_for(selected.value)
        if credential is None and adapter.requires_static_credential:
            raise ConfigurationError(
                f"API Key for {selected.value} is missing. Please set it in settings."
            )

        request = AnalysisRequest(
            raw_prompt=prompt,
            editor_context=editor_context,
            attachments=list(attachments),
            response_language=language,
            provider=selected
        )

        system_prompt = build_system_prompt(request.response_language)
        user_message = build_user_message(request)

        logger.info(f"Analyzing prompt: provider={selected.value}, "
                    f"attachments={len(request.attachments)}, prompt={prompt[:80]!r}")

        try:
            text = await asyncio.wait_for(
                adapter.send_and_get_text(system_prompt, user_message, credential),
                timeout=self.settings.request_timeout
            )
            logger.debug(f"LLM raw response:\n{text}")
            result = parse_strict(text) if adapter.strict_json else normalize_response(text)
        except ConfigurationError as e:
            raise ConfigurationError(f"AI Error ({selected.value}): {e}") from e
        except ProviderError:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"{selected.value} timed out after {self.settings.request_timeout}s")
            raise ProviderError(
                selected.value, f"Request timed out after {self.settings.request_timeout:g}s"
            ) from e
        except Exception as e:
            logger.error(f"{selected.value} request failed: {e}")
            raise ProviderError(selected.value, str(e)) from e

        logger.info(f"Analysis complete: intent={result.intent.value}")
        return result
