import asyncio
import json

import pytest

from prompt_improver.errors import ConfigurationError, ProviderError
from prompt_improver.schemas import Attachment, AttachmentKind, Intent, Provider
from prompt_improver.services.analysis import (
    PromptAnalyzer,
    build_system_prompt,
    format_attachments,
)
from prompt_improver.services.credentials import NoSessionCredentialProvider
from prompt_improver.services.providers import GeminiAdapter

RESPONSE = {
    "critique": "Missing constraints",
    "improvedPrompt": "Context: Python service. Objective: fix the bug. Constraints: no API change. Output Format: a patch.",
    "intent": "EXECUTION",
    "actionPlan": "1. Locate bug. 2. Patch.",
}


def _analyzer(settings, adapter):
    return PromptAnalyzer(settings, adapters={Provider(adapter.name): adapter})


def test_anthropic_scenario_returns_structure_unchanged(make_settings, fake_adapter):
    settings = make_settings(provider="anthropic", anthropic_api_key="sk-ant-test")
    adapter = fake_adapter("anthropic", response=json.dumps(RESPONSE))

    result = asyncio.run(_analyzer(settings, adapter).analyze("fix this bug"))

    assert result.model_dump(by_alias=True) == RESPONSE
    assert adapter.calls[0]["credential"] == "sk-ant-test"


def test_missing_static_key_fails_before_dispatch(make_settings, fake_adapter):
    settings = make_settings(provider="openai")
    adapter = fake_adapter("openai", response="{}", strict_json=True)

    with pytest.raises(ConfigurationError) as exc_info:
        asyncio.run(_analyzer(settings, adapter).analyze("fix this bug"))

    assert "API Key" in str(exc_info.value)
    assert exc_info.value.is_missing_api_key
    assert adapter.calls == []


def test_gemini_without_key_or_session_is_a_configuration_error(make_settings):
    settings = make_settings(provider="gemini")
    adapter = GeminiAdapter(settings, NoSessionCredentialProvider())

    with pytest.raises(ConfigurationError) as exc_info:
        asyncio.run(_analyzer(settings, adapter).analyze("fix this bug"))

    message = str(exc_info.value)
    assert message.startswith("AI Error (gemini): ")
    assert "API Key for gemini is missing" in message
    assert "no Google session found" in message


def test_session_providers_dispatch_without_a_static_key(make_settings, fake_adapter):
    settings = make_settings(provider="github")
    adapter = fake_adapter("github", response=json.dumps(RESPONSE), requires_static_credential=False)

    result = asyncio.run(_analyzer(settings, adapter).analyze("fix this bug"))

    assert result.intent == Intent.EXECUTION
    assert adapter.calls[0]["credential"] is None


def test_adapter_failures_are_wrapped_with_provider_name(make_settings, fake_adapter):
    settings = make_settings(provider="anthropic", anthropic_api_key="key")
    adapter = fake_adapter("anthropic", error=RuntimeError("connection reset"))

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(_analyzer(settings, adapter).analyze("fix this bug"))

    assert str(exc_info.value) == "AI Error (anthropic): connection reset"
    assert exc_info.value.provider == "anthropic"
    assert exc_info.value.detail == "connection reset"


def test_provider_errors_are_not_double_wrapped(make_settings, fake_adapter):
    settings = make_settings(provider="gemini", gemini_api_key="key")
    adapter = fake_adapter("gemini", error=ProviderError("gemini", "Gemini API Error: 403 Forbidden - denied"))

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(_analyzer(settings, adapter).analyze("fix this bug"))

    assert str(exc_info.value) == "AI Error (gemini): Gemini API Error: 403 Forbidden - denied"


def test_strict_backend_rejects_fenced_output(make_settings, fake_adapter):
    settings = make_settings(provider="openai", openai_api_key="key")
    fenced = "```json\n" + json.dumps(RESPONSE) + "\n```"
    adapter = fake_adapter("openai", response=fenced, strict_json=True)

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(_analyzer(settings, adapter).analyze("fix this bug"))

    assert str(exc_info.value).startswith("AI Error (openai): ")


def test_forgiving_backend_degrades_malformed_output(make_settings, fake_adapter):
    settings = make_settings(provider="github", github_token="ghp_test")
    adapter = fake_adapter("github", response="I cannot help with that.", requires_static_credential=False)

    result = asyncio.run(_analyzer(settings, adapter).analyze("fix this bug"))

    assert result.intent == Intent.QUESTION
    assert "I cannot help with that." in result.critique


def test_slow_backend_times_out(make_settings):
    settings = make_settings(provider="anthropic", anthropic_api_key="key", request_timeout=0.01)

    class SlowAdapter:
        name = "anthropic"
        requires_static_credential = True
        strict_json = False

        async def send_and_get_text(self, system_prompt, user_message, credential):
            await asyncio.sleep(5)
            return "{}"

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(_analyzer(settings, SlowAdapter()).analyze("fix this bug"))

    assert "timed out" in str(exc_info.value)


def test_unsupported_provider(make_settings, fake_adapter):
    settings = make_settings(provider="mistral")
    with pytest.raises(ConfigurationError, match="Provider mistral not supported."):
        asyncio.run(_analyzer(settings, fake_adapter("gemini")).analyze("hi"))


def test_provider_override_beats_settings(make_settings, fake_adapter):
    settings = make_settings(provider="gemini", openai_api_key="key")
    adapter = fake_adapter("openai", response=json.dumps(RESPONSE), strict_json=True)

    result = asyncio.run(_analyzer(settings, adapter).analyze("fix this bug", provider="openai"))

    assert result.critique == RESPONSE["critique"]


def test_empty_prompt_requires_attachments(make_settings, fake_adapter):
    settings = make_settings(provider="anthropic", anthropic_api_key="key")
    adapter = fake_adapter("anthropic", response=json.dumps(RESPONSE))
    analyzer = _analyzer(settings, adapter)

    with pytest.raises(ValueError):
        asyncio.run(analyzer.analyze("   "))

    attachment = Attachment(name="notes.md", kind=AttachmentKind.FILE, content="# Notes")
    result = asyncio.run(analyzer.analyze("", attachments=[attachment]))
    assert result.intent == Intent.EXECUTION


def test_user_message_assembly(make_settings, fake_adapter):
    settings = make_settings(provider="anthropic", anthropic_api_key="key")
    adapter = fake_adapter("anthropic", response=json.dumps(RESPONSE))
    attachments = [
        Attachment(name="a.py", kind=AttachmentKind.FILE, content="print('a')"),
        Attachment(name="a.py", kind=AttachmentKind.FILE, content="print('b')"),
    ]

    asyncio.run(_analyzer(settings, adapter).analyze(
        "refactor this", editor_context="EDITOR BLOB", attachments=attachments, language="es"
    ))

    call = adapter.calls[0]
    assert call["user_message"] == (
        "User Prompt: refactor this\n\n"
        "Context from Editor:\nEDITOR BLOB\n\n"
        "Attached Files:\n"
        "--- File: a.py ---\nprint('a')\n--- End of a.py ---\n\n"
        "--- File: a.py ---\nprint('b')\n--- End of a.py ---"
    )
    assert "IMPORTANTE: Responde siempre en español." in call["system_prompt"]


def test_no_attachments_placeholder():
    assert format_attachments([]) == "No files attached"


def test_system_prompt_defines_intents_and_framework():
    prompt = build_system_prompt("en")
    for term in ("EXECUTION:", "CONTEXT:", "QUESTION:", "Context:", "Objective:",
                 "Constraints:", "Output Format:", "IMPORTANT: Always respond in English."):
        assert term in prompt
    assert '"improvedPrompt": "string"' in prompt
