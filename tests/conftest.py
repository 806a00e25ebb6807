import sys
from pathlib import Path

import pytest

# Make 'backend' importable when running tests without installing the package
PROJECT_ROOT = Path(__file__).resolve().parents[1]
BACKEND_PATH = PROJECT_ROOT / "backend"
if str(BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(BACKEND_PATH))

from prompt_improver.config import Settings  # noqa: E402
from prompt_improver.schemas import Attachment, AttachmentKind  # noqa: E402


class FakeAdapter:
    """Records calls and returns a canned response or raises a canned error."""

    def __init__(
        self,
        name: str,
        response: str = "",
        error: Exception | None = None,
        requires_static_credential: bool = True,
        strict_json: bool = False,
    ):
        self.name = name
        self.response = response
        self.error = error
        self.requires_static_credential = requires_static_credential
        self.strict_json = strict_json
        self.calls: list[dict] = []

    async def send_and_get_text(self, system_prompt, user_message, credential):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_message": user_message,
            "credential": credential,
        })
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_settings():
    """Settings isolated from the environment and any .env file."""
    def _make(**overrides) -> Settings:
        values = {
            "provider": "gemini",
            "gemini_api_key": "",
            "anthropic_api_key": "",
            "openai_api_key": "",
            "github_token": "",
            "session_auth_enabled": False,
            "token_limits": {},
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def file_attachment():
    def _make(name: str = "notes.txt", content: str = "hello") -> Attachment:
        return Attachment(name=name, kind=AttachmentKind.FILE, content=content)
    return _make


@pytest.fixture
def fake_adapter():
    return FakeAdapter
