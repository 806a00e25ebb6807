"""
Interactive-session credentials.

Obtaining a bearer token may prompt or shell out, so it is modeled as an
injected async capability. Adapters ask for a token with a scope list and get
back None when no session is available.
"""
import asyncio
import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

GEMINI_SESSION_SCOPES = (
    "https://www.googleapis.com/auth/generative-language",
    "email",
    "profile",
)
GITHUB_SESSION_SCOPES = ("read:user", "user:email")


@runtime_checkable
class CredentialProvider(Protocol):
    async def get_or_prompt(self, provider: str, scopes: tuple[str, ...]) -> str | None:
        ...


class NoSessionCredentialProvider:
    """Never has a session. Static keys are the only credential source."""

    async def get_or_prompt(self, provider: str, scopes: tuple[str, ...]) -> str | None:
        return None


class StaticSessionCredentialProvider:
    """Serves pre-obtained session tokens keyed by provider."""

    def __init__(self, tokens: dict[str, str]):
        self._tokens = dict(tokens)

    async def get_or_prompt(self, provider: str, scopes: tuple[str, ...]) -> str | None:
        return self._tokens.get(provider) or None


class CliSessionCredentialProvider:
    """
    Reads a bearer token from a locally signed-in CLI:
    - github: `gh auth token`
    - gemini: `gcloud auth print-access-token --scopes=...`

    A missing binary, non-zero exit or empty output means no session.
    """

    def __init__(self, timeout: float = 15.0):
        self.timeout = timeout

    def _command(self, provider: str, scopes: tuple[str, ...]) -> list[str] | None:
        if provider == "github":
            return ["gh", "auth", "token"]
        if provider == "gemini":
            # gcloud wants full URLs; identity scopes map to the userinfo ones
            full_scopes = [
                s if s.startswith("https://") else f"https://www.googleapis.com/auth/userinfo.{s}"
                for s in scopes
            ]
            return ["gcloud", "auth", "print-access-token", f"--scopes={','.join(full_scopes)}"]
        return None

    async def get_or_prompt(self, provider: str, scopes: tuple[str, ...]) -> str | None:
        command = self._command(provider, scopes)
        if command is None:
            return None

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except FileNotFoundError:
            logger.debug(f"No session CLI for {provider}: {command[0]} not installed")
            return None

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.warning(f"{command[0]} timed out while fetching a {provider} session token")
            return None

        if proc.returncode != 0:
            logger.info(f"No {provider} session: {command[0]} exited {proc.returncode}")
            logger.debug(stderr.decode(errors="replace").strip())
            return None

        token = stdout.decode().strip()
        return token or None
