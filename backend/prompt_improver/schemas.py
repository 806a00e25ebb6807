from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Provider(str, Enum):
    """Configured LLM backend."""
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GITHUB = "github"


class Intent(str, Enum):
    """Three-way classification of what a prompt is for."""
    EXECUTION = "EXECUTION"  # Wants code, file or command changes
    CONTEXT = "CONTEXT"      # Supplies information for later reference
    QUESTION = "QUESTION"    # Asks something without requesting changes


class ResponseLanguage(str, Enum):
    EN = "en"
    ES = "es"


class AttachmentKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"
    IMAGE = "image"


class Attachment(BaseModel):
    """
    A named blob supplied alongside the prompt.
    On the wire this is {name, type, data}; `content` is always realized text
    (a data URI for images).
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Display label, not guaranteed unique")
    kind: AttachmentKind = Field(..., alias="type")
    content: str = Field(default="", alias="data")


class AnalysisRequest(BaseModel):
    """Everything one analysis needs. Built and discarded within a single call."""
    raw_prompt: str = ""
    editor_context: str = ""
    attachments: list[Attachment] = Field(default_factory=list)
    response_language: ResponseLanguage = ResponseLanguage.EN
    provider: Provider = Provider.GEMINI

    @model_validator(mode="after")
    def require_prompt_or_attachments(self) -> "AnalysisRequest":
        if not self.raw_prompt.strip() and not self.attachments:
            raise ValueError("Prompt may be empty only when attachments are provided")
        return self


class AnalysisResult(BaseModel):
    """Structured critique returned for every analysis, degraded or not."""
    model_config = ConfigDict(populate_by_name=True)

    critique: str
    improved_prompt: str = Field(..., alias="improvedPrompt")
    intent: Intent = Intent.QUESTION
    action_plan: str | None = Field(default=None, alias="actionPlan")


# =============================================================================
# HTTP Schemas
# =============================================================================

class Diagnostic(BaseModel):
    """A single editor diagnostic. `line` is 0-based as the editor reports it."""
    line: int = Field(..., ge=0)
    severity: str = Field(default="error", description="error or warning")
    message: str


class EditorState(BaseModel):
    """Snapshot of the active editor, rendered into the context blob."""
    file_name: str
    language_id: str = "plaintext"
    content: str = ""
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    open_files: list[str] = Field(default_factory=list)


class AnalyzeRequest(BaseModel):
    """Request to analyze and improve a prompt."""
    prompt: str = Field(default="", description="User-authored prompt text")
    attachments: list[Attachment] = Field(default_factory=list)
    language: ResponseLanguage = ResponseLanguage.EN
    editor: EditorState | None = Field(default=None, description="Active editor snapshot")
    provider: Provider | None = Field(default=None, description="Overrides the configured provider")


class BudgetRequest(BaseModel):
    prompt: str = ""
    attachments: list[Attachment] = Field(default_factory=list)
    provider: str | None = None


class BudgetReport(BaseModel):
    """Client-side token estimate compared against a provider ceiling."""
    provider: str
    used: int
    limit: int
    over_limit: bool
    usage_percent: float


class AnalyzeResponse(BaseModel):
    """Analysis result plus the provider that produced it."""
    model_config = ConfigDict(populate_by_name=True)

    critique: str
    improved_prompt: str = Field(..., alias="improvedPrompt")
    intent: Intent
    action_plan: str | None = Field(default=None, alias="actionPlan")
    provider: str
    usage: BudgetReport


class ProviderInfo(BaseModel):
    name: str
    display_name: str
    model: str
    token_limit: int
    configured: bool = Field(..., description="Whether a static credential is set")
    active: bool


class AttachmentRequest(BaseModel):
    """Request to read a workspace path into an attachment record."""
    path: str = Field(..., min_length=1, description="Path relative to the workspace root")
    type: AttachmentKind = AttachmentKind.FILE
