"""
API routes - prompt analysis, token budget and attachment loading.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException

from prompt_improver.config import Settings, get_settings
from prompt_improver.errors import BudgetExceededError, ConfigurationError, ProviderError
from prompt_improver.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    Attachment,
    AttachmentRequest,
    BudgetReport,
    BudgetRequest,
    Provider,
    ProviderInfo,
)
from prompt_improver.services.analysis import PromptAnalyzer
from prompt_improver.services.attachments import load_attachment
from prompt_improver.services.budget import check_budget, display_name, enforce_budget, limit_for
from prompt_improver.services.context import gather_editor_context
from prompt_improver.services.credentials import CliSessionCredentialProvider, NoSessionCredentialProvider

logger = logging.getLogger(__name__)
router = APIRouter()


def get_analyzer(settings: Settings = Depends(get_settings)) -> PromptAnalyzer:
    """Analyzer wired with the configured session strategy."""
    credentials = (
        CliSessionCredentialProvider() if settings.session_auth_enabled
        else NoSessionCredentialProvider()
    )
    return PromptAnalyzer(settings, credentials)


@router.get("/providers", response_model=list[ProviderInfo])
async def list_providers(settings: Settings = Depends(get_settings)) -> list[ProviderInfo]:
    """Every supported provider with its limit, model and credential status."""
    return [
        ProviderInfo(
            name=p.value,
            display_name=display_name(p.value),
            model=settings.model_for(p.value),
            token_limit=limit_for(p.value, settings.token_limits),
            configured=settings.credential_for(p.value) is not None,
            active=p.value == settings.provider
        )
        for p in Provider
    ]


@router.post("/budget", response_model=BudgetReport)
async def budget(request: BudgetRequest, settings: Settings = Depends(get_settings)) -> BudgetReport:
    """Estimate request size against the provider ceiling without calling a backend."""
    provider = request.provider or settings.provider
    return check_budget(provider, request.prompt, request.attachments, settings.token_limits)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    request: AnalyzeRequest,
    settings: Settings = Depends(get_settings),
    analyzer: PromptAnalyzer = Depends(get_analyzer)
) -> AnalyzeResponse:
    """
    Critique a prompt, classify its intent and return an improved version.

    The token budget is checked here, before the analyzer runs; an over-budget
    request never reaches a backend.
    """
    if not request.prompt.strip() and not request.attachments:
        raise HTTPException(status_code=422, detail="Prompt is empty and no attachments were provided")

    provider = request.provider.value if request.provider else settings.provider
    logger.info(f"Analyze: provider={provider}, language={request.language.value}, "
                f"attachments={len(request.attachments)}")

    try:
        usage = enforce_budget(provider, request.prompt, request.attachments, settings.token_limits)
    except BudgetExceededError as e:
        raise HTTPException(status_code=413, detail=str(e))

    try:
        result = await analyzer.analyze(
            prompt=request.prompt,
            editor_context=gather_editor_context(request.editor),
            attachments=request.attachments,
            language=request.language,
            provider=provider
        )
    except ConfigurationError as e:
        logger.warning(f"Configuration error: {e}")
        raise HTTPException(
            status_code=400,
            detail={"message": str(e), "settings_hint": e.is_missing_api_key}
        )
    except ProviderError as e:
        logger.error(f"Provider error: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return AnalyzeResponse(
        critique=result.critique,
        improved_prompt=result.improved_prompt,
        intent=result.intent,
        action_plan=result.action_plan,
        provider=provider,
        usage=usage
    )


@router.post("/attachments", response_model=Attachment)
async def attach(request: AttachmentRequest, settings: Settings = Depends(get_settings)) -> Attachment:
    """Read a workspace file, folder or image into an attachment record."""
    try:
        return load_attachment(settings.workspace_root, request.path, request.type)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (NotADirectoryError, IsADirectoryError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
