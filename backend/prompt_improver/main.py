import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompt_improver.api.routes import router
from prompt_improver.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

# Set DEBUG level for our app modules
logging.getLogger("prompt_improver").setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)


app = FastAPI(
    title="Prompt Improver API",
    description="Critiques prompts against the 4-part framework and returns an improved version",
    version="0.1.0"
)

# CORS middleware for the editor webview
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1", tags=["prompt-analysis"])


@app.on_event("startup")
async def startup_event():
    settings = get_settings()
    logger.info("Starting Prompt Improver API")
    logger.info(f"Provider: {settings.provider}, model: {settings.model_for(settings.provider)}")
    logger.info(f"Session auth: {'enabled' if settings.session_auth_enabled else 'disabled'}")
    logger.info(f"Workspace root: {settings.workspace_root.resolve()}")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "provider": settings.provider,
        "models": {
            "gemini": settings.model_gemini,
            "anthropic": settings.model_anthropic,
            "openai": settings.model_openai,
            "github": settings.model_github
        }
    }
