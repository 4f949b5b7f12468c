"""
FastAPI app exposing the crosscheck HTTP boundary.

POST /api/crosscheck
Header: x-crosscheck-key: <CROSSCHECK_KEY>
Body: { question, jurisdiction?, facts?, constraints?, timeoutMs?, maxTokens? }
"""
import json
import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from config.config import CrosscheckConfig, load_config
from crosscheck import __version__
from crosscheck.boundary import shape_request
from crosscheck.errors import CrosscheckError, InvalidRequestError
from crosscheck.orchestrator import CrosscheckOrchestrator

logger = logging.getLogger(__name__)


def _mask(val: str) -> str:
    if not val:
        return "(empty)"
    if len(val) <= 8:
        return "***"
    return val[:4] + "..." + val[-4:]


def get_config() -> CrosscheckConfig:
    """Configuration is re-read for every request."""
    return load_config()


def require_key(
    x_crosscheck_key: str = Header(default=""),
    config: CrosscheckConfig = Depends(get_config),
) -> CrosscheckConfig:
    """Reject the request before anything is built from the configuration."""
    if not config.crosscheck_key:
        raise HTTPException(status_code=500, detail="Missing env var: CROSSCHECK_KEY")
    if x_crosscheck_key != config.crosscheck_key:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return config


def get_orchestrator(config: CrosscheckConfig = Depends(require_key)) -> CrosscheckOrchestrator:
    return CrosscheckOrchestrator(config=config, verbose=config.debug)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Crosscheck Orchestrator",
        description="Multi-provider LLM consensus for factual/legal questions",
        version=__version__,
    )

    @app.on_event("startup")
    async def startup():
        """Log configuration (mask secrets)."""
        config = load_config()
        logger.info("=== Crosscheck Orchestrator Starting ===")
        logger.info(f"  openai model      : {config.openai.model_id}")
        logger.info(f"  openai api key    : {_mask(config.openai.api_key or '')}")
        logger.info(f"  gemini model      : {config.gemini.model_id} (enabled={config.gemini_enabled})")
        logger.info(f"  gemini api key    : {_mask(config.gemini.api_key or '')}")
        logger.info(f"  openrouter models : {config.openrouter_models}")
        logger.info(f"  openrouter api key: {_mask(config.openrouter.api_key or '')}")
        logger.info(f"  synthesis model   : {config.synthesis.model_id}")
        if not config.crosscheck_key:
            logger.warning("CROSSCHECK_KEY is empty -- /api/crosscheck will reject every request!")

    @app.exception_handler(InvalidRequestError)
    async def invalid_request(request: Request, exc: InvalidRequestError):
        return JSONResponse({"ok": False, "error": str(exc)}, status_code=400)

    @app.exception_handler(CrosscheckError)
    async def crosscheck_error(request: Request, exc: CrosscheckError):
        logger.error(f"Crosscheck failed: {exc}")
        return JSONResponse({"ok": False, "error": str(exc)}, status_code=500)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "Crosscheck Orchestrator"}

    @app.post("/api/crosscheck")
    async def crosscheck(
        request: Request,
        config: CrosscheckConfig = Depends(require_key),
        orchestrator: CrosscheckOrchestrator = Depends(get_orchestrator),
    ):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = {}

        result = await orchestrator.run(shape_request(body, config))

        return JSONResponse(result.model_dump(mode="json"))

    return app


app = create_app()
