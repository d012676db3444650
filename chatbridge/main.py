"""FastAPI entry point: exposes the provider dispatcher over an OpenAI-style HTTP API."""

import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import anthropic
import openai
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .exceptions import LLMError
from .routes import chat, embeddings, models
from .services.llm_manager import LLMManager

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _log_file_path() -> Path:
    """LOG_DIR is taken relative to the repository root unless absolute."""
    log_dir = Path(settings.LOG_DIR)
    if not os.path.isabs(settings.LOG_DIR):
        log_dir = Path(__file__).parent.parent / log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / settings.LOG_FILE


def setup_logging() -> Optional[str]:
    """Send logs to the console, and to a rotating file when LOG_TO_FILE is set.

    Returns the log file path, if any.
    """
    level = logging.DEBUG if settings.DEBUG_MODE else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT)

    handlers = [logging.StreamHandler()]
    log_file = None
    if settings.LOG_TO_FILE:
        log_file = _log_file_path()
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # Vendor SDKs log every HTTP request at INFO through httpx
    if not settings.DEBUG_MODE:
        logging.getLogger("httpx").setLevel(logging.WARNING)
    # Payload dumps go through their own logger, gated by DEBUG_LOG_PAYLOADS
    logging.getLogger("debug.payloads").setLevel(
        logging.DEBUG if settings.DEBUG_LOG_PAYLOADS else logging.WARNING
    )

    return str(log_file) if log_file else None


log_file_path = setup_logging()
logger = logging.getLogger(__name__)

# Providers and models are read once; adapters defer credential checks to call time
llm_manager = LLMManager.from_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    chat.init_services(llm_manager)
    logger.info(
        f"chatbridge listening on {settings.HOST}:{settings.PORT} "
        f"(providers: {', '.join(llm_manager.registry.ids()) or 'none'})"
    )
    if log_file_path:
        logger.info(f"Writing logs to {log_file_path}")
    yield
    logger.info("chatbridge stopped")


app = FastAPI(
    title="chatbridge",
    description="One chat-completion contract over Anthropic, OpenAI and OpenAI-compatible APIs",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (chat.router, embeddings.router, models.router):
    app.include_router(router, prefix="/v1")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Service name, version and route map."""
    return {
        "name": "chatbridge",
        "version": app.version,
        "description": "Vendor-neutral chat completions",
        "endpoints": {
            "chat": "/v1/chat/completions",
            "embeddings": "/v1/embeddings",
            "models": "/v1/models",
            "health": "/health",
        },
        "documentation": app.docs_url,
    }


@app.exception_handler(LLMError)
async def llm_error_handler(request: Request, exc: LLMError):
    logger.warning(f"{request.url.path} failed with {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(anthropic.APIStatusError)
@app.exception_handler(openai.APIStatusError)
async def vendor_error_handler(request: Request, exc):
    """Vendor HTTP failures keep the vendor's status and body."""
    logger.error(f"{request.url.path} vendor error {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.message,
                "type": "api_error",
                "vendor_error": exc.body,
            }
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": {"message": str(exc), "type": "server_error"}},
    )


def main():
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "chatbridge.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG_MODE,
    )


if __name__ == "__main__":
    main()
