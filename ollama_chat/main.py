"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from ollama_chat.api.v1.chat_router import router as chat_router
from ollama_chat.api.v1.model_router import router as model_router
from ollama_chat.api.v1.session_router import router as session_router
from ollama_chat.core.config import settings
from ollama_chat.core.database import build_engine, build_session_factory, init_db
from ollama_chat.core.exceptions import (
    AppException,
    app_exception_handler,
    validation_exception_handler,
)
from ollama_chat.dependencies import build_chat_commands
from ollama_chat.schemas.response_schema import ApiResponse, success_response

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database and wire the command surface for the process."""
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.app.env,
        database=str(settings.database.path),
        ollama_url=settings.ollama.base_url,
    )
    engine = build_engine(settings.database)
    await init_db(engine)
    commands = build_chat_commands(settings, build_session_factory(engine))
    if settings.chat.resume_last_session:
        await commands.restore_last_session()
    app.state.chat_commands = commands
    yield
    await commands.aclose()
    await engine.dispose()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app.name,
    description="Local backend for chatting with models served by Ollama",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.app.debug,
)

# Exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

# Only the desktop shell's local origins may call the API from a browser.
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"^(tauri|http)://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=ApiResponse[dict])
async def health_check() -> dict:
    """Health check endpoint."""
    return success_response({"status": "healthy"})


@app.get("/", response_model=ApiResponse[dict])
async def root() -> dict:
    """Root endpoint."""
    return success_response(
        {
            "app": settings.app.name,
            "version": "0.1.0",
            "docs": "/docs",
        }
    )


# Register routers
app.include_router(session_router)
app.include_router(model_router)
app.include_router(chat_router)
