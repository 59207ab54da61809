import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .config import Settings, env_flag, load_settings
from .routes.chat import router as chat_router
from .routes.generate import router as generate_router
from .routes.info import router as info_router
from .services.generation import GenerationOrchestrator
from .services.llm import ModelClient
from .services.sse import SSESessionManager

log = logging.getLogger(__name__)


def configure_logging() -> None:
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def create_app(
    settings: Optional[Settings] = None,
    *,
    sse_manager: Optional[SSESessionManager] = None,
    orchestrator: Optional[GenerationOrchestrator] = None,
) -> FastAPI:
    # Load environment variables from .env if present
    if not env_flag("DOTENV_DISABLED"):
        load_dotenv()
    configure_logging()

    settings = settings or load_settings()
    sse_manager = sse_manager or SSESessionManager(heartbeat_interval=settings.heartbeat_interval)
    orchestrator = orchestrator or GenerationOrchestrator(
        sse_manager, ModelClient(settings), settings
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("brix: model=%s heartbeat=%.0fs", settings.openai_model, settings.heartbeat_interval)
        yield
        await orchestrator.close()
        sse_manager.close_all()

    app = FastAPI(title="Brix.AI Website Generator API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.sse_manager = sse_manager
    app.state.orchestrator = orchestrator

    # CORS
    cors_origins = settings.cors_allow_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            dur_ms = int((time.time() - start) * 1000)
            log.info(
                "method=%s path=%s status=%s dur_ms=%d",
                request.method,
                request.url.path,
                getattr(response, "status_code", "?"),
                dur_ms,
            )

    # Routers
    app.include_router(info_router)
    app.include_router(generate_router)
    app.include_router(chat_router)

    return app
