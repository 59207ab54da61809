from fastapi import Request

from .config import Settings
from .services.generation import GenerationOrchestrator
from .services.sse import SSESessionManager


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_sse_manager(request: Request) -> SSESessionManager:
    return request.app.state.sse_manager


def get_orchestrator(request: Request) -> GenerationOrchestrator:
    return request.app.state.orchestrator
