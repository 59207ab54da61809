from fastapi import APIRouter, Depends

from ..dependencies import get_sse_manager
from ..services.catalog import list_templates
from ..services.sse import SSESessionManager
from ..services.themes import list_themes

router = APIRouter()

VERSION = "1.0.0"

ENDPOINTS = [
    {"path": "/", "method": "GET", "description": "Server status"},
    {"path": "/test", "method": "GET", "description": "Test endpoint"},
    {"path": "/color-schemes", "method": "GET", "description": "List available color schemes"},
    {"path": "/templates", "method": "GET", "description": "List available website templates"},
    {"path": "/generate-sse", "method": "GET", "description": "SSE endpoint for real-time updates"},
    {"path": "/start-generation", "method": "POST", "description": "Start website generation"},
    {"path": "/chat", "method": "POST", "description": "Chat with the AI about website creation"},
]


@router.get("/")
async def root():
    return {"status": "online", "endpoints": ENDPOINTS, "version": VERSION}


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/test")
async def server_test(manager: SSESessionManager = Depends(get_sse_manager)):
    return {
        "status": "ok",
        "message": "Server is running correctly",
        "version": VERSION,
        "features": ["SSE", "Website Generation", "Chat", "Templates", "Color Schemes"],
        "activeConnections": len(manager),
    }


@router.get("/color-schemes")
async def color_schemes():
    return {"themes": list_themes()}


@router.get("/templates")
async def templates():
    return {"templates": list_templates()}
