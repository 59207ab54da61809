import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from ..dependencies import get_orchestrator, get_sse_manager
from ..schemas import ConnectedEvent, GenerateRequest, InfoEvent
from ..services.generation import GenerationOrchestrator
from ..services.sse import SSESession, SSESessionManager, event_stream

log = logging.getLogger(__name__)

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


@router.post("/start-generation")
async def start_generation(
    request: Request, orchestrator: GenerationOrchestrator = Depends(get_orchestrator)
):
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Request body must be JSON"})
    if not isinstance(body, dict) or not str(body.get("prompt") or "").strip():
        return JSONResponse(status_code=400, content={"error": "Prompt is required"})
    try:
        data = GenerateRequest.model_validate(body)
    except ValidationError as exc:
        errors = "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors())
        return JSONResponse(status_code=400, content={"error": errors})

    generation_id = orchestrator.start(data)
    return JSONResponse(
        status_code=202,
        content={"message": "Generation started", "generationId": generation_id},
    )


@router.get("/generate-sse")
async def generate_sse(manager: SSESessionManager = Depends(get_sse_manager)):
    session = manager.register(SSESession())
    manager.send(session.id, ConnectedEvent(client_id=session.id))
    manager.send(
        session.id, InfoEvent(message="Connected to Brix.AI server. Ready to generate!")
    )
    return StreamingResponse(
        event_stream(manager, session),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
