import json
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from ..config import Settings
from ..dependencies import get_settings
from ..schemas import ChatRequest, ChatTurn
from ..services.chat import chat_reply

router = APIRouter()

_TURNS = TypeAdapter(List[ChatTurn])


async def _respond(message: str, context: List[ChatTurn], settings: Settings):
    if not message or not message.strip():
        return JSONResponse(status_code=400, content={"error": "Message is required"})
    response = await chat_reply(message.strip(), context, settings=settings)
    return {"response": response, "timestamp": datetime.now(timezone.utc).isoformat()}


@router.post("/chat")
async def chat(req: ChatRequest, settings: Settings = Depends(get_settings)):
    return await _respond(req.message, req.conversation_context, settings)


@router.get("/chat")
async def chat_get(
    message: str = "",
    conversationContext: Optional[str] = None,
    settings: Settings = Depends(get_settings),
):
    context: List[ChatTurn] = []
    if conversationContext:
        try:
            context = _TURNS.validate_python(json.loads(conversationContext))
        except (ValueError, ValidationError):
            return JSONResponse(status_code=400, content={"error": "conversationContext must be a JSON list"})
    return await _respond(message, context, settings)
