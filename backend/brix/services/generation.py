import asyncio
import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..config import Settings, load_settings
from ..schemas import (
    CompleteEvent,
    CompletionEvent,
    ErrorEvent,
    GenerateRequest,
    SiteResult,
    StepEvent,
)
from .assembler import build_content_prompt, build_site_prompt, finalize_site, site_meta
from .llm import ModelClient
from .normalizer import normalize
from .sse import SSESessionManager
from .themes import get_palette, resolve_theme

log = logging.getLogger(__name__)


class GenerationOrchestrator:
    """Runs website generations in the background and reports over SSE.

    ``start`` returns as soon as the task is scheduled. Every event a run
    emits carries its generation id, but delivery is a broadcast to all live
    sessions.
    """

    def __init__(
        self,
        manager: SSESessionManager,
        model_client: Optional[ModelClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.manager = manager
        self.settings = settings or load_settings()
        self.model_client = model_client or ModelClient(self.settings)
        self.tasks: Dict[str, "asyncio.Task[Optional[str]]"] = {}

    def start(self, request: GenerateRequest) -> str:
        generation_id = uuid.uuid4().hex
        task = asyncio.create_task(self.run(generation_id, request))
        self.tasks[generation_id] = task
        task.add_done_callback(lambda _: self.tasks.pop(generation_id, None))
        log.info("generation %s: started (%d running)", generation_id, len(self.tasks))
        return generation_id

    def _step(self, generation_id: str, message: str, percentage: int) -> None:
        self.manager.broadcast(
            StepEvent(generation_id=generation_id, message=message, percentage=percentage)
        )

    async def run(self, generation_id: str, request: GenerateRequest) -> Optional[str]:
        try:
            self._step(generation_id, "Starting generation...", 5)
            theme = resolve_theme(request.prompt)
            palette = get_palette(theme)
            log.info("generation %s: theme=%s type=%s", generation_id, theme, request.website_type.value)

            self._step(generation_id, "Generating website content...", 15)
            raw_content = await self.model_client.complete(build_content_prompt(request, theme))
            content = normalize(raw_content)
            meta = site_meta(content)
            self._step(generation_id, "Website content generated", 40)

            self._step(generation_id, "Building website layout...", 55)
            raw_site = await self.model_client.complete(
                build_site_prompt(content, theme, palette), temperature=0.5
            )
            self._step(generation_id, "Applying theme and finalizing...", 85)
            code = finalize_site(raw_site, meta, palette)

            metadata = self._metadata(generation_id, theme, meta, content)
            self._step(generation_id, "Website generated successfully!", 100)
            self.manager.broadcast(
                CompletionEvent(
                    generation_id=generation_id,
                    data=SiteResult(code=code, content=content, metadata=metadata),
                )
            )
            self.manager.broadcast(
                CompleteEvent(generation_id=generation_id, code=code, content=content, metadata=metadata)
            )
            log.info("generation %s: complete (%d bytes)", generation_id, len(code))
            return code
        except Exception as exc:
            log.exception("generation %s: failed", generation_id)
            self.manager.broadcast(
                ErrorEvent(
                    generation_id=generation_id,
                    message=f"Website generation failed: {exc}",
                    details=f"{type(exc).__name__}: {exc}",
                    stack=traceback.format_exc() if self.settings.debug else None,
                )
            )
            return None

    @staticmethod
    def _metadata(generation_id: str, theme: str, meta: Dict[str, str], content: Any) -> Dict[str, Any]:
        sections = content.get("sections") if isinstance(content, dict) else None
        return {
            "generationId": generation_id,
            "theme": theme,
            "title": meta["title"],
            "description": meta["description"],
            "sectionCount": len(sections) if isinstance(sections, list) else 0,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        }

    async def close(self) -> None:
        tasks = list(self.tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
