"""Live SSE connections and best-effort broadcast.

Each browser connected to ``/generate-sse`` is an ``SSESession`` held in the
manager's registry. Frames are pushed onto the session's bounded queue and
drained by ``event_stream``, the generator served by the route. A write that
fails, from a broadcast or a heartbeat, evicts the session; nothing is
buffered for clients that are not connected.
"""

import asyncio
import logging
import secrets
import time
from typing import AsyncGenerator, Dict, Optional, Union

from ..schemas import SSEEvent

log = logging.getLogger(__name__)

HEARTBEAT_FRAME = ": heartbeat\n\n"
DEFAULT_QUEUE_SIZE = 256


class SessionClosed(RuntimeError):
    pass


def new_session_id() -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}"


class SSESession:
    def __init__(self, session_id: Optional[str] = None, *, max_queue: int = DEFAULT_QUEUE_SIZE):
        self.id = session_id or new_session_id()
        self.queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue(maxsize=max_queue)
        self.heartbeat_task: Optional["asyncio.Task[None]"] = None
        self.closed = False

    def write(self, frame: str) -> None:
        if self.closed:
            raise SessionClosed(f"session {self.id} is closed")
        # QueueFull propagates: a client that stopped reading gets evicted
        self.queue.put_nowait(frame)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.queue.full():
            # A reader this far behind is being dropped anyway
            while not self.queue.empty():
                self.queue.get_nowait()
        self.queue.put_nowait(None)


class SSESessionManager:
    def __init__(self, heartbeat_interval: float = 30.0):
        self.heartbeat_interval = heartbeat_interval
        self._sessions: Dict[str, SSESession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> Optional[SSESession]:
        return self._sessions.get(session_id)

    def register(self, session: SSESession) -> SSESession:
        self._sessions[session.id] = session
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None and self.heartbeat_interval > 0:
            session.heartbeat_task = loop.create_task(self._heartbeat_loop(session))
        log.info("sse: client %s connected (%d live)", session.id, len(self._sessions))
        return session

    def unregister(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        task = session.heartbeat_task
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()
        session.close()
        log.info("sse: client %s disconnected (%d live)", session_id, len(self._sessions))

    def send(self, session_id: str, event: Union[SSEEvent, str]) -> bool:
        """Write to one session; evicts it on failure."""
        session = self._sessions.get(session_id)
        if session is None:
            return False
        return self._deliver(session, _frame(event))

    def broadcast(self, event: Union[SSEEvent, str]) -> int:
        frame = _frame(event)
        delivered = 0
        for session in list(self._sessions.values()):
            if self._deliver(session, frame):
                delivered += 1
        log.debug("sse: broadcast delivered to %d clients", delivered)
        if not self._sessions:
            log.warning("sse: no active connections to deliver to")
        return delivered

    def heartbeat(self, session_id: str) -> bool:
        return self.send(session_id, HEARTBEAT_FRAME)

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.unregister(session_id)

    def _deliver(self, session: SSESession, frame: str) -> bool:
        try:
            session.write(frame)
        except Exception as exc:
            log.warning("sse: write to client %s failed, evicting: %s", session.id, exc)
            self.unregister(session.id)
            return False
        return True

    async def _heartbeat_loop(self, session: SSESession) -> None:
        while session.id in self._sessions:
            await asyncio.sleep(self.heartbeat_interval)
            if not self.heartbeat(session.id):
                return


def _frame(event: Union[SSEEvent, str]) -> str:
    return event if isinstance(event, str) else event.to_sse()


def _current_task() -> Optional["asyncio.Task"]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


async def event_stream(manager: SSESessionManager, session: SSESession) -> AsyncGenerator[str, None]:
    try:
        while True:
            frame = await session.queue.get()
            if frame is None:
                break
            yield frame
    finally:
        manager.unregister(session.id)
