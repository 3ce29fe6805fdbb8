# app/client/realtime.py
"""
Realtime connection to the ``/ws`` channel.

Opened once the session holds a token; closed on logout. After a dropped or
failed connection the client retries a bounded number of times with a fixed
delay, then stays disconnected until ``start()`` is called again.
"""
import asyncio
import inspect
import json
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlencode

import websockets

from app.shared.utils.logger import get_logger
from .config import ClientSettings
from .session import AuthSession

logger = get_logger(__name__)

UNAUTHORIZED_CLOSE_CODE = 4401

Handler = Callable[[Any], Any]


def _handshake_status(error: Exception) -> Optional[int]:
    # A socket closed before accept is answered with a plain HTTP rejection
    response = getattr(error, "response", None)
    return getattr(response, "status_code", None) or getattr(error, "status_code", None)


class RealtimeClient:
    def __init__(
        self,
        session: AuthSession,
        settings: Optional[ClientSettings] = None,
        connect: Callable = websockets.connect,
    ):
        self.session = session
        self.settings = settings or ClientSettings()
        self._connect = connect
        self._handlers: Dict[str, List[Handler]] = {}
        self._ws = None
        self._task: Optional[asyncio.Task] = None
        self.online_users: List[str] = []
        self.failed_attempts = 0

    @property
    def is_connected(self) -> bool:
        return self._ws is not None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def on(self, event: str, handler: Handler):
        handlers = self._handlers.setdefault(event, [])
        if handler not in handlers:
            handlers.append(handler)

    def off(self, event: str, handler: Handler):
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def url(self) -> str:
        return f"{self.settings.SOCKET_URL}?{urlencode({'token': self.session.token})}"

    def start(self) -> asyncio.Task:
        if not self.session.token:
            raise RuntimeError("Cannot open the realtime connection without a token")
        if not self.is_running:
            self.failed_attempts = 0
            self._task = asyncio.get_running_loop().create_task(self._run(), name="realtime")
        return self._task

    async def stop(self):
        task, self._task = self._task, None
        if self._ws is not None:
            try:
                await self._ws.close()
            except Exception as e:
                logger.debug(f"Close failed: {e}")
        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._ws = None
        self.online_users = []

    async def emit(self, event: str, data: Any = None) -> bool:
        """Send a frame if connected. Fire-and-forget: returns False when offline."""
        if self._ws is None:
            return False
        try:
            await self._ws.send(json.dumps({"event": event, "data": data}))
            return True
        except Exception as e:
            logger.debug(f"Emit {event} failed: {e}")
            return False

    async def _run(self):
        while True:
            try:
                async with self._connect(self.url()) as ws:
                    self._ws = ws
                    self.failed_attempts = 0
                    logger.info("Realtime connected")
                    await self._dispatch("connect", None)
                    async for raw in ws:
                        await self._receive(raw)
                    close_code = getattr(ws, "close_code", None)
            except asyncio.CancelledError:
                raise
            except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as e:
                close_code = getattr(getattr(e, "rcvd", None), "code", None)
                if _handshake_status(e) in (401, 403):
                    close_code = UNAUTHORIZED_CLOSE_CODE
                logger.warning(f"Realtime connection lost: {e}")
            finally:
                was_connected = self._ws is not None
                self._ws = None
                self.online_users = []
            if was_connected:
                await self._dispatch("disconnect", None)

            if close_code == UNAUTHORIZED_CLOSE_CODE:
                logger.warning("Realtime connection rejected the token")
                await self.session.expire()
                return

            self.failed_attempts += 1
            if self.failed_attempts > self.settings.RECONNECT_ATTEMPTS:
                logger.warning("Realtime reconnection attempts exhausted")
                return
            await asyncio.sleep(self.settings.RECONNECT_DELAY)

    async def _receive(self, raw):
        try:
            frame = json.loads(raw)
        except (TypeError, ValueError):
            logger.debug("Ignoring malformed frame")
            return
        if not isinstance(frame, dict):
            return

        event = frame.get("event")
        data = frame.get("data")
        if event == "ping":
            await self.emit("pong")
            return
        if event == "onlineUsers" and isinstance(data, list):
            self.online_users = list(data)
        await self._dispatch(event, data)

    async def _dispatch(self, event: Optional[str], data: Any):
        for handler in list(self._handlers.get(event, [])):
            try:
                result = handler(data)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Realtime handler for {event} failed: {e}")
