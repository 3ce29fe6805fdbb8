# app/core/websocket_manager.py
"""
WebSocket manager: per-user connections, presence broadcast and heartbeat.

A user is online while at least one of their sockets is open. The manager is
the only source of truth for the online set; every change is pushed to all
connected clients as an ``onlineUsers`` frame.
"""
import asyncio
import json
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, Set

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from app.core.config import settings
from app.core.event_bus import event_bus
from app.core.redis import publish_presence
from app.shared.schemas.events import OnlineUsersEvent
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

PresenceHook = Callable[[str, bool], Awaitable[None]]
HeartbeatHook = Callable[[List[str]], Awaitable[None]]


class ConnectionInfo:
    """Information about a WebSocket connection"""

    def __init__(self, websocket: WebSocket, user_id: str):
        self.websocket = websocket
        self.user_id = user_id
        self.connected_at = datetime.utcnow()
        self.last_ping = datetime.utcnow()
        self.last_pong = datetime.utcnow()

    def update_activity(self):
        self.last_pong = datetime.utcnow()


class WebSocketManager:
    def __init__(self):
        self.user_connections: Dict[str, List[WebSocket]] = {}
        self.connection_info: Dict[WebSocket, ConnectionInfo] = {}
        self.presence_hooks: List[PresenceHook] = []
        self.heartbeat_hooks: List[HeartbeatHook] = []

        self.ping_interval = settings.WS_PING_INTERVAL
        self.pong_timeout = settings.WS_PONG_TIMEOUT
        self.max_message_size = settings.WS_MAX_MESSAGE_SIZE

        self._tasks: list[asyncio.Task] = []
        self._started: bool = False

    def on_presence_change(self, hook: PresenceHook):
        """Register a coroutine called with (user_id, is_online) on transitions."""
        if hook not in self.presence_hooks:
            self.presence_hooks.append(hook)

    def on_heartbeat(self, hook: HeartbeatHook):
        """Register a coroutine called with the online user ids on every heartbeat."""
        if hook not in self.heartbeat_hooks:
            self.heartbeat_hooks.append(hook)

    async def start(self):
        """Start background maintenance tasks (must be called inside a running event loop)"""
        if self._started:
            return
        loop = asyncio.get_running_loop()
        self._tasks = [
            loop.create_task(self._heartbeat_loop(), name="ws-heartbeat"),
        ]
        self._started = True
        logger.info("WebSocketManager background tasks started")

    async def stop(self):
        if not self._started:
            return
        for t in self._tasks:
            t.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        self._started = False
        logger.info("WebSocketManager background tasks stopped")

    @property
    def online_users(self) -> List[str]:
        return sorted(self.user_connections.keys())

    def is_online(self, user_id: str) -> bool:
        return user_id in self.user_connections

    async def connect(self, websocket: WebSocket, user_id: str):
        await websocket.accept()

        info = ConnectionInfo(websocket, user_id)
        self.connection_info[websocket] = info

        first_connection = user_id not in self.user_connections
        self.user_connections.setdefault(user_id, []).append(websocket)
        logger.info(f"WebSocket connected: user={user_id}")

        if first_connection:
            await self._presence_changed(user_id, True)
        else:
            # A new tab still needs the current online set
            await self._send_direct(websocket, self._online_frame())

    async def disconnect(self, websocket: WebSocket):
        info = self.connection_info.pop(websocket, None)
        if not info:
            return

        sockets = self.user_connections.get(info.user_id, [])
        if websocket in sockets:
            sockets.remove(websocket)
        went_offline = not sockets
        if went_offline:
            self.user_connections.pop(info.user_id, None)

        logger.info(f"WebSocket disconnected: user={info.user_id}")

        if went_offline:
            await self._presence_changed(info.user_id, False)

    async def send_to_user(self, user_id: str, message: dict) -> int:
        """Send a frame to every open socket of a user. Returns delivered count."""
        delivered = 0
        stale = []
        for connection in list(self.user_connections.get(user_id, [])):
            if await self._send_direct(connection, message):
                delivered += 1
            else:
                stale.append(connection)
        for conn in stale:
            await self.disconnect(conn)
        return delivered

    async def broadcast(self, message: dict, exclude: Optional[Set[str]] = None):
        """Send a frame to every connected user."""
        stale = []
        for websocket, info in list(self.connection_info.items()):
            if exclude and info.user_id in exclude:
                continue
            if not await self._send_direct(websocket, message):
                stale.append(websocket)
        for conn in stale:
            await self.disconnect(conn)

    async def handle_message(self, websocket: WebSocket, message: str):
        """Handle incoming frame from client"""
        if len(message) > self.max_message_size:
            await self._send_direct(websocket, {"event": "error", "data": "Message too large"})
            return

        try:
            frame = json.loads(message)
        except json.JSONDecodeError:
            await self._send_direct(websocket, {"event": "error", "data": "Invalid JSON"})
            return

        info = self.connection_info.get(websocket)
        if not info or not isinstance(frame, dict):
            return

        # Any frame proves the client is alive
        info.update_activity()

        event = frame.get("event")
        if event == "ping":
            await self._send_direct(websocket, {"event": "pong"})
            return
        if event == "pong" or not event:
            return

        await event_bus.publish(
            f"websocket:{event}",
            {
                "user_id": info.user_id,
                "data": frame.get("data"),
                "timestamp": datetime.utcnow().isoformat(),
            },
        )

    def _online_frame(self) -> dict:
        return OnlineUsersEvent(data=self.online_users).model_dump()

    async def _presence_changed(self, user_id: str, is_online: bool):
        for hook in self.presence_hooks:
            try:
                await hook(user_id, is_online)
            except Exception as e:
                logger.error(f"Presence hook failed for {user_id}: {e}")
        await publish_presence(self.online_users)
        await self.broadcast(self._online_frame())

    async def _send_direct(self, websocket: WebSocket, message: dict) -> bool:
        try:
            if websocket.client_state == WebSocketState.CONNECTED:
                await websocket.send_json(message)
                return True
        except Exception as e:
            logger.debug(f"Direct send failed: {e}")
        return False

    async def _heartbeat_loop(self):
        """Ping every socket; drop the ones that stopped answering."""
        while True:
            try:
                await asyncio.sleep(self.ping_interval)

                now = datetime.utcnow()
                limit = self.ping_interval + self.pong_timeout
                for websocket, info in list(self.connection_info.items()):
                    if (now - info.last_pong).total_seconds() > limit:
                        logger.warning(f"Connection stale for user {info.user_id}")
                        await self._close(websocket)
                        continue
                    await self._send_direct(websocket, {"event": "ping"})
                    info.last_ping = now

                for hook in self.heartbeat_hooks:
                    await hook(self.online_users)

            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Heartbeat error: {e}")

    async def _close(self, websocket: WebSocket):
        try:
            await websocket.close()
        except Exception as e:
            logger.debug(f"Close failed: {e}")
        await self.disconnect(websocket)

    def get_connection_stats(self) -> Dict:
        return {
            "total_connections": len(self.connection_info),
            "active_users": len(self.user_connections),
        }

    async def close_all(self):
        for websocket in list(self.connection_info.keys()):
            await self._close(websocket)


# Global instance
websocket_manager = WebSocketManager()
