# app/client/typing_indicator.py
import asyncio
from typing import Optional, Set

from .realtime import RealtimeClient


class TypingNotifier:
    """Emits ``typing`` for one peer while a draft is being edited.

    Every draft change sends ``isTyping = len(draft) > 0``; if no change
    follows within the timeout, ``isTyping = False`` is sent.
    """

    def __init__(self, realtime: RealtimeClient, peer_id: str, timeout: Optional[float] = None):
        self.realtime = realtime
        self.peer_id = peer_id
        self.timeout = realtime.settings.TYPING_TIMEOUT if timeout is None else timeout
        self._timer: Optional[asyncio.TimerHandle] = None
        # The loop only keeps weak references to tasks
        self._pending: Set[asyncio.Task] = set()

    async def on_draft_change(self, draft: str):
        self._cancel_timer()
        await self._emit(len(draft) > 0)
        self._timer = asyncio.get_running_loop().call_later(self.timeout, self._emit_stopped)

    async def stop(self):
        """Flush ``isTyping = False`` right away, e.g. after sending."""
        self._cancel_timer()
        await self._emit(False)

    def _emit_stopped(self):
        self._timer = None
        task = asyncio.get_running_loop().create_task(self._emit(False))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _emit(self, is_typing: bool) -> bool:
        return await self.realtime.emit("typing", {"userId": self.peer_id, "isTyping": is_typing})
