import asyncio
from typing import Any, Callable, Dict, List

from app.shared.utils import logger


class EventBus:
    def __init__(self):
        self.subscriptions: Dict[str, List[Callable]] = {}
        self.log = logger.get_logger("event_bus")

    async def publish(self, event_name: str, event_data: Any):
        handlers = self.subscriptions.get(event_name)
        if not handlers:
            self.log.debug(f"No handlers for: {event_name}")
            return
        await asyncio.gather(*(self._run_handler(h, event_data) for h in handlers))

    async def _run_handler(self, handler: Callable, event_data: Any):
        try:
            await asyncio.wait_for(
                handler(event_data)
                if asyncio.iscoroutinefunction(handler)
                else asyncio.to_thread(handler, event_data),
                timeout=5.0,
            )
        except asyncio.TimeoutError:
            self.log.error(f"Handler timed out: {handler.__name__}")
        except Exception as e:
            self.log.error(f"Error in event handler {handler.__name__}: {e}")

    def subscribe(self, event_name: str, handler: Callable[[Any], None]):
        handlers = self.subscriptions.setdefault(event_name, [])
        if handler not in handlers:
            handlers.append(handler)
            self.log.debug(f"Subscribed {handler.__name__} to: {event_name}")

    def clear(self):
        self.subscriptions.clear()


event_bus = EventBus()


def init_event_bus():
    # Domain handlers for websocket events and cross-domain side effects
    from app.domains import messages, notifications

    messages.register_event_handlers()
    notifications.register_event_handlers()
