# app/domains/notifications/events.py
from app.core import event_bus
from app.core.websocket_manager import websocket_manager
from app.shared.schemas.events import NewNotificationEvent


async def _on_notification_created(data: dict):
    recipient_id = data.get("recipient_id")
    notification = data.get("notification")
    if not recipient_id or not notification:
        return
    await websocket_manager.send_to_user(
        recipient_id, NewNotificationEvent(data=notification).model_dump()
    )


def register_event_handlers():
    event_bus.event_bus.subscribe("notification:created", _on_notification_created)
