# app/domains/messages/events.py
from app.core import event_bus
from app.core.websocket_manager import websocket_manager
from app.shared.schemas.events import NewMessageEvent, TypingEvent, TypingPayload


async def _on_message_sent(data: dict):
    receiver_id = data.get("receiver_id")
    message = data.get("message")
    if not receiver_id or not message:
        return
    await websocket_manager.send_to_user(receiver_id, NewMessageEvent(data=message).model_dump())


async def _on_typing(data: dict):
    """Relay {userId: peer, isTyping} to the peer as {userId: sender, isTyping}."""
    sender_id = data.get("user_id")
    payload = data.get("data")
    if not sender_id or not isinstance(payload, dict):
        return
    peer_id = payload.get("userId")
    if not peer_id or peer_id == sender_id:
        return
    frame = TypingEvent(
        data=TypingPayload(user_id=sender_id, is_typing=bool(payload.get("isTyping")))
    ).frame()
    await websocket_manager.send_to_user(peer_id, frame)


def register_event_handlers():
    event_bus.event_bus.subscribe("message:sent", _on_message_sent)
    event_bus.event_bus.subscribe("websocket:typing", _on_typing)
