# app/domains/realtime/ws.py
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.core.websocket_manager import websocket_manager
from app.domains.auth.repository import get_user_by_id
from app.shared.utils.logger import get_logger
from app.shared.utils.security import decode_token

logger = get_logger(__name__)

ws_router = APIRouter()

UNAUTHORIZED_CLOSE_CODE = 4401


@ws_router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    token = websocket.query_params.get("token")
    payload = decode_token(token) if token else None
    if not payload or "sub" not in payload:
        await websocket.close(code=UNAUTHORIZED_CLOSE_CODE)
        return

    user = await get_user_by_id(str(payload["sub"]))
    if not user or not user.is_active:
        await websocket.close(code=UNAUTHORIZED_CLOSE_CODE)
        return

    await websocket_manager.connect(websocket, user_id=user.id)
    try:
        while True:
            data = await websocket.receive_text()
            await websocket_manager.handle_message(websocket, data)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning(f"WebSocket error for user {user.id}: {e}")
    finally:
        await websocket_manager.disconnect(websocket)
