# app/domains/users/presence.py
"""Persist websocket presence onto the user row."""
from typing import List

from app.domains.auth import repository
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


async def persist_presence(user_id: str, is_online: bool):
    await repository.set_presence(user_id, is_online)
    logger.debug(f"Presence {user_id}: {'online' if is_online else 'offline'}")


async def touch_online(user_ids: List[str]):
    await repository.touch_online_users(user_ids)
