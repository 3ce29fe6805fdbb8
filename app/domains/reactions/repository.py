# app/domains/reactions/repository.py
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, select

from app.core.database import get_db
from .models import Reaction


async def toggle_reaction(
    user_id: str, target_type: str, target_id: str, reaction_type: str
) -> Tuple[Optional[str], bool]:
    """Apply a react call.

    Same type as the current one removes it, another type switches it.
    Returns the user's resulting reaction and whether a new row was created.
    """
    async with get_db() as db:
        result = await db.execute(
            select(Reaction).filter(
                Reaction.user_id == user_id,
                Reaction.target_type == target_type,
                Reaction.target_id == target_id,
            )
        )
        existing = result.scalar_one_or_none()

        if existing is None:
            db.add(
                Reaction(
                    id=str(uuid.uuid4()),
                    user_id=user_id,
                    target_type=target_type,
                    target_id=target_id,
                    type=reaction_type,
                )
            )
            return reaction_type, True

        if existing.type == reaction_type:
            await db.delete(existing)
            return None, False

        existing.type = reaction_type
        existing.updated_at = datetime.utcnow()
        return reaction_type, False


async def get_reactions(target_type: str, target_ids: Iterable[str]) -> List[Reaction]:
    ids = list(set(target_ids))
    if not ids:
        return []
    async with get_db() as db:
        result = await db.execute(
            select(Reaction)
            .filter(Reaction.target_type == target_type, Reaction.target_id.in_(ids))
            .order_by(Reaction.created_at)
        )
        return list(result.scalars().all())


async def group_by_target(target_type: str, target_ids: Iterable[str]) -> Dict[str, List[Reaction]]:
    grouped: Dict[str, List[Reaction]] = {}
    for reaction in await get_reactions(target_type, target_ids):
        grouped.setdefault(reaction.target_id, []).append(reaction)
    return grouped


async def delete_for_targets(target_type: str, target_ids: Iterable[str]) -> int:
    ids = list(set(target_ids))
    if not ids:
        return 0
    async with get_db() as db:
        result = await db.execute(
            delete(Reaction).where(Reaction.target_type == target_type, Reaction.target_id.in_(ids))
        )
        return result.rowcount or 0
