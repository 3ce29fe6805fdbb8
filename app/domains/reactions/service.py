# app/domains/reactions/service.py
"""
Per-user reactions shared by posts and comments.

Reactions are exposed as six per-type sets of user ids; ``totalReactions`` is
always the sum of their sizes.
"""
from typing import Dict, Iterable, List, Optional

from app.domains.auth.repository import get_users_by_ids
from app.domains.auth.schemas import user_summary
from . import repository
from .schemas import ReactionTarget, ReactionType


def empty_sets() -> Dict[str, List[str]]:
    return {t.value: [] for t in ReactionType}


def summarize(reactions: Iterable, viewer_id: Optional[str] = None) -> dict:
    sets = empty_sets()
    user_reaction = None
    for reaction in reactions:
        sets[reaction.type].append(reaction.user_id)
        if viewer_id and reaction.user_id == viewer_id:
            user_reaction = reaction.type
    return {
        "reactions": sets,
        "totalReactions": sum(len(ids) for ids in sets.values()),
        "userReaction": user_reaction,
    }


class ReactionService:
    async def react(
        self, user_id: str, target: ReactionTarget, target_id: str, reaction_type: ReactionType
    ) -> dict:
        _, created = await repository.toggle_reaction(
            user_id, ReactionTarget(target).value, target_id, ReactionType(reaction_type).value
        )
        summary = await self.summary(target, target_id, user_id)
        summary["created"] = created
        return summary

    async def summary(self, target: ReactionTarget, target_id: str, viewer_id: Optional[str] = None) -> dict:
        reactions = await repository.get_reactions(ReactionTarget(target).value, [target_id])
        return summarize(reactions, viewer_id)

    async def summaries(
        self, target: ReactionTarget, target_ids: Iterable[str], viewer_id: Optional[str] = None
    ) -> Dict[str, dict]:
        ids = list(target_ids)
        grouped = await repository.group_by_target(ReactionTarget(target).value, ids)
        return {tid: summarize(grouped.get(tid, []), viewer_id) for tid in ids}

    async def detailed(self, target: ReactionTarget, target_id: str) -> dict:
        """Reacting users per type, as user cards."""
        reactions = await repository.get_reactions(ReactionTarget(target).value, [target_id])
        users = await get_users_by_ids(r.user_id for r in reactions)
        by_type: Dict[str, List[dict]] = {t.value: [] for t in ReactionType}
        for reaction in reactions:
            user = users.get(reaction.user_id)
            if user:
                by_type[reaction.type].append(user_summary(user))
        return {
            "reactions": by_type,
            "totalReactions": sum(len(v) for v in by_type.values()),
        }

    async def delete_for(self, target: ReactionTarget, target_ids: Iterable[str]) -> int:
        return await repository.delete_for_targets(ReactionTarget(target).value, target_ids)


reaction_service = ReactionService()
