from __future__ import annotations

import random
from typing import ClassVar, Optional

from loguru import logger

from .. import board
from ..types import Move
from .base import AdvisorChoice, AdvisorContext, MoveAdvisor


def rank_move(move: Move) -> tuple[int, int, int]:
    """Sort key for the baseline policy (higher is better).

    Priority order is capture, finish, base exit, then the token furthest
    along its path. Remaining ties go to the lowest token id.
    """
    if move.can_capture:
        tier = 3
    elif move.finishes:
        tier = 2
    elif move.exits_base:
        tier = 1
    else:
        tier = 0
    reach = board.progress(move.old_position) if tier == 0 else 0
    return tier, reach, -move.token_id


def pick_heuristic(ctx: AdvisorContext) -> Optional[Move]:
    moves = [mv for mv in ctx.moves if mv.token_id in ctx.legal]
    if not moves:
        return None
    return max(moves, key=rank_move)


def _commentary(move: Move) -> str:
    if move.can_capture:
        n = len(move.captures)
        return "Gotcha! Back to base you go." if n == 1 else f"Double trouble! {n} sent home."
    if move.finishes:
        return "One more safely home!"
    if move.exits_base:
        return "Six! Bringing a fresh token out."
    return f"Pushing token {move.token_id} forward."


class HeuristicAdvisor(MoveAdvisor):
    """Deterministic baseline policy, also used as the remote fallback."""

    name: ClassVar[str] = "heuristic"

    def choose(self, ctx: AdvisorContext) -> AdvisorChoice:
        best = pick_heuristic(ctx)
        if best is None:
            # Nothing described; keep the choice legal anyway
            token_id = min(ctx.legal)
            return AdvisorChoice(token_id=token_id, source=self.name)
        logger.debug(
            f"Heuristic picked token {best.token_id} for {ctx.player.name} (rank={rank_move(best)})"
        )
        return AdvisorChoice(
            token_id=best.token_id, commentary=_commentary(best), source=self.name
        )

    async def choose_token(self, ctx: AdvisorContext) -> AdvisorChoice:
        return self.choose(ctx)


class RandomAdvisor(MoveAdvisor):
    """Uniformly random legal choice."""

    name: ClassVar[str] = "random"

    def __init__(self, rng_seed: int | None = None) -> None:
        self.rng = random.Random(rng_seed)

    async def choose_token(self, ctx: AdvisorContext) -> AdvisorChoice:
        token_id = self.rng.choice(sorted(ctx.legal))
        return AdvisorChoice(token_id=token_id, commentary="Let's go!", source=self.name)
