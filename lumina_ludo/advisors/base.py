from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, FrozenSet, Optional, Sequence

from ..match import BoardSnapshot
from ..player import Player
from ..types import Move


@dataclass(slots=True, frozen=True)
class AdvisorContext:
    """Input payload shared by all advisors."""

    player_index: int
    player: Player
    dice_roll: int
    legal: FrozenSet[int]
    moves: Sequence[Move]  # described legal moves, ordered by token id
    snapshot: BoardSnapshot

    def move_for(self, token_id: int) -> Optional[Move]:
        for mv in self.moves:
            if mv.token_id == token_id:
                return mv
        return None


@dataclass(slots=True, frozen=True)
class AdvisorChoice:
    token_id: int
    commentary: Optional[str] = None
    source: str = "advisor"


class MoveAdvisor:
    """Chooses which legal token to move. Selection never raises for bad input."""

    name: ClassVar[str] = "base"

    async def choose_token(self, ctx: AdvisorContext) -> AdvisorChoice:  # pragma: no cover - abstract
        raise NotImplementedError

    def reset(self) -> None:
        """Optional hook called when a new match starts. Default: no-op."""
        return None
