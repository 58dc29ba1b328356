from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

import numpy as np

from .config import config
from .exceptions import InvariantViolation, MatchOverError
from .player import Player
from .types import Color, TurnPhase


@dataclass(slots=True, frozen=True)
class BoardSnapshot:
    """Read-only view of every token position, seat order.

    ``positions`` has shape ``(n_players, 4)`` and is not writeable.
    """

    colors: tuple[Color, ...]
    positions: np.ndarray

    def positions_for(self, color: Color | int) -> tuple[int, ...]:
        idx = self.colors.index(Color(color))
        return tuple(int(p) for p in self.positions[idx])

    def to_dict(self) -> dict[str, list[int]]:
        return {
            color.name: [int(p) for p in row]
            for color, row in zip(self.colors, self.positions)
        }


@dataclass(slots=True)
class Match:
    """State for one match. Owned and mutated only by its TurnEngine."""

    players: List[Player]
    current_index: int = 0
    phase: TurnPhase = TurnPhase.AWAITING_ROLL
    pending_roll: Optional[int] = None
    legal: FrozenSet[int] = field(default_factory=frozenset)
    extra_turn_pending: bool = False
    winner_index: Optional[int] = None
    turn_count: int = 0
    last_roll: Optional[int] = None

    def __post_init__(self) -> None:
        if not 2 <= len(self.players) <= 4:
            raise ValueError("A match needs between 2 and 4 players")
        colors = [p.color for p in self.players]
        if len(set(colors)) != len(colors):
            raise ValueError("Each player must have a distinct color")
        if not 0 <= self.current_index < len(self.players):
            raise IndexError("current_index out of range")

    @property
    def current_player(self) -> Player:
        return self.players[self.current_index]

    @property
    def winner(self) -> Optional[Player]:
        if self.winner_index is None:
            return None
        return self.players[self.winner_index]

    @property
    def is_over(self) -> bool:
        return self.phase is TurnPhase.MATCH_OVER

    def ensure_active(self) -> None:
        if self.is_over or self.winner_index is not None:
            raise MatchOverError("The match is over; start a new match")

    def check_invariants(self) -> None:
        """Assert the position domain for every token."""
        for pl in self.players:
            for t in pl.tokens:
                if not (
                    t.position in (config.BASE_POSITION, config.FINISH_POSITION)
                    or 0 <= t.position <= config.HOME_STRETCH_END
                ):
                    raise InvariantViolation(
                        f"Token {t.label} has invalid position {t.position}"
                    )
        if self.pending_roll is not None and self.phase is not TurnPhase.AWAITING_SELECTION:
            raise InvariantViolation("A roll is pending outside the selection phase")

    def snapshot(self) -> BoardSnapshot:
        positions = np.asarray(
            [pl.positions() for pl in self.players], dtype=np.int64
        )
        positions.setflags(write=False)
        return BoardSnapshot(
            colors=tuple(pl.color for pl in self.players), positions=positions
        )
