from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional


class Color(IntEnum):
    RED = 0
    GREEN = 1
    YELLOW = 2
    BLUE = 3


class ControlMode(Enum):
    HUMAN = "human"
    ADVISOR = "advisor"


class TurnPhase(Enum):
    AWAITING_ROLL = "awaiting_roll"
    ROLLED_NO_MOVES = "rolled_no_moves"
    AWAITING_SELECTION = "awaiting_selection"
    APPLYING = "applying"
    EXTRA_TURN = "extra_turn"
    NEXT_TURN = "next_turn"
    MATCH_OVER = "match_over"


class EventKind(Enum):
    TURN_START = "turn_start"
    ROLL = "roll"
    NO_LEGAL_MOVE = "no_legal_move"
    MOVE = "move"
    CAPTURE = "capture"
    EXTRA_TURN = "extra_turn"
    TURN_ADVANCED = "turn_advanced"
    MATCH_WON = "match_won"
    ADVISOR_COMMENTARY = "advisor_commentary"
    ADVISOR_FALLBACK = "advisor_fallback"


@dataclass(slots=True, frozen=True)
class Capture:
    player_index: int
    token_id: int
    cell: int


@dataclass(slots=True, frozen=True)
class Move:
    """A legal move for one token, described for advisors."""

    token_id: int
    old_position: int
    new_position: int
    dice_roll: int
    captures: tuple[Capture, ...] = ()
    exits_base: bool = False
    finishes: bool = False

    @property
    def can_capture(self) -> bool:
        return bool(self.captures)


@dataclass(slots=True)
class MoveResult:
    player_index: int
    token_id: int
    old_position: int
    new_position: int
    dice_roll: int
    captures: List[Capture] = field(default_factory=list)
    substituted: bool = False
    extra_turn: bool = False
    winner_index: Optional[int] = None
