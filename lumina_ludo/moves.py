"""Legal-move resolution. Every function here is pure."""

from __future__ import annotations

from typing import FrozenSet, List, Sequence

from . import board
from .config import config
from .player import Player
from .types import Capture, Color, Move


def legal_moves(player: Player, dice: int) -> FrozenSet[int]:
    """Token ids of ``player`` that may move with ``dice``.

    Finished tokens never move, base tokens need a 6 and no token may
    overshoot the finish. An empty set means the roll is forfeited.
    """
    return frozenset(
        t.token_id
        for t in player.tokens
        if board.destination(t.position, dice) is not None
    )


def capture_victims(
    mover_color: Color | int,
    new_position: int,
    players: Sequence[Player],
) -> List[Capture]:
    """Opponent tokens that a landing on ``new_position`` would send to base."""
    cell = board.absolute_cell(mover_color, new_position)
    if cell is None or board.is_safe_cell(cell):
        return []
    victims: List[Capture] = []
    for idx, pl in enumerate(players):
        if pl.color == mover_color:
            continue
        for t in pl.tokens:
            if t.absolute_cell == cell:
                victims.append(Capture(player_index=idx, token_id=t.token_id, cell=cell))
    return victims


def describe_moves(
    player: Player, dice: int, players: Sequence[Player]
) -> List[Move]:
    """Legal moves for ``player`` with their consequences, ordered by token id."""
    out: List[Move] = []
    for t in player.tokens:
        dest = board.destination(t.position, dice)
        if dest is None:
            continue
        out.append(
            Move(
                token_id=t.token_id,
                old_position=t.position,
                new_position=dest,
                dice_roll=dice,
                captures=tuple(capture_victims(player.color, dest, players)),
                exits_base=t.in_base,
                finishes=dest == config.FINISH_POSITION,
            )
        )
    return out
