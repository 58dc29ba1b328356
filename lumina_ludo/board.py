"""Static board geometry.

Relative positions are expressed in a color's own frame: ``-1`` is base,
``0..51`` is the shared ring (``0`` being the color's entry cell),
``52..56`` the private home stretch and ``100`` the finish. Nothing in this
module holds state.
"""

from __future__ import annotations

from typing import FrozenSet, Optional

from .config import config
from .types import Color

SAFE_CELLS: FrozenSet[int] = frozenset(config.SAFE_CELLS)
START_OFFSETS: dict[Color, int] = {
    color: offset for color, offset in zip(Color, config.START_OFFSETS)
}
HOME_STRETCH_LENGTH = config.HOME_STRETCH_LENGTH


def start_offset(color: Color | int) -> int:
    return START_OFFSETS[Color(color)]


def on_ring(position: int) -> bool:
    return 0 <= position <= config.RING_END


def in_home_stretch(position: int) -> bool:
    return config.HOME_STRETCH_START <= position <= config.HOME_STRETCH_END


def is_valid_position(position: int) -> bool:
    return (
        position in (config.BASE_POSITION, config.FINISH_POSITION)
        or on_ring(position)
        or in_home_stretch(position)
    )


def position_zone(position: int) -> str:
    if position == config.BASE_POSITION:
        return "base"
    if on_ring(position):
        return "ring"
    if in_home_stretch(position):
        return "home"
    if position == config.FINISH_POSITION:
        return "finished"
    raise ValueError(f"Position {position} is outside the board")


def absolute_cell(color: Color | int, relative: int) -> Optional[int]:
    """Map a relative ring position to the shared ring index.

    Returns ``None`` for base, home stretch and finished positions.
    """
    if not on_ring(relative):
        return None
    return (relative + start_offset(color)) % config.RING_SIZE


def is_safe_cell(cell: Optional[int]) -> bool:
    return cell is not None and cell in SAFE_CELLS


def destination(position: int, dice: int) -> Optional[int]:
    """Destination for ``dice`` from ``position``, or ``None`` if not possible.

    Leaving base needs the exit roll and lands on relative ``0``. Reaching
    exactly one step past the home stretch finishes (``100``); anything
    further is an overshoot.
    """
    if position == config.FINISH_POSITION:
        return None
    if position == config.BASE_POSITION:
        return 0 if dice == config.EXIT_ROLL else None
    cand = position + dice
    if cand > config.FINISH_STEP:
        return None
    if cand == config.FINISH_STEP:
        return config.FINISH_POSITION
    return cand


def progress(position: int) -> int:
    """Steps travelled; base sorts lowest and finished highest."""
    if position == config.FINISH_POSITION:
        return config.FINISH_STEP
    return position
