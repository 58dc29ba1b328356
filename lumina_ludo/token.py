from dataclasses import dataclass

from . import board
from .config import config
from .exceptions import InvariantViolation
from .types import Color


@dataclass(slots=True)
class Token:
    """Lightweight token model. ``position`` is the single source of truth.

    Rule logic (legal destinations, captures) lives in the resolver and the
    engine; the token only guards its own position domain.
    """

    color: Color
    token_id: int  # 0..3 per player
    position: int = config.BASE_POSITION

    def __post_init__(self) -> None:
        if not board.is_valid_position(self.position):
            raise InvariantViolation(
                f"Token {self.label} created at invalid position {self.position}"
            )

    @property
    def label(self) -> str:
        return f"{self.color.name}_{self.token_id}"

    @property
    def in_base(self) -> bool:
        return self.position == config.BASE_POSITION

    @property
    def finished(self) -> bool:
        return self.position == config.FINISH_POSITION

    @property
    def absolute_cell(self) -> int | None:
        return board.absolute_cell(self.color, self.position)

    def move_to(self, new_position: int) -> None:
        if self.finished:
            raise InvariantViolation(f"Token {self.label} has already finished")
        if not board.is_valid_position(new_position):
            raise InvariantViolation(
                f"Token {self.label} cannot move to invalid position {new_position}"
            )
        self.position = new_position

    def send_home(self) -> None:
        if not board.on_ring(self.position):
            raise InvariantViolation(
                f"Token {self.label} at {self.position} cannot be captured"
            )
        self.position = config.BASE_POSITION

    def to_dict(self) -> dict:
        return {
            "token_id": self.token_id,
            "color": self.color.name,
            "position": self.position,
            "zone": board.position_zone(self.position),
        }
