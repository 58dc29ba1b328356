from __future__ import annotations

from dataclasses import dataclass, field

from .config import config
from .token import Token
from .types import Color, ControlMode


@dataclass(slots=True)
class Player:
    color: Color
    name: str = ""
    control: ControlMode = ControlMode.HUMAN
    bio: str = ""
    tokens: list[Token] = field(init=False)

    def __post_init__(self) -> None:
        self.color = Color(self.color)
        if not self.name:
            self.name = f"Bot_{self.color.name}"
        self.tokens = [
            Token(color=self.color, token_id=i)
            for i in range(config.TOKENS_PER_PLAYER)
        ]

    @property
    def is_human(self) -> bool:
        return self.control is ControlMode.HUMAN

    def positions(self) -> list[int]:
        return [t.position for t in self.tokens]

    def finished_count(self) -> int:
        return sum(1 for t in self.tokens if t.finished)

    def base_count(self) -> int:
        return sum(1 for t in self.tokens if t.in_base)

    def has_won(self) -> bool:
        return all(t.finished for t in self.tokens)

    def to_dict(self) -> dict:
        return {
            "color": self.color.name,
            "name": self.name,
            "control": self.control.value,
            "tokens": [t.to_dict() for t in self.tokens],
            "finished_tokens": self.finished_count(),
            "base_tokens": self.base_count(),
        }

    def __str__(self) -> str:
        return f"Player({self.name}, {self.color.name}, positions={self.positions()})"
