"""Match setup: hot-seat games, games against AI opponents, advisor-only games."""

from __future__ import annotations

import random
from typing import Any, Optional, Sequence

from loguru import logger

from .advisors import HumanAdvisor, MoveAdvisor, RandomAdvisor
from .advisors import create as create_advisor
from .config import advisor_config, config
from .engine import TurnEngine
from .events import EventSink
from .match import Match
from .player import Player
from .profiles import generate_opponents
from .types import Color, ControlMode

SEAT_ORDER = [Color.RED, Color.GREEN, Color.YELLOW, Color.BLUE]


def _build_advisor(advisor_name: str, model: Any = None, **kwargs) -> MoveAdvisor:
    if advisor_name.strip().lower() == "remote" and model is not None:
        return create_advisor("remote", model=model, **kwargs)
    return create_advisor(advisor_name, **kwargs)


def new_match(
    seats: Sequence[str],
    names: Sequence[str] = (),
    *,
    bios: Sequence[str] = (),
    model: Any = None,
    sink: Optional[EventSink] = None,
    rng: Optional[random.Random] = None,
) -> TurnEngine:
    """Seat one player per entry of ``seats`` (advisor names, or ``"human"``).

    Colors follow the fixed seat order Red, Green, Yellow, Blue.
    """
    if not 2 <= len(seats) <= 4:
        raise ValueError("A match needs between 2 and 4 seats")

    players: list[Player] = []
    advisors: dict[int, MoveAdvisor] = {}
    for idx, (color, seat) in enumerate(zip(SEAT_ORDER, seats)):
        kwargs = {}
        if rng is not None and seat.strip().lower() == RandomAdvisor.name:
            # Seeded matches stay reproducible
            kwargs["rng_seed"] = rng.randrange(2**32)
        advisor = _build_advisor(seat, model=model, **kwargs)
        control = (
            ControlMode.HUMAN if isinstance(advisor, HumanAdvisor) else ControlMode.ADVISOR
        )
        name = names[idx] if idx < len(names) else ""
        bio = bios[idx] if idx < len(bios) else ""
        players.append(Player(color=color, name=name, control=control, bio=bio))
        advisors[idx] = advisor

    engine = TurnEngine(Match(players=players), advisors=advisors, sink=sink, rng=rng)
    logger.info(
        "New match: "
        + ", ".join(f"{p.name} ({p.color.name}, {s})" for p, s in zip(players, seats))
    )
    return engine


def new_local_match(
    player_count: int = config.NUM_PLAYERS,
    *,
    sink: Optional[EventSink] = None,
    rng: Optional[random.Random] = None,
) -> TurnEngine:
    """Local hot-seat match: every seat is human, named ``Player N``."""
    if not 2 <= player_count <= 4:
        raise ValueError("player_count must be between 2 and 4")
    names = [f"Player {i + 1}" for i in range(player_count)]
    return new_match(["human"] * player_count, names, sink=sink, rng=rng)


async def new_ai_match(
    human_name: str = "You",
    advisor: Optional[str] = None,
    *,
    model: Any = None,
    profile_model: Any = None,
    sink: Optional[EventSink] = None,
    rng: Optional[random.Random] = None,
) -> TurnEngine:
    """One human (Red) against three advisor-controlled opponents.

    Opponent names and bios come from the profile generator; a blank name
    falls back to ``Bot_<COLOR>``. Without an explicit ``advisor`` the
    opponents use the remote advisor when ``USE_REMOTE_ADVISOR`` is set.
    """
    if advisor is None:
        advisor = "remote" if advisor_config.use_remote else "heuristic"
    opponents = len(SEAT_ORDER) - 1
    profiles = await generate_opponents(opponents, model=profile_model, rng=rng)
    return new_match(
        ["human"] + [advisor] * opponents,
        [human_name] + [p.name for p in profiles],
        bios=[""] + [p.bio for p in profiles],
        model=model,
        sink=sink,
        rng=rng,
    )
