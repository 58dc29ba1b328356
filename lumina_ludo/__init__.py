"""
Lumina Ludo
Rule engine for a two-to-four player Ludo race with pluggable move advisors.
"""

from .advisors import (
    AdvisorChoice,
    AdvisorContext,
    HeuristicAdvisor,
    HumanAdvisor,
    MoveAdvisor,
    RandomAdvisor,
    RemoteAdvisor,
)
from .board import SAFE_CELLS, START_OFFSETS, absolute_cell, destination, is_safe_cell
from .config import advisor_config, config
from .engine import TurnEngine
from .events import CompositeSink, EventLog, EventSink, GameEvent, LoggingSink
from .exceptions import (
    AdvisorError,
    InvalidSelectionError,
    InvariantViolation,
    LudoError,
    MatchOverError,
    PhaseError,
)
from .lobby import new_ai_match, new_local_match, new_match
from .match import BoardSnapshot, Match
from .moves import capture_victims, describe_moves, legal_moves
from .player import Player
from .profiles import OpponentProfile, generate_opponents
from .token import Token
from .types import Capture, Color, ControlMode, EventKind, Move, MoveResult, TurnPhase

__version__ = "0.1.0"

__all__ = [
    "TurnEngine",
    "Match",
    "BoardSnapshot",
    "Player",
    "Token",
    "Color",
    "ControlMode",
    "TurnPhase",
    "EventKind",
    "Move",
    "MoveResult",
    "Capture",
    "legal_moves",
    "describe_moves",
    "capture_victims",
    "absolute_cell",
    "destination",
    "is_safe_cell",
    "SAFE_CELLS",
    "START_OFFSETS",
    "MoveAdvisor",
    "AdvisorContext",
    "AdvisorChoice",
    "HumanAdvisor",
    "HeuristicAdvisor",
    "RandomAdvisor",
    "RemoteAdvisor",
    "GameEvent",
    "EventSink",
    "EventLog",
    "LoggingSink",
    "CompositeSink",
    "LudoError",
    "InvalidSelectionError",
    "InvariantViolation",
    "PhaseError",
    "MatchOverError",
    "AdvisorError",
    "OpponentProfile",
    "generate_opponents",
    "new_match",
    "new_local_match",
    "new_ai_match",
    "config",
    "advisor_config",
]
