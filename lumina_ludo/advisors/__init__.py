"""Move advisors: human input, local heuristics and the remote LLM advisor."""

from .base import AdvisorChoice, AdvisorContext, MoveAdvisor
from .heuristic import HeuristicAdvisor, RandomAdvisor, pick_heuristic, rank_move
from .human import HumanAdvisor
from .registry import available, create
from .remote import CircuitBreaker, RemoteAdvisor

__all__ = [
    "AdvisorChoice",
    "AdvisorContext",
    "MoveAdvisor",
    "HeuristicAdvisor",
    "RandomAdvisor",
    "HumanAdvisor",
    "RemoteAdvisor",
    "CircuitBreaker",
    "pick_heuristic",
    "rank_move",
    "available",
    "create",
]
