from __future__ import annotations

from typing import Dict, Type

from .base import MoveAdvisor
from .heuristic import HeuristicAdvisor, RandomAdvisor
from .human import HumanAdvisor
from .remote import RemoteAdvisor

ADVISOR_REGISTRY: Dict[str, Type[MoveAdvisor]] = {
    HumanAdvisor.name: HumanAdvisor,
    HeuristicAdvisor.name: HeuristicAdvisor,
    RandomAdvisor.name: RandomAdvisor,
    RemoteAdvisor.name: RemoteAdvisor,
}


def create(advisor_name: str, **kwargs) -> MoveAdvisor:
    cls = ADVISOR_REGISTRY.get(advisor_name.strip().lower())
    if cls is None:
        raise KeyError(
            f"Unknown advisor '{advisor_name}'. Available: {list(ADVISOR_REGISTRY)}"
        )
    if cls is RemoteAdvisor and "model" not in kwargs:
        return RemoteAdvisor.from_model_name(kwargs.pop("model_name", None), **kwargs)
    return cls(**kwargs)


def available(ignore_human: bool = True) -> Dict[str, Type[MoveAdvisor]]:
    if ignore_human:
        return {
            name: cls
            for name, cls in ADVISOR_REGISTRY.items()
            if name != HumanAdvisor.name
        }
    return dict(ADVISOR_REGISTRY)
