"""Setup-time opponent profiles (display name and a one-line bio)."""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Any, List, Optional

from langchain_core.messages import HumanMessage
from llm_output_parser import parse_json
from loguru import logger

from .config import advisor_config

PLACEHOLDER_BIO = "Ready to win!"

PROFILE_PROMPT = (
    "Generate {count} unique, trendy usernames and short 1-sentence bios for "
    "players in an online Ludo game. Respond ONLY with a JSON array of objects "
    'with the fields "name" and "bio".'
)


@dataclass(slots=True, frozen=True)
class OpponentProfile:
    name: str
    bio: str


def placeholder_profiles(count: int, rng: Optional[random.Random] = None) -> List[OpponentProfile]:
    rng = rng or random.Random()
    return [
        OpponentProfile(name=f"Player_{rng.randrange(9999)}", bio=PLACEHOLDER_BIO)
        for _ in range(count)
    ]


def _parse_profiles(content: str, count: int) -> List[OpponentProfile]:
    payload = parse_json(content)
    if isinstance(payload, dict):
        # Some models wrap the list, e.g. {"players": [...]}
        payload = next((v for v in payload.values() if isinstance(v, list)), None)
    if not isinstance(payload, list):
        raise ValueError("Expected a JSON array of profiles")
    profiles = [
        OpponentProfile(name=str(item["name"]).strip(), bio=str(item.get("bio", "")).strip())
        for item in payload
        if isinstance(item, dict) and str(item.get("name", "")).strip()
    ]
    if len(profiles) < count:
        raise ValueError(f"Expected {count} profiles, got {len(profiles)}")
    return profiles[:count]


async def generate_opponents(
    count: int,
    model: Any = None,
    timeout: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> List[OpponentProfile]:
    """Ask ``model`` for ``count`` opponent profiles.

    Any failure (no model, timeout, transport error, bad reply) yields
    locally generated placeholders instead.
    """
    if count <= 0:
        return []
    if model is None:
        return placeholder_profiles(count, rng)

    timeout = timeout if timeout is not None else advisor_config.timeout
    try:
        response = await asyncio.wait_for(
            model.ainvoke([HumanMessage(content=PROFILE_PROMPT.format(count=count))]),
            timeout=timeout,
        )
        content = getattr(response, "content", response)
        return _parse_profiles(str(content), count)
    except Exception as e:
        logger.warning(f"Opponent profile generation failed, using placeholders: {e}")
        return placeholder_profiles(count, rng)
