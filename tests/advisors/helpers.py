"""Shared fixtures for advisor tests."""

import asyncio

from langchain_core.messages import AIMessage

from lumina_ludo.engine import TurnEngine
from lumina_ludo.match import Match
from lumina_ludo.player import Player
from lumina_ludo.types import Color, ControlMode


def context_for(dice, red=None, green=None):
    """Advisor context for Red with the given relative positions."""
    players = [
        Player(color=Color.RED, name="Red", control=ControlMode.ADVISOR),
        Player(color=Color.GREEN, name="Green", control=ControlMode.ADVISOR),
    ]
    for player, positions in zip(players, (red, green)):
        for token, pos in zip(player.tokens, positions or []):
            token.position = pos
    engine = TurnEngine(Match(players=players))
    engine.roll(dice)
    return engine.advisor_context()


class MockChatModel:
    """Mock LangChain chat model for testing."""

    def __init__(self, responses=None, should_fail=False, delay=0.0):
        self.responses = responses or ['{"token_id": 0}']
        self.should_fail = should_fail
        self.delay = delay
        self.call_count = 0
        self.last_messages = None

    async def ainvoke(self, messages):
        self.call_count += 1
        self.last_messages = messages
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.should_fail:
            raise Exception("LLM failure")
        resp = self.responses[(self.call_count - 1) % len(self.responses)]
        return AIMessage(content=resp) if isinstance(resp, str) else resp


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now
