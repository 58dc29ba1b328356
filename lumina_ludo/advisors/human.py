from __future__ import annotations

import asyncio
from typing import ClassVar, FrozenSet

from loguru import logger

from ..exceptions import InvalidSelectionError
from .base import AdvisorChoice, AdvisorContext, MoveAdvisor


class HumanAdvisor(MoveAdvisor):
    """Waits, without a timeout, for an externally submitted token id."""

    name: ClassVar[str] = "human"

    def __init__(self) -> None:
        self._queue: asyncio.Queue[int] = asyncio.Queue()
        self._legal: FrozenSet[int] = frozenset()
        self._awaiting = False

    @property
    def awaiting_input(self) -> bool:
        return self._awaiting

    @property
    def pending_legal(self) -> FrozenSet[int]:
        return self._legal

    def submit(self, token_id: int) -> None:
        """Hand a selection to the waiting turn. Illegal ids are rejected."""
        if not self._awaiting or token_id not in self._legal:
            raise InvalidSelectionError(token_id, self._legal)
        self._awaiting = False
        self._queue.put_nowait(token_id)

    async def choose_token(self, ctx: AdvisorContext) -> AdvisorChoice:
        self._legal = ctx.legal
        self._awaiting = True
        logger.debug(f"Waiting for {ctx.player.name} to pick one of {sorted(ctx.legal)}")
        try:
            token_id = await self._queue.get()
        finally:
            self._awaiting = False
            self._legal = frozenset()
        return AdvisorChoice(token_id=token_id, source=self.name)

    def reset(self) -> None:
        self._awaiting = False
        self._legal = frozenset()
        while not self._queue.empty():
            self._queue.get_nowait()
