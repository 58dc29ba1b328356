from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, ClassVar, Optional

from langchain.chat_models import init_chat_model
from langchain_core.messages import AIMessage
from llm_output_parser import parse_json
from loguru import logger

from ..config import AdvisorConfig, advisor_config
from ..exceptions import AdvisorError, AdvisorResponseError, AdvisorTimeoutError
from .base import AdvisorChoice, AdvisorContext, MoveAdvisor
from .heuristic import HeuristicAdvisor
from .prompt import SYSTEM_PROMPT, build_messages

MAX_COMMENTARY_LENGTH = 200


class CircuitBreaker:
    """Circuit breaker to stop calling a failing advisory service."""

    def __init__(
        self,
        failure_threshold: int = 3,
        cooldown: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.failure_threshold = failure_threshold
        self.cooldown = cooldown
        self.clock = clock
        self.failure_count = 0
        self.last_failure_time = 0.0
        self.state = "closed"  # closed, open, half-open

    def can_execute(self) -> bool:
        if self.state == "open":
            if self.clock() - self.last_failure_time >= self.cooldown:
                self.state = "half-open"
                return True
            return False
        return True

    def record_success(self):
        self.failure_count = 0
        self.state = "closed"

    def record_failure(self):
        self.failure_count += 1
        self.last_failure_time = self.clock()
        if self.state == "half-open" or self.failure_count >= self.failure_threshold:
            self.state = "open"


class RemoteAdvisor(MoveAdvisor):
    """Asks a LangChain chat model for a move, degrading to a local policy.

    The remote call is bounded by ``timeout`` and is attempted at most once
    per turn. Timeouts, transport errors, malformed replies and illegal ids
    all end in the fallback advisor's choice; nothing is raised to the
    caller.
    """

    name: ClassVar[str] = "remote"

    def __init__(
        self,
        model: Any = None,
        *,
        timeout: Optional[float] = None,
        fallback: Optional[MoveAdvisor] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        system_prompt: str = SYSTEM_PROMPT,
        config: Optional[AdvisorConfig] = None,
    ) -> None:
        self.config = config or advisor_config
        self.model = model
        self.timeout = timeout if timeout is not None else self.config.timeout
        self.fallback = fallback or HeuristicAdvisor()
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            self.config.circuit_breaker_threshold, self.config.circuit_breaker_cooldown
        )
        self.system_prompt = system_prompt
        self.fallback_count = 0
        self.last_error: Optional[str] = None

    @classmethod
    def from_model_name(
        cls, model_name: Optional[str] = None, **kwargs
    ) -> "RemoteAdvisor":
        """Build the chat model with ``init_chat_model``.

        If the provider cannot be initialised the advisor is still returned
        and plays the fallback policy every turn.
        """
        cfg: AdvisorConfig = kwargs.get("config") or advisor_config
        name = model_name or cfg.model_name
        try:
            model = init_chat_model(name, temperature=cfg.temperature)
        except Exception as e:
            logger.warning(f"Remote advisor '{name}' unavailable, using local policy: {e}")
            model = None
        return cls(model=model, **kwargs)

    # --- Advisor entry point ---------------------------------------------------
    async def choose_token(self, ctx: AdvisorContext) -> AdvisorChoice:
        if self.model is None:
            return await self._fallback(ctx, "no remote model configured")
        if not self.circuit_breaker.can_execute():
            return await self._fallback(ctx, "circuit breaker open")

        try:
            choice = await self._ask_remote(ctx)
        except AdvisorError as e:
            self.circuit_breaker.record_failure()
            return await self._fallback(ctx, str(e))

        self.circuit_breaker.record_success()
        return choice

    async def _fallback(self, ctx: AdvisorContext, reason: str) -> AdvisorChoice:
        self.fallback_count += 1
        self.last_error = reason
        logger.warning(f"Remote advisor fell back for {ctx.player.name}: {reason}")
        choice = await self.fallback.choose_token(ctx)
        return AdvisorChoice(
            token_id=choice.token_id,
            commentary=choice.commentary,
            source=f"{self.name}:fallback",
        )

    # --- Remote call -----------------------------------------------------------
    async def _ask_remote(self, ctx: AdvisorContext) -> AdvisorChoice:
        messages = build_messages(ctx, self.system_prompt)
        try:
            response = await asyncio.wait_for(
                self.model.ainvoke(messages), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise AdvisorTimeoutError(
                f"Remote advisor timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            raise AdvisorError(f"Remote advisory call failed: {e}") from e
        logger.debug(f"Remote advisor response: {response}")
        return self._parse_response(response, ctx)

    # --- Response parsing ------------------------------------------------------
    def _parse_response(self, response: Any, ctx: AdvisorContext) -> AdvisorChoice:
        try:
            return self._read_choice(response, ctx)
        except AdvisorError:
            raise
        except Exception as e:
            raise AdvisorResponseError(f"Unreadable response: {e}") from e

    def _read_choice(self, response: Any, ctx: AdvisorContext) -> AdvisorChoice:
        content = self._get_content(response)
        if not content:
            raise AdvisorResponseError("Empty response from remote advisor")

        try:
            payload = parse_json(content)
        except Exception as e:
            raise AdvisorResponseError(f"Unparseable response: {str(content)[:100]}") from e
        if not isinstance(payload, dict):
            raise AdvisorResponseError(f"Expected a JSON object, got: {str(content)[:100]}")

        raw_id = payload.get("token_id", payload.get("tokenId"))
        token_id = _as_token_id(raw_id)
        if token_id is None:
            raise AdvisorResponseError(f"Missing or invalid token_id: {raw_id!r}")
        if token_id not in ctx.legal:
            raise AdvisorResponseError(
                f"Remote advisor chose {token_id}, legal ids are {sorted(ctx.legal)}"
            )

        commentary = payload.get("commentary") or payload.get("reason")
        if commentary is not None:
            commentary = str(commentary).strip()[:MAX_COMMENTARY_LENGTH] or None
        return AdvisorChoice(token_id=token_id, commentary=commentary, source=self.name)

    @staticmethod
    def _get_content(response: Any) -> Optional[str]:
        if isinstance(response, AIMessage):
            content = response.content
        elif isinstance(response, dict):
            content = response.get("content")
        else:
            content = response
        if content is None:
            return None
        if isinstance(content, list):
            # Content blocks: keep the text parts only
            return "".join(
                b if isinstance(b, str) else str(b.get("text", ""))
                for b in content
                if isinstance(b, (str, dict))
            )
        return content if isinstance(content, str) else str(content)


def _as_token_id(raw: Any) -> Optional[int]:
    """Integral token id from a JSON value; bools and fractions are rejected."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    return None
