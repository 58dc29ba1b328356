"""Turn sequencing for one match.

The engine walks ``AWAITING_ROLL -> (ROLLED_NO_MOVES | AWAITING_SELECTION)
-> APPLYING -> (EXTRA_TURN | NEXT_TURN) -> AWAITING_ROLL`` and stops in
``MATCH_OVER``. It is the only code that mutates its match.
"""

from __future__ import annotations

import random
from typing import Dict, Mapping, Optional

from loguru import logger

from . import board, moves
from .advisors.base import AdvisorContext, MoveAdvisor
from .advisors.heuristic import HeuristicAdvisor
from .advisors.human import HumanAdvisor
from .config import config
from .events import EventLog, EventSink, GameEvent
from .exceptions import InvalidSelectionError, InvariantViolation, PhaseError
from .match import Match
from .player import Player
from .types import EventKind, MoveResult, TurnPhase


class TurnEngine:
    def __init__(
        self,
        match: Match,
        advisors: Optional[Mapping[int, MoveAdvisor]] = None,
        sink: Optional[EventSink] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.match = match
        self.advisors: Dict[int, MoveAdvisor] = dict(advisors or {})
        self.sink = sink
        self.rng = rng or random.Random(config.SEED)
        self.events = EventLog()
        for advisor in self.advisors.values():
            advisor.reset()

    # --- Advisors ---
    def advisor_for(self, player_index: int) -> MoveAdvisor:
        advisor = self.advisors.get(player_index)
        if advisor is None:
            player = self.match.players[player_index]
            advisor = HumanAdvisor() if player.is_human else HeuristicAdvisor()
            self.advisors[player_index] = advisor
        return advisor

    def human_advisor(self, player_index: Optional[int] = None) -> HumanAdvisor:
        """Input channel for a human seat (defaults to the active player)."""
        idx = self.match.current_index if player_index is None else player_index
        advisor = self.advisor_for(idx)
        if not isinstance(advisor, HumanAdvisor):
            raise TypeError(f"Seat {idx} is not controlled by a human")
        return advisor

    def advisor_context(self) -> AdvisorContext:
        m = self.match
        self._require_selection()
        player = m.current_player
        return AdvisorContext(
            player_index=m.current_index,
            player=player,
            dice_roll=m.pending_roll,
            legal=m.legal,
            moves=moves.describe_moves(player, m.pending_roll, m.players),
            snapshot=m.snapshot(),
        )

    # --- Dice ---
    def roll(self, value: Optional[int] = None) -> int:
        """Roll for the active player and compute the legal set.

        With no legal move the roll is forfeited and the turn passes on.
        """
        m = self.match
        m.ensure_active()
        if m.phase is not TurnPhase.AWAITING_ROLL:
            raise PhaseError(f"Cannot roll while {m.phase.value}")
        if value is None:
            dice = self.rng.randint(config.DICE_MIN, config.DICE_MAX)
        elif config.DICE_MIN <= value <= config.DICE_MAX:
            dice = value
        else:
            raise ValueError(f"Dice value must be between 1 and 6, got {value}")

        player = m.current_player
        m.turn_count += 1
        m.last_roll = dice
        m.extra_turn_pending = False
        self._emit(EventKind.TURN_START, f"{player.name}'s turn", turn=m.turn_count)
        self._emit(EventKind.ROLL, f"Rolled a {dice}", dice=dice)

        legal = moves.legal_moves(player, dice)
        if not legal:
            self._transition(TurnPhase.ROLLED_NO_MOVES)
            self._emit(EventKind.NO_LEGAL_MOVE, "No valid moves.", dice=dice)
            self._advance()
            return dice

        m.pending_roll = dice
        m.legal = legal
        self._transition(TurnPhase.AWAITING_SELECTION)
        return dice

    # --- Selection ---
    def select(self, token_id: int) -> MoveResult:
        """Human selection channel: ids outside the legal set are rejected."""
        m = self.match
        m.ensure_active()
        self._require_selection()
        if token_id not in m.legal:
            raise InvalidSelectionError(token_id, m.legal)
        return self._apply(token_id)

    def apply_advised(self, token_id: Optional[int]) -> MoveResult:
        """Advisor channel: an illegal id is replaced by the lowest legal id."""
        m = self.match
        m.ensure_active()
        self._require_selection()
        substituted = token_id not in m.legal
        if substituted:
            fallback = min(m.legal)
            logger.warning(
                f"Advisor for {m.current_player.name} chose illegal token {token_id!r}; "
                f"applying token {fallback} instead"
            )
            self._emit(
                EventKind.ADVISOR_FALLBACK,
                f"Token {token_id!r} is not playable, moving token {fallback}",
                requested=token_id,
                applied=fallback,
            )
            token_id = fallback
        result = self._apply(token_id)
        result.substituted = substituted
        return result

    # --- Applying ---
    def _apply(self, token_id: int) -> MoveResult:
        m = self.match
        player = m.current_player
        dice = m.pending_roll
        token = player.tokens[token_id]
        new_pos = board.destination(token.position, dice)
        if new_pos is None:
            raise InvariantViolation(
                f"Token {token.label} at {token.position} cannot move {dice}"
            )

        m.pending_roll = None
        m.legal = frozenset()
        self._transition(TurnPhase.APPLYING)

        old = token.position
        token.move_to(new_pos)
        result = MoveResult(
            player_index=m.current_index,
            token_id=token_id,
            old_position=old,
            new_position=new_pos,
            dice_roll=dice,
        )
        self._emit(
            EventKind.MOVE,
            f"Token {token_id}: {old} -> {new_pos}",
            token_id=token_id,
            old_position=old,
            new_position=new_pos,
        )
        self._resolve_captures(player, result)

        if player.has_won():
            m.winner_index = m.current_index
            result.winner_index = m.current_index
            self._transition(TurnPhase.MATCH_OVER)
            logger.info(f"{player.name} ({player.color.name}) won after {m.turn_count} turns")
            self._emit(EventKind.MATCH_WON, f"{player.name} won the match!")
        elif dice == config.EXIT_ROLL:
            m.extra_turn_pending = True
            result.extra_turn = True
            self._transition(TurnPhase.EXTRA_TURN)
            self._emit(EventKind.EXTRA_TURN, "Six rolled! Roll again.")
            self._transition(TurnPhase.AWAITING_ROLL)
        else:
            self._advance()

        m.check_invariants()
        return result

    def _resolve_captures(self, mover: Player, result: MoveResult) -> None:
        m = self.match
        for cap in moves.capture_victims(mover.color, result.new_position, m.players):
            victim = m.players[cap.player_index]
            victim.tokens[cap.token_id].send_home()
            result.captures.append(cap)
            self._emit(
                EventKind.CAPTURE,
                f"{mover.name} sent {victim.name} home!",
                mover=mover.color.name,
                victim=victim.color.name,
                victim_index=cap.player_index,
                token_id=cap.token_id,
                cell=cap.cell,
            )

    def _advance(self) -> None:
        m = self.match
        m.extra_turn_pending = False
        self._transition(TurnPhase.NEXT_TURN)
        prev = m.current_index
        m.current_index = (m.current_index + 1) % len(m.players)
        self._emit(
            EventKind.TURN_ADVANCED,
            f"Over to {m.current_player.name}",
            player_index=prev,
            next_index=m.current_index,
        )
        self._transition(TurnPhase.AWAITING_ROLL)

    # --- Async driving ---
    async def play_turn(self) -> Optional[MoveResult]:
        """Roll, obtain a choice from the active seat and apply it.

        Returns ``None`` when the roll had no legal move. If an earlier
        turn was cancelled while waiting for a choice, the pending roll is
        offered again instead of rolling.
        """
        m = self.match
        m.ensure_active()
        if m.phase is not TurnPhase.AWAITING_SELECTION:
            self.roll()
        if m.phase is not TurnPhase.AWAITING_SELECTION:
            return None

        advisor = self.advisor_for(m.current_index)
        choice = await advisor.choose_token(self.advisor_context())
        if choice.commentary:
            self._emit(
                EventKind.ADVISOR_COMMENTARY, choice.commentary, source=choice.source
            )
        if isinstance(advisor, HumanAdvisor):
            return self.select(choice.token_id)
        return self.apply_advised(choice.token_id)

    async def run(self, max_turns: Optional[int] = None) -> Optional[Player]:
        """Play until someone wins or ``max_turns`` rolls have been made."""
        limit = config.MAX_TURNS if max_turns is None else max_turns
        m = self.match
        while not m.is_over and m.turn_count < limit:
            await self.play_turn()
        if not m.is_over:
            logger.warning(f"Match stopped after {m.turn_count} turns without a winner")
        return m.winner

    # --- Presentation helpers ---
    def status_text(self) -> str:
        m = self.match
        if m.winner is not None:
            return f"{m.winner.name} won the match!"
        player = m.current_player
        if m.phase is TurnPhase.AWAITING_SELECTION:
            if player.is_human:
                return "Choose a piece to move"
            return f"{player.name} (AI) is calculating..."
        if not player.is_human:
            return f"{player.name} (AI) is about to roll..."
        return f"Your turn, {player.name}! Roll the dice."

    # --- Internals ---
    def _require_selection(self) -> None:
        m = self.match
        if m.phase is not TurnPhase.AWAITING_SELECTION or m.pending_roll is None:
            raise PhaseError(f"No selection pending (phase: {m.phase.value})")

    def _transition(self, phase: TurnPhase) -> None:
        logger.debug(f"{self.match.phase.value} -> {phase.value}")
        self.match.phase = phase

    def _emit(self, kind: EventKind, text: str, player_index: Optional[int] = None, **data) -> None:
        m = self.match
        idx = m.current_index if player_index is None else player_index
        player = m.players[idx]
        event = GameEvent(
            kind=kind,
            player_index=idx,
            sender=player.name,
            color=player.color,
            text=text,
            data=data,
        )
        for sink in (self.events, self.sink):
            if sink is None:
                continue
            try:
                sink.emit(event)
            except Exception as e:
                logger.opt(exception=e).warning(
                    f"Event sink {type(sink).__name__} failed on {kind.value}"
                )
