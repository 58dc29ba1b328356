from __future__ import annotations

import json

from langchain_core.messages import HumanMessage, SystemMessage

from ..types import Move
from .base import AdvisorContext

SYSTEM_PROMPT = (
    "You are an online Ludo player. Given the dice roll, every token position and "
    "the legal moves, choose the single best token to move. Respond ONLY with a JSON "
    "object with the fields 'token_id' (integer, one of the legal ids) and "
    "'commentary' (a short, human-like chat message about the move; emojis and "
    "friendly trash talk are fine)."
)

RULES = """POSITIONS (each player's own frame):
- -1: in base, needs a 6 to enter at 0
- 0-51: shared ring; 52-56: private home stretch; 100: finished
- Landing on an opponent outside a safe cell sends it back to base
- Exact count needed: one step past 56 finishes, further is not allowed

STRATEGY PRIORITIES:
1. Capture an opponent's token if possible.
2. Move a token into the finish.
3. If the roll is 6 and you have tokens in base, bring one out.
4. Move the token furthest along the board."""

MOVE_TEMPLATE = (
    "Token {token_id}: {old_position} -> {new_position}, captures={captures}, "
    "finishes={finishes}, exits_base={exits_base}"
)


def describe_move(move: Move) -> str:
    return MOVE_TEMPLATE.format(
        token_id=move.token_id,
        old_position=move.old_position,
        new_position=move.new_position,
        captures=len(move.captures),
        finishes=move.finishes,
        exits_base=move.exits_base,
    )


def create_prompt(ctx: AdvisorContext) -> str:
    """Human turn prompt: active color, dice, all tokens and the legal moves."""
    positions = ctx.snapshot.to_dict()
    mine = list(ctx.snapshot.positions_for(ctx.player.color))
    positions.pop(ctx.player.color.name, None)
    moves_text = "\n- ".join(describe_move(mv) for mv in ctx.moves)
    return (
        f"You are {ctx.player.name} playing as {ctx.player.color.name}.\n"
        f"Dice roll: {ctx.dice_roll}\n"
        f"Your tokens (id = index): {json.dumps(mine)}\n"
        f"Opponents: {json.dumps(positions)}\n\n"
        f"{RULES}\n\n"
        f"Legal moves (choose one):\n- {moves_text}\n"
        'Respond with JSON, e.g. {"token_id": 2, "commentary": "Sending you home!"}'
    )


def build_messages(ctx: AdvisorContext, system_prompt: str = SYSTEM_PROMPT) -> list:
    return [
        SystemMessage(content=system_prompt),
        HumanMessage(content=create_prompt(ctx)),
    ]
