import unittest

from lumina_ludo.advisors import MoveAdvisor
from lumina_ludo.engine import TurnEngine
from lumina_ludo.exceptions import (
    InvalidSelectionError,
    MatchOverError,
    PhaseError,
)
from lumina_ludo.match import Match
from lumina_ludo.player import Player
from lumina_ludo.types import Color, ControlMode, EventKind, TurnPhase


def make_engine(*colors, sink=None):
    colors = colors or (Color.RED, Color.GREEN)
    players = [Player(color=c, name=c.name.title()) for c in colors]
    return TurnEngine(Match(players=players), sink=sink)


class CountingAdvisor(MoveAdvisor):
    name = "counting"

    def __init__(self):
        self.resets = 0

    def reset(self):
        self.resets += 1


class RaisingSink:
    def __init__(self):
        self.calls = 0

    def emit(self, event):
        self.calls += 1
        raise RuntimeError("presentation is down")


class TestRollPhase(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.match = self.engine.match

    def test_random_roll_in_range(self):
        for _ in range(30):
            engine = make_engine()
            dice = engine.roll()
            self.assertTrue(1 <= dice <= 6)

    def test_no_legal_move_forfeits_and_advances(self):
        self.engine.roll(3)
        self.assertEqual(self.match.current_index, 1)
        self.assertEqual(self.match.phase, TurnPhase.AWAITING_ROLL)
        self.assertIsNone(self.match.pending_roll)
        self.assertEqual(self.match.players[0].positions(), [-1, -1, -1, -1])
        kinds = [e.kind for e in self.engine.events.events]
        self.assertEqual(
            kinds,
            [
                EventKind.TURN_START,
                EventKind.ROLL,
                EventKind.NO_LEGAL_MOVE,
                EventKind.TURN_ADVANCED,
            ],
        )

    def test_six_with_no_legal_move_still_advances(self):
        red = self.match.players[0]
        for t in red.tokens:
            t.position = 100
        red.tokens[0].position = 55
        self.engine.roll(6)
        self.assertEqual(self.match.current_index, 1)
        self.assertFalse(self.match.extra_turn_pending)

    def test_roll_stores_pending_selection(self):
        self.engine.roll(6)
        self.assertEqual(self.match.phase, TurnPhase.AWAITING_SELECTION)
        self.assertEqual(self.match.pending_roll, 6)
        self.assertEqual(self.match.legal, frozenset({0, 1, 2, 3}))

    def test_cannot_roll_twice(self):
        self.engine.roll(6)
        with self.assertRaises(PhaseError):
            self.engine.roll(4)
        self.assertEqual(self.match.pending_roll, 6)

    def test_forced_value_must_be_a_die_face(self):
        for bad in (0, 7, -1):
            with self.assertRaises(ValueError):
                self.engine.roll(bad)
        self.assertEqual(self.match.turn_count, 0)

    def test_select_without_roll(self):
        with self.assertRaises(PhaseError):
            self.engine.select(0)
        with self.assertRaises(PhaseError):
            self.engine.apply_advised(0)


class TestApplyAndSequencing(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.match = self.engine.match
        self.red, self.green = self.match.players

    def test_entering_from_base_on_six_grants_extra_turn(self):
        self.engine.roll(6)
        result = self.engine.select(2)
        self.assertEqual(self.red.tokens[2].position, 0)
        self.assertTrue(result.extra_turn)
        self.assertEqual(self.match.current_index, 0)
        self.assertEqual(self.match.phase, TurnPhase.AWAITING_ROLL)
        self.assertTrue(self.match.extra_turn_pending)
        self.assertEqual(len(self.engine.events.of_kind(EventKind.EXTRA_TURN)), 1)

    def test_other_rolls_advance(self):
        self.red.tokens[0].position = 10
        self.engine.roll(4)
        result = self.engine.select(0)
        self.assertEqual(self.red.tokens[0].position, 14)
        self.assertFalse(result.extra_turn)
        self.assertEqual(self.match.current_index, 1)

    def test_advance_is_circular(self):
        engine = make_engine(Color.RED, Color.GREEN, Color.YELLOW, Color.BLUE)
        for expected in (1, 2, 3, 0, 1):
            engine.roll(1)
            self.assertEqual(engine.match.current_index, expected)

    def test_invalid_human_selection_is_rejected_without_mutation(self):
        self.red.tokens[0].position = 10
        self.engine.roll(3)
        with self.assertRaises(InvalidSelectionError) as ctx:
            self.engine.select(1)
        self.assertEqual(ctx.exception.legal, frozenset({0}))
        self.assertEqual(self.red.positions(), [10, -1, -1, -1])
        self.assertEqual(self.match.phase, TurnPhase.AWAITING_SELECTION)
        self.assertEqual(self.match.pending_roll, 3)
        # resubmission works
        self.engine.select(0)
        self.assertEqual(self.red.tokens[0].position, 13)

    def test_advised_illegal_choice_is_substituted(self):
        self.red.tokens[0].position = 20
        self.red.tokens[1].position = 30
        self.engine.roll(2)
        result = self.engine.apply_advised(3)
        self.assertTrue(result.substituted)
        self.assertEqual(result.token_id, 0)
        self.assertEqual(self.red.positions(), [22, 30, -1, -1])
        fallback = self.engine.events.of_kind(EventKind.ADVISOR_FALLBACK)
        self.assertEqual(fallback[0].data, {"requested": 3, "applied": 0})

    def test_advised_none_choice_is_substituted(self):
        self.engine.roll(6)
        result = self.engine.apply_advised(None)
        self.assertEqual(result.token_id, 0)

    def test_capture_sends_opponent_to_base(self):
        # red relative 5 == absolute 5 == green relative 44
        self.red.tokens[0].position = 2
        self.green.tokens[1].position = 44
        self.engine.roll(3)
        result = self.engine.select(0)
        self.assertEqual(self.green.tokens[1].position, -1)
        self.assertEqual(len(result.captures), 1)
        events = self.engine.events.of_kind(EventKind.CAPTURE)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].data["mover"], "RED")
        self.assertEqual(events[0].data["victim"], "GREEN")
        self.assertEqual(events[0].text, "Red sent Green home!")

    def test_multiple_captures_in_one_step(self):
        engine = make_engine(Color.RED, Color.GREEN, Color.YELLOW)
        red, green, yellow = engine.match.players
        red.tokens[0].position = 2
        green.tokens[0].position = 44
        green.tokens[2].position = 44
        yellow.tokens[1].position = 31
        engine.roll(3)
        result = engine.select(0)
        self.assertEqual(len(result.captures), 3)
        self.assertEqual(green.positions(), [-1, -1, -1, -1])
        self.assertEqual(yellow.positions(), [-1, -1, -1, -1])
        self.assertEqual(len(engine.events.of_kind(EventKind.CAPTURE)), 3)

    def test_safe_cell_protects(self):
        # absolute 8 is safe; green relative 47
        self.red.tokens[0].position = 5
        self.green.tokens[0].position = 47
        self.engine.roll(3)
        result = self.engine.select(0)
        self.assertEqual(result.captures, [])
        self.assertEqual(self.green.tokens[0].position, 47)

    def test_own_tokens_stack(self):
        self.red.tokens[0].position = 5
        self.red.tokens[1].position = 2
        self.engine.roll(3)
        result = self.engine.select(1)
        self.assertEqual(result.captures, [])
        self.assertEqual(self.red.positions(), [5, 5, -1, -1])

    def test_reaching_finish_and_winning(self):
        for t in self.red.tokens[:3]:
            t.position = 100
        self.red.tokens[3].position = 56
        self.engine.roll(1)
        result = self.engine.select(3)
        self.assertEqual(self.red.tokens[3].position, 100)
        self.assertEqual(result.winner_index, 0)
        self.assertEqual(self.match.phase, TurnPhase.MATCH_OVER)
        self.assertIs(self.match.winner, self.red)
        self.assertEqual(len(self.engine.events.of_kind(EventKind.MATCH_WON)), 1)
        with self.assertRaises(MatchOverError):
            self.engine.roll(3)
        with self.assertRaises(MatchOverError):
            self.engine.select(0)

    def test_winning_on_a_six_grants_no_extra_turn(self):
        for t in self.red.tokens[:3]:
            t.position = 100
        self.red.tokens[3].position = 51
        self.engine.roll(6)
        result = self.engine.select(3)
        self.assertFalse(result.extra_turn)
        self.assertFalse(self.match.extra_turn_pending)
        self.assertTrue(self.match.is_over)
        self.assertEqual(self.engine.events.of_kind(EventKind.EXTRA_TURN), [])

    def test_failing_sink_does_not_break_turns(self):
        sink = RaisingSink()
        engine = make_engine(sink=sink)
        engine.roll(6)
        engine.select(0)
        self.assertEqual(engine.match.players[0].tokens[0].position, 0)
        self.assertGreater(sink.calls, 0)
        self.assertGreater(len(engine.events), 0)


class TestMatchSetup(unittest.TestCase):
    def test_bound_advisors_are_reset(self):
        advisor = CountingAdvisor()
        players = [Player(color=Color.RED), Player(color=Color.GREEN)]
        TurnEngine(Match(players=players), advisors={1: advisor})
        self.assertEqual(advisor.resets, 1)

    def test_snapshot_is_read_only(self):
        engine = make_engine(Color.RED, Color.BLUE)
        engine.match.players[1].tokens[2].position = 30
        snap = engine.match.snapshot()
        self.assertEqual(snap.positions.shape, (2, 4))
        self.assertEqual(snap.positions_for(Color.BLUE), (-1, -1, 30, -1))
        self.assertEqual(snap.to_dict()["RED"], [-1, -1, -1, -1])
        with self.assertRaises(ValueError):
            snap.positions[0, 0] = 5
        with self.assertRaises(ValueError):
            snap.positions_for(Color.GREEN)


class TestStatusText(unittest.TestCase):
    def test_human_and_ai_prompts(self):
        players = [
            Player(color=Color.RED, name="You"),
            Player(color=Color.GREEN, name="Zed", control=ControlMode.ADVISOR),
        ]
        engine = TurnEngine(Match(players=players))
        self.assertEqual(engine.status_text(), "Your turn, You! Roll the dice.")
        engine.roll(6)
        self.assertEqual(engine.status_text(), "Choose a piece to move")
        engine.select(0)
        engine.roll(2)
        engine.select(0)
        self.assertEqual(engine.status_text(), "Zed (AI) is about to roll...")
        engine.roll(6)
        self.assertEqual(engine.status_text(), "Zed (AI) is calculating...")

    def test_winner_text(self):
        engine = make_engine()
        red = engine.match.players[0]
        for t in red.tokens:
            t.position = 100
        red.tokens[0].position = 56
        engine.roll(1)
        engine.select(0)
        self.assertEqual(engine.status_text(), "Red won the match!")


if __name__ == "__main__":
    unittest.main()
