import asyncio
import unittest

from lumina_ludo.advisors import HumanAdvisor
from lumina_ludo.exceptions import InvalidSelectionError

from helpers import context_for


class TestHumanAdvisor(unittest.IsolatedAsyncioTestCase):
    async def _wait_until_awaiting(self, advisor):
        for _ in range(10):
            if advisor.awaiting_input:
                return
            await asyncio.sleep(0)
        self.fail("advisor never started waiting")

    async def test_submit_without_pending_turn(self):
        advisor = HumanAdvisor()
        self.assertFalse(advisor.awaiting_input)
        with self.assertRaises(InvalidSelectionError):
            advisor.submit(0)

    async def test_waits_for_legal_submission(self):
        advisor = HumanAdvisor()
        ctx = context_for(3, red=[10, -1, -1, -1])
        task = asyncio.create_task(advisor.choose_token(ctx))
        await self._wait_until_awaiting(advisor)
        self.assertEqual(advisor.pending_legal, frozenset({0}))

        with self.assertRaises(InvalidSelectionError) as err:
            advisor.submit(2)
        self.assertEqual(err.exception.legal, frozenset({0}))
        self.assertTrue(advisor.awaiting_input)

        advisor.submit(0)
        choice = await asyncio.wait_for(task, timeout=1)
        self.assertEqual(choice.token_id, 0)
        self.assertEqual(choice.source, "human")
        self.assertFalse(advisor.awaiting_input)
        self.assertEqual(advisor.pending_legal, frozenset())

    async def test_cancel_clears_waiting_state(self):
        advisor = HumanAdvisor()
        task = asyncio.create_task(advisor.choose_token(context_for(6)))
        await self._wait_until_awaiting(advisor)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task
        self.assertFalse(advisor.awaiting_input)

    async def test_reset(self):
        advisor = HumanAdvisor()
        advisor.reset()
        self.assertFalse(advisor.awaiting_input)
        self.assertEqual(advisor.pending_legal, frozenset())


if __name__ == "__main__":
    unittest.main()
