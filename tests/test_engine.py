from __future__ import annotations

import random
import unittest
from collections import Counter
from typing import Optional

from roulette.draw import (
    EngineState,
    HistoryLog,
    ParticipantPool,
    SelectionEngine,
    SettingsStore,
    TaskQueue,
)
from roulette.errors import (
    AlreadyInProgressError,
    EmptyPoolError,
    InvalidStateError,
    NoTasksRemainingError,
)
from roulette.models import RouletteMode, TaskStatus


class BrokenRandom(random.Random):
    def choice(self, seq):  # type: ignore[override]
        raise RuntimeError("entropy source failed")


class FailsOnSecondChoice(random.Random):
    def __init__(self) -> None:
        super().__init__(3)
        self.calls = 0

    def choice(self, seq):  # type: ignore[override]
        self.calls += 1
        if self.calls == 2:
            raise RuntimeError("entropy source failed")
        return super().choice(seq)


class SelectionEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.pool = ParticipantPool()
        self.queue = TaskQueue()
        self.settings = SettingsStore()
        self.history = HistoryLog()
        self.engine = self._engine(random.Random(42))

    def _engine(self, rng: Optional[random.Random]) -> SelectionEngine:
        return SelectionEngine(
            self.pool, self.queue, self.settings, self.history, rng=rng
        )

    def test_single_participant_scenario(self) -> None:
        self.pool.add("João Silva")

        result = self.engine.draw()
        self.assertIs(result.mode, RouletteMode.PARTICIPANTS)
        self.assertEqual(result.participant.name, "João Silva")
        self.assertIsNone(result.task)
        self.assertEqual(self.history.count(), 1)
        self.assertIs(self.engine.state, EngineState.RESOLVED)
        self.assertEqual(self.engine.current_result, result)

        self.assertEqual(self.engine.resolve(), result)
        self.assertIs(self.engine.state, EngineState.IDLE)
        self.assertIsNone(self.engine.current_result)

        again = self.engine.draw()
        self.assertEqual(again.participant.name, "João Silva")
        self.assertEqual(self.pool.count(), 1)
        self.assertEqual(self.history.count(), 2)

    def test_winner_is_always_a_current_member(self) -> None:
        members = self.pool.add_bulk(["Ana", "Bruno", "Carla"])
        ids = {p.id: p.name for p in members}
        for _ in range(50):
            result = self.engine.draw()
            self.assertIn(result.participant.id, ids)
            self.assertEqual(result.participant.name, ids[result.participant.id])
            self.engine.resolve()

    def test_empty_pool_fails_without_touching_history(self) -> None:
        with self.assertRaises(EmptyPoolError):
            self.engine.draw()
        self.assertEqual(self.history.count(), 0)
        self.assertIs(self.engine.state, EngineState.IDLE)

    def test_draw_before_resolve_is_rejected(self) -> None:
        self.pool.add_bulk(["Ana", "Bruno"])
        self.settings.set_auto_remove(True)
        first = self.engine.draw()
        pool_before = self.pool.list()
        history_before = self.history.list()

        with self.assertRaises(AlreadyInProgressError):
            self.engine.draw()
        self.assertEqual(self.pool.list(), pool_before)
        self.assertEqual(self.history.list(), history_before)
        self.assertEqual(self.engine.current_result, first)

        self.engine.resolve()
        self.engine.draw()

    def test_resolve_without_result_is_invalid(self) -> None:
        with self.assertRaises(InvalidStateError):
            self.engine.resolve()

    def test_auto_remove_drops_exactly_the_winner(self) -> None:
        self.pool.add_bulk(["Ana", "Bruno", "Carla"])
        self.settings.set_auto_remove(True)
        result = self.engine.draw()
        remaining = self.pool.list()
        self.assertEqual(len(remaining), 2)
        self.assertNotIn(result.participant.id, [p.id for p in remaining])
        self.assertTrue(self.history.latest().removed)

    def test_auto_remove_empties_pool_then_fails(self) -> None:
        self.pool.add_bulk(["Ana", "Bruno"])
        self.settings.set_auto_remove(True)
        winners = set()
        for _ in range(2):
            winners.add(self.engine.draw().participant.name)
            self.engine.resolve()
        self.assertEqual(winners, {"Ana", "Bruno"})
        with self.assertRaises(EmptyPoolError):
            self.engine.draw()

    def test_history_snapshot_survives_removal(self) -> None:
        participant = self.pool.add("Ana")
        self.settings.set_mode(RouletteMode.TASKS)
        task = self.queue.add("Deploy", "Ship v2")
        self.engine.draw()
        self.pool.remove(participant.id)
        self.queue.clear()

        entry = self.history.latest()
        self.assertEqual(entry.winner_participant_id, participant.id)
        self.assertEqual(entry.winner_participant_name, "Ana")
        self.assertEqual(entry.task_id, task.id)
        self.assertEqual(entry.task_name, "Deploy")
        self.assertEqual(entry.task_description, "Ship v2")

    def test_tasks_mode_completes_one_task_per_draw(self) -> None:
        self.pool.add_bulk(["Ana", "Bruno"])
        self.queue.add_bulk(["Deploy", "Review", "Retro"])
        self.settings.set_mode(RouletteMode.TASKS)

        assigned = []
        for expected_pending in (2, 1, 0):
            result = self.engine.draw()
            self.assertIsNotNone(result.task)
            assigned.append(result.task.id)
            self.assertEqual(len(self.queue.pending()), expected_pending)
            self.assertEqual(len(self.queue.completed()), 3 - expected_pending)
            self.assertIs(self.queue.get(result.task.id).status, TaskStatus.COMPLETED)
            self.engine.resolve()

        self.assertEqual(len(set(assigned)), 3)
        self.assertEqual(self.history.count(), 3)
        self.assertEqual(self.pool.count(), 2)
        with self.assertRaises(NoTasksRemainingError):
            self.engine.draw()
        self.assertEqual(self.history.count(), 3)

    def test_tasks_mode_checks_participants_first(self) -> None:
        self.settings.set_mode(RouletteMode.TASKS)
        with self.assertRaises(EmptyPoolError):
            self.engine.draw()
        self.queue.add("Deploy")
        with self.assertRaises(EmptyPoolError):
            self.engine.draw()
        self.pool.add("Ana")
        self.assertEqual(self.engine.draw().task.name, "Deploy")

    def test_tasks_mode_auto_remove_applies(self) -> None:
        self.pool.add_bulk(["Ana", "Bruno"])
        self.queue.add_bulk(["Deploy", "Review"])
        self.settings.set_mode(RouletteMode.TASKS)
        self.settings.set_auto_remove(True)
        result = self.engine.draw()
        self.assertIsNone(self.pool.get(result.participant.id))
        self.assertEqual(self.pool.count(), 1)

    def test_mode_switch_keeps_stores(self) -> None:
        self.pool.add("Ana")
        self.queue.add("Deploy")
        self.settings.set_mode(RouletteMode.TASKS)
        self.settings.set_mode(RouletteMode.PARTICIPANTS)
        result = self.engine.draw()
        self.assertIsNone(result.task)
        self.assertEqual(len(self.queue.pending()), 1)
        self.assertIsNone(self.history.latest().task_id)

    def test_unexpected_failure_returns_to_idle(self) -> None:
        self.pool.add("Ana")
        engine = self._engine(BrokenRandom())
        with self.assertRaises(RuntimeError):
            engine.draw()
        self.assertIs(engine.state, EngineState.IDLE)
        self.assertEqual(self.history.count(), 0)
        self.assertEqual(self.pool.count(), 1)

    def test_failure_during_task_choice_changes_nothing(self) -> None:
        self.pool.add_bulk(["Ana", "Bruno"])
        self.queue.add_bulk(["Deploy", "Review"])
        self.settings.set_mode(RouletteMode.TASKS)
        self.settings.set_auto_remove(True)
        engine = self._engine(FailsOnSecondChoice())
        with self.assertRaises(RuntimeError):
            engine.draw()
        self.assertIs(engine.state, EngineState.IDLE)
        self.assertEqual(len(self.queue.pending()), 2)
        self.assertEqual(self.queue.completed(), [])
        self.assertEqual(self.pool.count(), 2)
        self.assertEqual(self.history.count(), 0)

        result = engine.draw()
        self.assertIsNotNone(result.task)
        self.assertEqual(len(self.queue.pending()), 1)

    def test_result_to_json(self) -> None:
        self.pool.add("Ana")
        self.settings.set_mode(RouletteMode.TASKS)
        self.queue.add("Deploy", "Ship v2")
        data = self.engine.draw().to_json()
        self.assertEqual(data["mode"], "tasks")
        self.assertEqual(data["participant"]["name"], "Ana")
        self.assertEqual(data["task"]["name"], "Deploy")
        self.assertEqual(data["task"]["description"], "Ship v2")

    def test_default_random_source(self) -> None:
        self.pool.add_bulk(["Ana", "Bruno"])
        engine = self._engine(None)
        self.assertIn(engine.draw().participant.name, {"Ana", "Bruno"})


class SelectionFairnessTests(unittest.TestCase):
    def test_uniform_over_ten_thousand_draws(self) -> None:
        pool = ParticipantPool()
        members = pool.add_bulk(["Ana", "Bruno", "Carla", "Davi", "Eva"])
        engine = SelectionEngine(
            pool, TaskQueue(), SettingsStore(), HistoryLog(), rng=random.Random(2024)
        )
        wins: Counter = Counter()
        trials = 10_000
        for _ in range(trials):
            wins[engine.draw().participant.id] += 1
            engine.resolve()

        self.assertEqual(set(wins), {p.id for p in members})
        for participant in members:
            share = wins[participant.id] / trials
            self.assertGreaterEqual(share, 0.15, participant.name)
            self.assertLessEqual(share, 0.25, participant.name)

    def test_pending_tasks_are_drawn_uniformly(self) -> None:
        counts: Counter = Counter()
        rng = random.Random(7)
        for _ in range(3000):
            pool = ParticipantPool()
            pool.add("Ana")
            queue = TaskQueue()
            queue.add_bulk(["A", "B", "C"])
            settings = SettingsStore()
            settings.set_mode(RouletteMode.TASKS)
            engine = SelectionEngine(pool, queue, settings, HistoryLog(), rng=rng)
            counts[engine.draw().task.name] += 1
        for name in ("A", "B", "C"):
            self.assertGreater(counts[name], 800)


if __name__ == "__main__":
    unittest.main()
