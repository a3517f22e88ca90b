import unittest

from habit_engine import checkins, completion, declarations, habits
from habit_engine.store import default_store

TS = "2026-01-05T07:00:00Z"


class DeclarationGateTests(unittest.TestCase):
    def setUp(self):
        self.store = default_store()
        self.habit = habits.add_habit(self.store, "Journal", "everyday", "day", 1, None,
                                      "2026-01-01", needs_declaration=True)

    def test_checkin_counts_only_once_declared(self):
        checkins.add_quantity(self.store, self.habit["id"], "2026-01-05", 1)
        self.assertEqual(completion.raw_quantity(self.store, self.habit["id"], "2026-01-05"), 1)
        self.assertEqual(completion.counted_quantity(self.store, self.habit, "2026-01-05"), 0)
        self.assertFalse(completion.is_done_for_date(self.store, self.habit, "2026-01-05"))

        declarations.declare(self.store, self.habit["id"], "2026-01-05", TS, "Ten minutes tonight")
        self.assertEqual(completion.counted_quantity(self.store, self.habit, "2026-01-05"), 1)
        self.assertTrue(completion.is_done_for_date(self.store, self.habit, "2026-01-05"))

    def test_declared_but_unmet_is_not_done(self):
        declarations.declare(self.store, self.habit["id"], "2026-01-06", TS, "Plan")
        self.assertTrue(completion.is_declared(self.store, self.habit, "2026-01-06"))
        self.assertFalse(completion.is_done_for_date(self.store, self.habit, "2026-01-06"))

    def test_ungated_habit_counts_raw(self):
        habit = habits.add_habit(self.store, "Walk", "everyday", "day", 2, None, "2026-01-01")
        checkins.add_quantity(self.store, habit["id"], "2026-01-05", 2)
        self.assertTrue(completion.is_declared(self.store, habit, "2026-01-05"))
        self.assertTrue(completion.is_done_for_date(self.store, habit, "2026-01-05"))


class WeekSumTests(unittest.TestCase):
    def setUp(self):
        self.store = default_store()
        self.habit = habits.add_habit(self.store, "Gym", "everyday", "week", 3, None, "2026-01-07")

    def test_days_before_creation_are_ignored(self):
        for day in ("2026-01-05", "2026-01-06", "2026-01-07", "2026-01-09"):
            checkins.add_quantity(self.store, self.habit["id"], day, 1)
        self.assertEqual(completion.week_sums(self.store, self.habit, "2026-01-05"), (2, 2))
        self.assertFalse(completion.is_done_for_week(self.store, self.habit, "2026-01-05"))
        checkins.add_quantity(self.store, self.habit["id"], "2026-01-11", 1)
        self.assertTrue(completion.is_done_for_week(self.store, self.habit, "2026-01-05"))

    def test_gated_week_sum_separates_raw_and_counted(self):
        self.habit["needs_declaration"] = True
        checkins.add_quantity(self.store, self.habit["id"], "2026-01-08", 2)
        checkins.add_quantity(self.store, self.habit["id"], "2026-01-09", 2)
        declarations.declare(self.store, self.habit["id"], "2026-01-09", TS, "Leg day")
        self.assertEqual(completion.week_sums(self.store, self.habit, "2026-01-05"), (4, 2))


class PeriodOutcomeTests(unittest.TestCase):
    def test_day_habit_yields_scheduled_days(self):
        store = default_store()
        habit = habits.add_habit(store, "Stretch", "mon,wed,fri", "day", 1, None, "2026-01-01")
        checkins.add_quantity(store, habit["id"], "2026-01-07", 1)
        outcomes = completion.period_outcomes(store, habit, "2026-01-05", "2026-01-11")
        self.assertEqual(outcomes, [("2026-01-05", False), ("2026-01-07", True), ("2026-01-09", False)])

    def test_week_habit_yields_overlapping_weeks_after_creation(self):
        store = default_store()
        habit = habits.add_habit(store, "Gym", "everyday", "week", 1, None, "2026-01-06")
        checkins.add_quantity(store, habit["id"], "2026-01-13", 1)
        outcomes = completion.period_outcomes(store, habit, "2025-12-25", "2026-01-14")
        self.assertEqual(outcomes, [("2026-01-05", False), ("2026-01-12", True)])


if __name__ == "__main__":
    unittest.main()
