import unittest

from habit_engine import UsageError
from habit_engine import checkins, habits, stats
from habit_engine.store import default_store


class DayStatsTests(unittest.TestCase):
    def setUp(self):
        self.store = default_store()
        self.habit = habits.add_habit(self.store, "Read", "everyday", "day", 1, None, "2026-01-01")
        for day in (1, 2, 3, 5, 6, 7, 8, 10):
            checkins.add_quantity(self.store, "h0001", f"2026-01-{day:02d}", 1)

    def test_streaks_and_rate(self):
        row = stats.build_stats(self.store, [self.habit], "2026-01-01", "2026-01-10")[0]
        self.assertEqual(row["window"], {"from": "2026-01-01", "to": "2026-01-10"})
        self.assertEqual(row["current_streak"], 1)
        self.assertEqual(row["longest_streak"], 4)
        self.assertEqual(row["success_rate"], {"successes": 8, "eligible": 10, "rate": 0.8})

    def test_days_before_creation_are_not_eligible(self):
        row = stats.build_stats(self.store, [self.habit], "2025-12-25", "2026-01-03")[0]
        self.assertEqual(row["success_rate"]["eligible"], 3)
        self.assertEqual(row["current_streak"], 3)

    def test_empty_window_has_no_rate(self):
        row = stats.build_stats(self.store, [self.habit], "2025-12-01", "2025-12-31")[0]
        self.assertEqual(row["success_rate"], {"successes": 0, "eligible": 0, "rate": None})
        self.assertEqual((row["current_streak"], row["longest_streak"]), (0, 0))

    def test_bad_window(self):
        with self.assertRaises(UsageError):
            stats.build_stats(self.store, [self.habit], "2026-01-10", "2026-01-01")

    def test_default_day_window_is_thirty_days(self):
        self.assertEqual(stats.default_window(self.habit, "2026-01-31"), ("2026-01-02", "2026-01-31"))


class WeekStatsTests(unittest.TestCase):
    def setUp(self):
        self.store = default_store()
        self.habit = habits.add_habit(self.store, "Gym", "weekdays", "week", 3, None, "2026-01-01")
        for day in ("2026-01-05", "2026-01-06", "2026-01-07", "2026-01-12", "2026-01-13", "2026-01-14"):
            checkins.add_quantity(self.store, "h0001", day, 1)

    def test_weekly_streaks(self):
        row = stats.build_stats(self.store, [self.habit], "2026-01-01", "2026-01-31")[0]
        self.assertEqual(row["success_rate"]["eligible"], 5)
        self.assertEqual(row["success_rate"]["successes"], 2)
        self.assertEqual(row["current_streak"], 0)
        self.assertEqual(row["longest_streak"], 2)

    def test_default_week_window_is_twelve_full_weeks(self):
        self.assertEqual(stats.default_window(self.habit, "2026-01-31"), ("2025-11-10", "2026-02-01"))

    def test_rows_sorted_by_name(self):
        other = habits.add_habit(self.store, "archery", "everyday", "day", 1, None, "2026-01-01")
        rows = stats.build_default_stats(self.store, [self.habit, other], "2026-01-31")
        self.assertEqual([r["name"] for r in rows], ["archery", "Gym"])


if __name__ == "__main__":
    unittest.main()
