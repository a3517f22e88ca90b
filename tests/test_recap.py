import unittest

from habit_engine import UsageError
from habit_engine import checkins, habits, recap
from habit_engine.store import default_store


class RangeTests(unittest.TestCase):
    def test_named_ranges_end_today(self):
        self.assertEqual(recap.compute_range_dates("ytd", "2026-01-31"), ("2026-01-01", "2026-01-31"))
        self.assertEqual(recap.compute_range_dates("month", "2026-01-31"), ("2026-01-02", "2026-01-31"))
        self.assertEqual(recap.compute_range_dates("week", "2026-01-31"), ("2026-01-25", "2026-01-31"))
        with self.assertRaises(UsageError):
            recap.compute_range_dates("decade", "2026-01-31")

    def test_percent_rounds_half_up(self):
        self.assertEqual(recap._percent(0.125), 13)
        self.assertEqual(recap._percent(2 / 3), 67)
        self.assertEqual(recap._percent(1 / 3), 33)
        self.assertIsNone(recap._percent(None))


class RecapTests(unittest.TestCase):
    def setUp(self):
        self.store = default_store()
        habits.add_habit(self.store, "Water", "everyday", "day", 8, None, "2026-01-01")
        habits.add_habit(self.store, "Alpha", "everyday", "day", 1, None, "2026-01-01")
        habits.add_habit(self.store, "Zen", "everyday", "day", 1, None, "2026-02-05")
        for day in range(2, 12):
            checkins.add_quantity(self.store, "h0001", f"2026-01-{day:02d}", 8)
        checkins.add_quantity(self.store, "h0001", "2026-01-20", 7)

    def _recap(self, **kwargs):
        return recap.build_recap(self.store, habits.list_habits(self.store), "month", "2026-01-31", **kwargs)

    def test_water_month_recap(self):
        row = [r for r in self._recap() if r["habit_id"] == "h0001"][0]
        self.assertEqual(row["range"], {"kind": "month", "from": "2026-01-02", "to": "2026-01-31"})
        self.assertEqual(row["target_label"], "8/day")
        self.assertEqual((row["successes"], row["eligible"]), (10, 30))
        self.assertEqual(row["percent"], 33)

    def test_sorted_by_percent_with_empty_rows_last(self):
        self.assertEqual([r["name"] for r in self._recap()], ["Water", "Alpha", "Zen"])
        self.assertEqual([r["name"] for r in self._recap(behind_first=True)], ["Alpha", "Water", "Zen"])
        self.assertIsNone(self._recap()[-1]["percent"])

    def test_progress_bar(self):
        self.assertEqual(recap.render_progress_bar(33), "███░░░░░░░")
        self.assertEqual(recap.render_progress_bar(100), "██████████")
        self.assertEqual(recap.render_progress_bar(0), "░░░░░░░░░░")
        self.assertEqual(recap.render_progress_bar(None), "----------")
        self.assertEqual(recap.render_progress_bar(50, width=4), "██░░")


if __name__ == "__main__":
    unittest.main()
