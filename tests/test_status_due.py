import unittest

from habit_engine import checkins, due, habits, status
from habit_engine.store import default_store


class StatusDueTestCase(unittest.TestCase):
    def setUp(self):
        self.store = default_store()
        habits.add_habit(self.store, "Read", "everyday", "day", 1, None, "2026-01-07")
        habits.add_habit(self.store, "Gym", "everyday", "week", 3, None, "2026-01-01")
        habits.add_habit(self.store, "Journal", "everyday", "day", 1, None, "2026-01-01",
                         needs_declaration=True)
        habits.add_habit(self.store, "Hike", "sat,sun", "day", 1, None, "2026-01-01")
        checkins.add_quantity(self.store, "h0001", "2026-01-07", 1)
        checkins.add_quantity(self.store, "h0002", "2026-01-06", 2)
        checkins.add_quantity(self.store, "h0003", "2026-01-07", 1)


class StatusTests(StatusDueTestCase):
    def test_week_section(self):
        data = status.build_status(self.store, "2026-01-07", week_of="2026-01-05")
        week = data["week"]
        self.assertEqual((week["id"], week["start_date"], week["end_date"]),
                         ("2026-W02", "2026-01-05", "2026-01-11"))
        rows = {r["id"]: r for r in week["habits"]}
        self.assertEqual(rows["h0001"]["scheduled_days"], 5)
        self.assertEqual(rows["h0001"]["done_scheduled_days"], 1)
        self.assertEqual(rows["h0004"]["scheduled_days"], 2)
        self.assertEqual((rows["h0002"]["target"], rows["h0002"]["quantity"]), (3, 2))

    def test_today_section(self):
        data = status.build_status(self.store, "2026-01-07")
        self.assertEqual(data["today"]["date"], "2026-01-07")
        rows = {r["id"]: r for r in data["today"]["habits"]}
        self.assertNotIn("h0004", rows)
        self.assertTrue(rows["h0001"]["done"])
        self.assertFalse(rows["h0002"]["done"])
        self.assertEqual(rows["h0002"]["quantity"], 2)
        journal = rows["h0003"]
        self.assertEqual((journal["raw_quantity"], journal["quantity"]), (1, 0))
        self.assertFalse(journal["declared"])
        self.assertFalse(journal["done"])

    def test_archived_habits_hidden_by_default(self):
        habits.archive_habit(self.store, "h0001", "2026-01-07")
        data = status.build_status(self.store, "2026-01-07")
        self.assertNotIn("h0001", [r["id"] for r in data["week"]["habits"]])
        data = status.build_status(self.store, "2026-01-07", include_archived=True)
        self.assertIn("h0001", [r["id"] for r in data["week"]["habits"]])


class DueTests(StatusDueTestCase):
    def test_due_lists_unfinished_scheduled_habits(self):
        data = due.build_due(self.store, "2026-01-07")
        self.assertEqual(data["date"], "2026-01-07")
        self.assertEqual([r["name"] for r in data["due"]], ["Gym", "Journal"])
        self.assertEqual([r["remaining"] for r in data["due"]], [1, 1])
        self.assertEqual(data["counts"], {"due": 2})

    def test_weekend_habit_due_on_saturday(self):
        data = due.build_due(self.store, "2026-01-10")
        self.assertIn("Hike", [r["name"] for r in data["due"]])


if __name__ == "__main__":
    unittest.main()
