import re
import unittest

from habit_engine import InvalidDate, UsageError
from habit_engine import dates


class CivilConversionTests(unittest.TestCase):
    def test_epoch_and_known_days(self):
        self.assertEqual(dates.days_from_civil(1970, 1, 1), 0)
        self.assertEqual(dates.days_from_civil(2000, 3, 1), 11017)
        self.assertEqual(dates.civil_from_days(-1), (1969, 12, 31))

    def test_round_trip_across_eras(self):
        for days in range(-800000, 800000, 997):
            y, m, d = dates.civil_from_days(days)
            self.assertTrue(dates.is_valid_date(y, m, d))
            self.assertEqual(dates.days_from_civil(y, m, d), days)

    def test_round_trip_every_day_of_leap_cycle_edges(self):
        for year in (0, 1, 1600, 1900, 2000, 2024, 2100):
            for month in range(1, 13):
                for day in range(1, dates.days_in_month(year, month) + 1):
                    n = dates.days_from_civil(year, month, day)
                    self.assertEqual(dates.civil_from_days(n), (year, month, day))

    def test_year_zero_is_leap(self):
        self.assertEqual(dates.add_days("0000-03-01", -1), "0000-02-29")


class ParseDateTests(unittest.TestCase):
    def test_leap_day_rules(self):
        self.assertEqual(dates.validate_date("2024-02-29"), "2024-02-29")
        self.assertEqual(dates.validate_date("2000-02-29"), "2000-02-29")
        with self.assertRaises(InvalidDate):
            dates.parse_date("2026-02-29")
        with self.assertRaises(InvalidDate):
            dates.parse_date("1900-02-29")

    def test_rejects_malformed(self):
        for value in ("2026-13-01", "2026-00-10", "2026-01-32", "2026-1-01",
                      "26-01-01", "2026/01/01", "2026-01-01x", "", "２０２６-01-01"):
            with self.assertRaises(InvalidDate, msg=value):
                dates.parse_date(value)

    def test_invalid_date_is_usage_error(self):
        with self.assertRaises(UsageError) as ctx:
            dates.validate_date("nope", "from")
        self.assertEqual(ctx.exception.exit_code, 2)
        self.assertIn("Invalid from", str(ctx.exception))

    def test_surrounding_whitespace_is_trimmed(self):
        self.assertEqual(dates.validate_date(" 2026-01-05 "), "2026-01-05")


class OffsetTests(unittest.TestCase):
    def test_add_days_crosses_boundaries(self):
        self.assertEqual(dates.add_days("2026-12-31", 1), "2027-01-01")
        self.assertEqual(dates.add_days("2024-03-01", -1), "2024-02-29")
        self.assertEqual(dates.add_days("2026-01-31", 0), "2026-01-31")
        self.assertEqual(dates.add_days("2026-01-01", 36524), "2126-01-01")

    def test_results_outside_four_digit_years_are_rejected(self):
        with self.assertRaises(InvalidDate):
            dates.add_days("0000-01-01", -1)
        with self.assertRaises(InvalidDate):
            dates.add_days("9999-12-31", 1)
        self.assertEqual(dates.add_days("9999-12-30", 1), "9999-12-31")

    def test_days_between(self):
        self.assertEqual(dates.days_between("2026-01-01", "2026-12-31"), 364)
        self.assertEqual(dates.days_between("2026-01-10", "2026-01-01"), -9)


class IsoWeekTests(unittest.TestCase):
    def test_week_math(self):
        self.assertEqual(dates.iso_weekday("2026-01-31"), 6)
        self.assertEqual(dates.iso_weekday("1970-01-01"), 4)
        self.assertEqual(dates.iso_week_start("2026-01-31"), "2026-01-26")
        self.assertEqual(dates.iso_week_end("2026-01-31"), "2026-02-01")
        self.assertEqual(dates.iso_week_id("2026-01-26"), "2026-W05")

    def test_week_year_follows_thursday(self):
        self.assertEqual(dates.iso_week_id("2018-12-31"), "2019-W01")
        self.assertEqual(dates.iso_week_id("2020-12-28"), "2020-W53")
        self.assertEqual(dates.iso_week_id(dates.iso_week_start("2021-01-01")), "2020-W53")
        self.assertEqual(dates.iso_week_id("2021-01-04"), "2021-W01")
        self.assertEqual(dates.iso_week_id("2025-12-29"), "2026-W01")

    def test_week_bounds_contain_date(self):
        day = "2025-11-01"
        for _ in range(400):
            start = dates.iso_week_start(day)
            end = dates.iso_week_end(day)
            self.assertTrue(start <= day <= end)
            self.assertEqual(dates.days_between(start, end), 6)
            self.assertEqual(dates.iso_weekday(start), 1)
            day = dates.add_days(day, 1)


class DateRangeTests(unittest.TestCase):
    def test_inclusive_and_restartable(self):
        span = dates.date_range_inclusive("2026-02-27", "2026-03-02")
        expected = ["2026-02-27", "2026-02-28", "2026-03-01", "2026-03-02"]
        self.assertEqual(list(span), expected)
        self.assertEqual(list(span), expected)
        self.assertEqual(len(span), 4)
        self.assertEqual(list(reversed(span)), expected[::-1])

    def test_single_day(self):
        self.assertEqual(list(dates.date_range_inclusive("2026-01-05", "2026-01-05")), ["2026-01-05"])

    def test_from_after_to_fails(self):
        with self.assertRaises(UsageError):
            dates.date_range_inclusive("2026-01-06", "2026-01-05")

    def test_week_starts(self):
        weeks = list(dates.week_starts_inclusive("2026-01-01", "2026-01-31"))
        self.assertEqual(weeks, ["2025-12-29", "2026-01-05", "2026-01-12", "2026-01-19", "2026-01-26"])


class TimestampTests(unittest.TestCase):
    def test_accepts_offsets(self):
        for value in ("2026-01-02T08:00:00Z", "2026-01-02T08:00:00+02:00",
                      "2026-01-02T08:00:00.123-05:30", "2026-01-02 08:00:00z"):
            self.assertEqual(dates.validate_timestamp(value), value)

    def test_rejects_naive_or_invalid(self):
        for value in ("", "2026-01-02", "2026-01-02T08:00:00", "2026-02-30T08:00:00Z",
                      "2026-01-02T25:00:00Z", "2026-01-02T08:00:00+24:00", "yesterday"):
            with self.assertRaises(UsageError, msg=value):
                dates.validate_timestamp(value)


class TodayTests(unittest.TestCase):
    def test_today_is_a_date(self):
        self.assertTrue(re.match(r"^\d{4}-\d{2}-\d{2}$", dates.today()))


if __name__ == "__main__":
    unittest.main()
