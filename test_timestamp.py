# test_timestamp.py
#
# Run:
#   python -m unittest -v

import unittest

from timestamp import OrgTimestamp, match_timestamp


class TestMatchTimestamp(unittest.TestCase):
    def test_date_weekday_and_time(self):
        ts = match_timestamp("2022-12-22 Thu 11:00")
        self.assertEqual((ts.year, ts.month, ts.day), (2022, 12, 22))
        self.assertEqual(ts.weekday, "Thu")
        self.assertEqual(ts.start_time, "11:00")
        self.assertIsNone(ts.end_time)
        self.assertFalse(ts.is_range)

    def test_all_parts(self):
        ts = match_timestamp("2023-1-5 Mon. 9:05-10:30 +1w -2d")
        self.assertEqual(ts.date, "2023-01-05")
        self.assertEqual(ts.weekday, "Mon")
        self.assertEqual(ts.start_time, "09:05")
        self.assertEqual(ts.end_time, "10:30")
        self.assertTrue(ts.is_range)
        self.assertEqual(ts.repeater, "+1w")
        self.assertEqual(ts.delay, "-2d")

    def test_repeater_and_delay_variants(self):
        ts = match_timestamp("2024-02-29 .+1m --1d")
        self.assertEqual(ts.repeater, ".+1m")
        self.assertEqual(ts.delay, "--1d")

        ts = match_timestamp("2024-02-29 ++2d")
        self.assertEqual(ts.repeater, "++2d")
        self.assertIsNone(ts.delay)

    def test_date_only(self):
        self.assertEqual(
            match_timestamp("2021-03-04"),
            OrgTimestamp(raw="2021-03-04", year=2021, month=3, day=4),
        )

    def test_unknown_tokens_are_ignored(self):
        ts = match_timestamp("2022-12-22 ??? 11:00")
        self.assertEqual(ts.start_time, "11:00")
        self.assertIsNone(ts.weekday)

    def test_not_a_date_keeps_raw(self):
        ts = match_timestamp("someday")
        self.assertEqual(ts.raw, "someday")
        self.assertIsNone(ts.year)
        self.assertIsNone(ts.date)


if __name__ == "__main__":
    unittest.main(verbosity=2)
