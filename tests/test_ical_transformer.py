from __future__ import annotations

import os
import tempfile
import unittest
from datetime import date, timedelta

from icalendar import Calendar

from interpreter import ScheduleInterpreter
from transformer import ICalTransformer


ANCHOR = date(2026, 10, 19)


def _export(text: str, schedule_id: str = "abc123") -> tuple[bytes, list]:
    transformer = ICalTransformer()
    transformer.transform(ScheduleInterpreter().parse(text), schedule_id, ANCHOR)
    ics = transformer.to_ical()
    events = Calendar.from_ical(ics).walk("VEVENT")
    return ics, events


class TestICalTransformer(unittest.TestCase):
    def test_single_block_export(self) -> None:
        ics, events = _export("9:00 AM - 10:30 AM - Focus study session")

        self.assertEqual(len(events), 1)
        event = events[0]

        start = event.decoded("dtstart")
        end = event.decoded("dtend")
        self.assertEqual((start.date(), start.hour, start.minute), (ANCHOR, 9, 0))
        self.assertEqual((end.hour, end.minute), (10, 30))
        self.assertEqual(start.utcoffset(), timedelta(0))

        self.assertEqual(str(event["summary"]), "Focus study session")
        self.assertEqual(str(event["description"]), "Focus study session")
        self.assertEqual(str(event["uid"]), "abc123-900@studyroom.app")
        self.assertIn(b"RRULE:FREQ=DAILY", ics)
        self.assertIn(b"DTSTART:20261019T090000Z", ics)
        self.assertIn(b"DTSTAMP:", ics)

    def test_calendar_properties(self) -> None:
        ics, _ = _export("9:00 AM - 10:30 AM - Focus study session")
        calendar = Calendar.from_ical(ics)

        self.assertEqual(str(calendar["version"]), "2.0")
        self.assertEqual(str(calendar["prodid"]), "-//StudyRoom//Study Schedule//EN")
        self.assertEqual(str(calendar["method"]), "PUBLISH")
        self.assertEqual(str(calendar["x-wr-calname"]), "Study Schedule")

    def test_pm_times_are_converted(self) -> None:
        _, events = _export("1:15 PM - 2:00 PM - Chemistry review")
        event = events[0]
        self.assertEqual(event.decoded("dtstart").hour, 13)
        self.assertEqual(str(event["uid"]), "abc123-1315@studyroom.app")

    def test_only_time_blocks_become_events(self) -> None:
        text = "\n".join(
            [
                "MORNING ROUTINE",
                "7:00 AM - 8:00 AM - Breakfast",
                "- Stay hydrated",
                "Keep your phone away",
                "8:00 AM - 9:00 AM - Reading",
            ]
        )
        _, events = _export(text)
        self.assertEqual([str(e["summary"]) for e in events], ["Breakfast", "Reading"])

    def test_tip_contributes_no_event(self) -> None:
        _, events = _export("- Stay hydrated")
        self.assertEqual(events, [])

    def test_duplicate_start_times_get_distinct_uids(self) -> None:
        text = "9:00 - 10:00 Math\n9:00 - 9:30 Physics\n9:00 - 9:45 Biology"
        _, events = _export(text)
        self.assertEqual(
            [str(e["uid"]) for e in events],
            [
                "abc123-900@studyroom.app",
                "abc123-900-2@studyroom.app",
                "abc123-900-3@studyroom.app",
            ],
        )

    def test_range_past_midnight_ends_next_day(self) -> None:
        _, events = _export("11:00 PM - 1:00 AM - Sleep")
        start = events[0].decoded("dtstart")
        end = events[0].decoded("dtend")
        self.assertEqual(start.hour, 23)
        self.assertEqual(end.date(), ANCHOR + timedelta(days=1))
        self.assertEqual(end.hour, 1)

    def test_invalid_clock_values_are_skipped(self) -> None:
        with self.assertLogs("transformer.ical_transformer", level="WARNING"):
            _, events = _export("25:00 - 26:00 Nonsense\n9:00 - 10:00 Study")
        self.assertEqual(len(events), 1)

    def test_numbered_block_summary_has_no_leading_separator(self) -> None:
        ics, events = _export("1. 7:00 AM - 8:00 AM - Wake up and stretch")
        self.assertEqual(str(events[0]["summary"]), "Wake up and stretch")
        self.assertIn(b"SUMMARY:Wake up and stretch", ics)

    def test_missing_description_uses_default_summary(self) -> None:
        _, events = _export("9:00 AM - 10:00 AM")
        self.assertEqual(str(events[0]["summary"]), "Study Session")

    def test_save_writes_ics_file(self) -> None:
        transformer = ICalTransformer()
        transformer.transform(
            ScheduleInterpreter().parse("9:00 - 10:00 Study"), "abc123", ANCHOR
        )
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "schedule.ics")
            transformer.save(path)
            with open(path, "rb") as f:
                content = f.read()
        self.assertTrue(content.startswith(b"BEGIN:VCALENDAR"))
        self.assertIn(b"BEGIN:VEVENT", content)

    def test_serialize_before_transform_fails(self) -> None:
        with self.assertRaises(RuntimeError):
            ICalTransformer().to_ical()


if __name__ == "__main__":
    unittest.main()
