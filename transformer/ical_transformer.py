"""iCalendar transformer for interpreted schedules."""

from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from icalendar import Calendar, Event, vRecur

from interpreter.models import ScheduleSegment, SegmentKind, TimeRange
from services.logging_handler import setup_logger
from .base import BaseTransformer

logger = setup_logger(__name__)


class ICalTransformer(BaseTransformer):
    """Transformer that exports every timed block as a daily recurring event."""

    TIMEZONE = ZoneInfo("UTC")
    UID_DOMAIN = "studyroom.app"
    DEFAULT_SUMMARY = "Study Session"

    def __init__(self) -> None:
        self._calendar: Optional[Calendar] = None

    def _generate_uid(self, schedule_id: str, time_range: TimeRange, seen: dict[str, int]) -> str:
        """Generate the identifier for an event.

        The identifier is keyed by the schedule and the event's start time.
        A repeated start time within one schedule gets a ``-N`` suffix so
        calendar clients do not merge the events.

        Args:
            schedule_id: Identifier of the stored schedule.
            time_range: The event's matched time range.
            seen: Occurrence counts of base identifiers so far.

        Returns:
            Unique identifier string.
        """
        base = f"{schedule_id}-{time_range.start_hour_24}{time_range.start_minute:02d}"
        seen[base] = seen.get(base, 0) + 1
        if seen[base] > 1:
            base = f"{base}-{seen[base]}"
        return f"{base}@{self.UID_DOMAIN}"

    def _anchor(self, anchor_date: date, time_range: TimeRange) -> tuple[datetime, datetime]:
        """Place a time range on ``anchor_date``.

        Ranges whose end is not after the start run past midnight and end
        on the following day.

        Raises:
            ValueError: If the range holds an impossible clock value.
        """
        start_datetime = datetime.combine(anchor_date, time_range.start, tzinfo=self.TIMEZONE)
        end_datetime = datetime.combine(anchor_date, time_range.end, tzinfo=self.TIMEZONE)
        if end_datetime <= start_datetime:
            end_datetime += timedelta(days=1)
        return start_datetime, end_datetime

    def transform(
        self,
        segments: list[ScheduleSegment],
        schedule_id: str,
        anchor_date: Optional[date] = None
    ) -> Calendar:
        """Transform timed blocks into iCalendar format.

        Only timed blocks produce events; headers, tips and plain text
        are ignored.

        Args:
            segments: Segments produced by the schedule interpreter.
            schedule_id: Identifier of the stored schedule, used in UIDs.
            anchor_date: Day of the first occurrence (default: today, UTC).

        Returns:
            iCalendar Calendar object.
        """
        generated_at = datetime.now(self.TIMEZONE).replace(microsecond=0)
        anchor_date = anchor_date or generated_at.date()

        self._calendar = Calendar()
        self._calendar.add("prodid", "-//StudyRoom//Study Schedule//EN")
        self._calendar.add("version", "2.0")
        self._calendar.add("calscale", "GREGORIAN")
        self._calendar.add("method", "PUBLISH")
        self._calendar.add("x-wr-calname", "Study Schedule")
        self._calendar.add("x-wr-timezone", "UTC")

        seen_uids: dict[str, int] = {}

        for segment in segments:
            if segment.kind is not SegmentKind.TIMED_BLOCK or segment.time_range is None:
                continue

            try:
                start_datetime, end_datetime = self._anchor(anchor_date, segment.time_range)
            except ValueError as e:
                logger.warning("Skipping invalid time block %r: %s", segment.raw.strip(), e)
                continue

            ical_event = Event()
            ical_event.add("uid", self._generate_uid(schedule_id, segment.time_range, seen_uids))
            ical_event.add("dtstamp", generated_at)
            ical_event.add("dtstart", start_datetime)
            ical_event.add("dtend", end_datetime)
            ical_event.add("rrule", vRecur({"freq": "DAILY"}))
            ical_event.add("summary", segment.description or self.DEFAULT_SUMMARY)
            ical_event.add("description", segment.description)

            self._calendar.add_component(ical_event)

        logger.info(
            "Exported %d events for schedule %s",
            len(self._calendar.subcomponents),
            schedule_id,
        )
        return self._calendar

    def to_ical(self) -> bytes:
        """Serialize the last transformed calendar.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._calendar is None:
            raise RuntimeError("No calendar data. Call transform() first.")
        return self._calendar.to_ical()

    def save(self, output_path: str) -> None:
        """Save the calendar to an .ics file.

        Args:
            output_path: Path to the output file.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        with open(output_path, "wb") as f:
            f.write(self.to_ical())
