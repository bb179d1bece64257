"""Classifier turning freeform schedule text into display segments."""

from .models import ScheduleSegment, SegmentKind
from .patterns import (
    NUMBERED_HEADING_PATTERN,
    infer_category,
    is_section_header,
    match_time_range,
    strip_time_range,
    tip_marker,
)


class ScheduleInterpreter:
    """Line-oriented classifier for AI-generated schedule text.

    Each non-blank line becomes exactly one segment, in input order.
    Rules are tried in order and the first match wins:

    1. section header: numbered (``"1. ..."``) or all-caps, without a time range
    2. timed block: contains a ``H:MM [AM|PM] - H:MM [AM|PM]`` range
    3. tip: starts with ``-``, ``•`` or ``*``
    4. plain text

    The interpreter holds no state; the same text always yields the same
    segments.
    """

    def parse(self, text: str) -> list[ScheduleSegment]:
        """Classify every non-blank line of ``text``.

        Args:
            text: Newline-delimited schedule text.

        Returns:
            Segments in the order their lines appear.
        """
        segments: list[ScheduleSegment] = []
        for line in text.splitlines():
            if not line.strip():
                continue
            segments.append(self.classify(line))
        return segments

    def classify(self, line: str) -> ScheduleSegment:
        stripped = line.strip()
        time_range = match_time_range(stripped)

        if is_section_header(stripped, time_range is not None):
            heading = NUMBERED_HEADING_PATTERN.sub("", stripped).rstrip(":").strip()
            return ScheduleSegment(SegmentKind.SECTION_HEADER, heading or stripped, line)

        if time_range is not None:
            body = NUMBERED_HEADING_PATTERN.sub("", stripped)
            time_range = match_time_range(body)
            return ScheduleSegment(
                SegmentKind.TIMED_BLOCK,
                strip_time_range(body, time_range),
                line,
                time_range=time_range,
                category=infer_category(stripped),
            )

        marker = tip_marker(stripped)
        if marker is not None:
            return ScheduleSegment(SegmentKind.TIP, stripped[len(marker):].strip(), line)

        return ScheduleSegment(SegmentKind.PLAIN_TEXT, stripped, line)
