"""Line patterns and classification policy tables for schedule text."""

import re
from typing import Optional

from .models import ActivityCategory, TimeRange

# "7:00 AM - 8:00 AM", "07:00-08:00", "9:30pm – 10:15pm"
TIME_RANGE_PATTERN = re.compile(
    r"(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*[-–—]\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?"
)

NUMBERED_HEADING_PATTERN = re.compile(r"^\d+\.(?!\d)\s*")

# Separator punctuation left in front of the description once the range is cut out
LEADING_SEPARATORS_PATTERN = re.compile(r"^[\s:\-–—|*]+")

HEADER_MIN_LENGTH = 5

TIP_MARKERS = ("-", "•", "*")

# Ordered: the first category with a keyword in the line wins.
CATEGORY_KEYWORDS: tuple[tuple[ActivityCategory, tuple[str, ...]], ...] = (
    (ActivityCategory.WAKE, ("wake", "morning")),
    (ActivityCategory.STUDY, ("study", "focus")),
    (ActivityCategory.BREAK, ("break", "rest")),
    (ActivityCategory.SLEEP, ("sleep", "wind-down", "wind down", "night", "bedtime")),
    (ActivityCategory.EXERCISE, ("exercise", "workout", "gym", "stretch", "walk")),
)


def match_time_range(line: str) -> Optional[TimeRange]:
    """Find the first time range in ``line``.

    Returns:
        The matched range, or None when the line has no range (a single
        clock time is not a range).
    """
    match = TIME_RANGE_PATTERN.search(line)
    if not match:
        return None

    start_hour, start_minute, start_period, end_hour, end_minute, end_period = match.groups()
    return TimeRange(
        start_hour=int(start_hour),
        start_minute=int(start_minute),
        start_period=start_period.upper() if start_period else None,
        end_hour=int(end_hour),
        end_minute=int(end_minute),
        end_period=end_period.upper() if end_period else None,
        span=match.span(),
    )


def strip_time_range(line: str, time_range: TimeRange) -> str:
    """Return the line without the range and its leading separators."""
    start, end = time_range.span
    remainder = line[:start] + line[end:]
    return LEADING_SEPARATORS_PATTERN.sub("", remainder).strip()


def infer_category(line: str) -> ActivityCategory:
    lowered = line.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return ActivityCategory.GENERIC


def is_section_header(line: str, has_time_range: bool) -> bool:
    """Numbered or all-caps lines are headers unless they carry a time range."""
    if has_time_range:
        return False
    if NUMBERED_HEADING_PATTERN.match(line):
        return True
    return line.isupper() and len(line) > HEADER_MIN_LENGTH


def tip_marker(line: str) -> Optional[str]:
    for marker in TIP_MARKERS:
        if line.startswith(marker):
            return marker
    return None
