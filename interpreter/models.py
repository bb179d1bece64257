"""Data models for interpreted schedule text."""

from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import Any, Optional


class SegmentKind(Enum):
    SECTION_HEADER = "section_header"
    TIMED_BLOCK = "timed_block"
    TIP = "tip"
    PLAIN_TEXT = "plain_text"


class ActivityCategory(Enum):
    """Activity inferred for a timed block, with its display icon and colour."""

    STUDY = ("study", "brain", "purple")
    BREAK = ("break", "coffee", "blue")
    WAKE = ("wake", "sunrise", "orange")
    SLEEP = ("sleep", "moon", "indigo")
    EXERCISE = ("exercise", "dumbbell", "green")
    GENERIC = ("time_block", "clock", "gray")

    def __init__(self, label: str, icon: str, color: str) -> None:
        self.label = label
        self.icon = icon
        self.color = color


def _to_24_hour(hour: int, period: Optional[str]) -> int:
    if period == "PM" and hour != 12:
        return hour + 12
    if period == "AM" and hour == 12:
        return 0
    return hour


@dataclass(frozen=True)
class TimeRange:
    """A matched ``H:MM [AM|PM] - H:MM [AM|PM]`` range.

    Hours and minutes are kept as written; ``start``/``end`` give the
    24-hour clock values.
    """

    start_hour: int
    start_minute: int
    start_period: Optional[str]
    end_hour: int
    end_minute: int
    end_period: Optional[str]
    span: tuple[int, int] = field(default=(0, 0), compare=False)

    @staticmethod
    def _label(hour: int, minute: int, period: Optional[str]) -> str:
        label = f"{hour}:{minute:02d}"
        return f"{label} {period}" if period else label

    @property
    def start_label(self) -> str:
        return self._label(self.start_hour, self.start_minute, self.start_period)

    @property
    def end_label(self) -> str:
        return self._label(self.end_hour, self.end_minute, self.end_period)

    @property
    def start_hour_24(self) -> int:
        return _to_24_hour(self.start_hour, self.start_period)

    @property
    def end_hour_24(self) -> int:
        return _to_24_hour(self.end_hour, self.end_period)

    @property
    def start(self) -> time:
        """Start as a 24-hour time.

        Raises:
            ValueError: If the written clock value is impossible (e.g. 25:00).
        """
        return time(self.start_hour_24, self.start_minute)

    @property
    def end(self) -> time:
        return time(self.end_hour_24, self.end_minute)


@dataclass(frozen=True)
class ScheduleSegment:
    """One classified, non-blank line of schedule text."""

    kind: SegmentKind
    text: str
    raw: str
    time_range: Optional[TimeRange] = None
    category: Optional[ActivityCategory] = None

    @property
    def start_time(self) -> Optional[str]:
        return self.time_range.start_label if self.time_range else None

    @property
    def end_time(self) -> Optional[str]:
        return self.time_range.end_label if self.time_range else None

    @property
    def description(self) -> str:
        return self.text

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "text": self.text}
        if self.kind is SegmentKind.TIMED_BLOCK and self.category is not None:
            data.update(
                start_time=self.start_time,
                end_time=self.end_time,
                category=self.category.label,
                icon=self.category.icon,
                color=self.category.color,
            )
        return data
