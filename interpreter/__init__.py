"""Interpreter module for classifying AI-generated schedule text."""

from .models import ActivityCategory, ScheduleSegment, SegmentKind, TimeRange
from .parser import ScheduleInterpreter
from .patterns import CATEGORY_KEYWORDS, TIME_RANGE_PATTERN, match_time_range
from .renderer import render_html

__all__ = [
    "ActivityCategory",
    "CATEGORY_KEYWORDS",
    "ScheduleInterpreter",
    "ScheduleSegment",
    "SegmentKind",
    "TIME_RANGE_PATTERN",
    "TimeRange",
    "match_time_range",
    "render_html",
]
