"""Focus timer module: Pomodoro countdown engine and its data models."""

from .engine import FocusTimer, SessionSink, TimerRunningError
from .models import (
    CompletedSessionRecord,
    PhaseChange,
    TimerMode,
    TimerSettings,
    TimerState,
)
from .notifier import ConsoleNotifier, PhaseNotifier

__all__ = [
    "CompletedSessionRecord",
    "ConsoleNotifier",
    "FocusTimer",
    "PhaseChange",
    "PhaseNotifier",
    "SessionSink",
    "TimerMode",
    "TimerRunningError",
    "TimerSettings",
    "TimerState",
]
