"""Data models for the focus timer."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional


class TimerMode(Enum):
    """Phases of the Pomodoro cycle."""

    WORK = "work"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def is_break(self) -> bool:
        return self is not TimerMode.WORK


@dataclass(frozen=True)
class TimerSettings:
    """Durations (minutes) and long-break cadence for the timer."""

    work_duration: int = 25
    short_break_duration: int = 5
    long_break_duration: int = 15
    sessions_until_long_break: int = 4

    def __post_init__(self) -> None:
        for name in (
            "work_duration",
            "short_break_duration",
            "long_break_duration",
            "sessions_until_long_break",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    def duration_minutes(self, mode: TimerMode) -> int:
        if mode is TimerMode.WORK:
            return self.work_duration
        if mode is TimerMode.SHORT_BREAK:
            return self.short_break_duration
        return self.long_break_duration

    def duration_seconds(self, mode: TimerMode) -> int:
        return self.duration_minutes(mode) * 60


@dataclass
class TimerState:
    """Mutable countdown state owned by a single FocusTimer."""

    mode: TimerMode = TimerMode.WORK
    remaining_seconds: int = 25 * 60
    running: bool = False
    sessions_completed: int = 0


@dataclass(frozen=True)
class CompletedSessionRecord:
    """A finished Work phase, ready to be stored as a study session row."""

    start_time: datetime
    end_time: datetime
    duration_minutes: int
    session_number: int
    session_type: str = field(default="solo")
    energy_level: str = field(default="high")
    break_type: str = field(default="none")

    @classmethod
    def from_completion(
        cls, finished_at: datetime, duration_minutes: int, session_number: int
    ) -> "CompletedSessionRecord":
        """Build the record for a Work phase that just reached zero."""
        return cls(
            start_time=finished_at - timedelta(minutes=duration_minutes),
            end_time=finished_at,
            duration_minutes=duration_minutes,
            session_number=session_number,
        )

    @property
    def notes(self) -> str:
        return f"Pomodoro session {self.session_number}"

    def to_row(self, user_id: str, profile_id: Optional[str] = None) -> dict[str, Any]:
        """Serialize to a ``study_sessions`` row."""
        row: dict[str, Any] = {
            "user_id": user_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "duration_minutes": self.duration_minutes,
            "session_type": self.session_type,
            "energy_level": self.energy_level,
            "break_type": self.break_type,
            "notes": self.notes,
        }
        if profile_id:
            row["profile_id"] = profile_id
        return row


@dataclass(frozen=True)
class PhaseChange:
    """Outcome of a completed phase: where the timer went and what to tell the user."""

    previous_mode: TimerMode
    next_mode: TimerMode
    sessions_completed: int
    record: Optional[CompletedSessionRecord] = None

    @property
    def message(self) -> str:
        if self.next_mode is TimerMode.LONG_BREAK:
            return "Work session complete! Time for a long break."
        if self.next_mode is TimerMode.SHORT_BREAK:
            return "Work session complete! Take a short break."
        return "Break over! Ready to focus?"

    @property
    def detail(self) -> Optional[str]:
        if self.next_mode is TimerMode.LONG_BREAK:
            return f"{self.sessions_completed} sessions completed today!"
        return None
