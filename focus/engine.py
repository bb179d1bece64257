"""Pomodoro countdown engine."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from services.logging_handler import setup_logger

from .models import (
    CompletedSessionRecord,
    PhaseChange,
    TimerMode,
    TimerSettings,
    TimerState,
)
from .notifier import PhaseNotifier

logger = setup_logger(__name__)


class TimerRunningError(RuntimeError):
    """Raised when an operation needs the timer to be paused."""


class SessionSink(ABC):
    """Receives completed Work phases for persistence."""

    @abstractmethod
    async def record_session(self, record: CompletedSessionRecord) -> None:
        pass


class FocusTimer:
    """Single-threaded countdown cycling through Work and break phases.

    The engine is driven by ``tick()``, called once per second by the
    asyncio task acquired in ``start()`` (or directly by a host that owns
    its own clock). Every tick runs to completion on the event loop, so
    user actions such as ``toggle()`` or ``reset()`` always land between
    ticks.

    Ticks are counted, not measured: if the loop falls behind, the
    countdown falls behind with it.
    """

    TICK_INTERVAL = 1.0

    def __init__(
        self,
        settings: Optional[TimerSettings] = None,
        session_sink: Optional[SessionSink] = None,
        notifier: Optional[PhaseNotifier] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize the timer in the Work phase, paused.

        Args:
            settings: Phase durations; defaults to 25/5/15 with a long
                break every 4 sessions.
            session_sink: Receives a record for each completed Work phase.
            notifier: Announces each completed phase.
            clock: Returns the current time for session records.
        """
        self._settings = settings or TimerSettings()
        self._state = TimerState(
            mode=TimerMode.WORK,
            remaining_seconds=self._settings.duration_seconds(TimerMode.WORK),
        )
        self._session_sink = session_sink
        self._notifier = notifier
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._tick_task: Optional[asyncio.Task] = None
        self._pending_records: set[asyncio.Task] = set()

    @property
    def state(self) -> TimerState:
        """Snapshot of the current state."""
        return replace(self._state)

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    @property
    def mode(self) -> TimerMode:
        return self._state.mode

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def sessions_completed(self) -> int:
        return self._state.sessions_completed

    def tick(self) -> Optional[PhaseChange]:
        """Advance the countdown by one second.

        Returns:
            The phase change when this tick reached zero, otherwise None.
        """
        if not self._state.running or self._state.remaining_seconds <= 0:
            return None

        self._state.remaining_seconds -= 1
        if self._state.remaining_seconds == 0:
            return self._complete_phase()
        return None

    def toggle(self) -> bool:
        """Start or pause the countdown. Returns the new running flag."""
        self._state.running = not self._state.running
        logger.debug(
            "Timer %s in %s with %ss left",
            "started" if self._state.running else "paused",
            self._state.mode.value,
            self._state.remaining_seconds,
        )
        return self._state.running

    def reset(self) -> None:
        """Pause and refill the current phase from the settings."""
        self._state.running = False
        self._state.remaining_seconds = self._settings.duration_seconds(self._state.mode)

    def switch_mode(self, mode: TimerMode) -> None:
        """Jump to ``mode`` with a full countdown.

        Raises:
            TimerRunningError: If the countdown is active.
        """
        if self._state.running:
            raise TimerRunningError("Pause the timer before switching modes")
        self._state.mode = mode
        self.reset()
        logger.info("Switched to %s", mode.value)

    def update_settings(self, settings: TimerSettings) -> None:
        """Replace the durations.

        The running countdown is left alone; call ``reset()`` afterwards
        to apply the new duration to the current phase.
        """
        self._settings = settings
        logger.info("Timer settings updated: %s", settings)

    def format_remaining(self) -> str:
        minutes, seconds = divmod(self._state.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def progress(self) -> float:
        """Percentage of the current phase already elapsed."""
        total = self._settings.duration_seconds(self._state.mode)
        return (total - self._state.remaining_seconds) / total * 100

    def _complete_phase(self) -> PhaseChange:
        state = self._state
        state.running = False
        previous = state.mode
        record = None

        if previous is TimerMode.WORK:
            state.sessions_completed += 1
            record = CompletedSessionRecord.from_completion(
                self._clock(),
                self._settings.work_duration,
                state.sessions_completed,
            )
            if state.sessions_completed % self._settings.sessions_until_long_break == 0:
                next_mode = TimerMode.LONG_BREAK
            else:
                next_mode = TimerMode.SHORT_BREAK
        else:
            next_mode = TimerMode.WORK

        state.mode = next_mode
        state.remaining_seconds = self._settings.duration_seconds(next_mode)

        change = PhaseChange(
            previous_mode=previous,
            next_mode=next_mode,
            sessions_completed=state.sessions_completed,
            record=record,
        )
        logger.info(
            "%s phase finished, next is %s (%d sessions completed)",
            previous.value,
            next_mode.value,
            state.sessions_completed,
        )

        if record is not None:
            self._dispatch_record(record)
        self._notify(change)
        return change

    def _notify(self, change: PhaseChange) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.phase_completed(change)
        except Exception:
            logger.exception("Phase notifier failed")

    def _dispatch_record(self, record: CompletedSessionRecord) -> None:
        """Hand the record to the sink without waiting for it."""
        if self._session_sink is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "No running event loop, dropping record for session %d",
                record.session_number,
            )
            return

        task = loop.create_task(self._session_sink.record_session(record))
        self._pending_records.add(task)
        task.add_done_callback(self._record_done)

    def _record_done(self, task: asyncio.Task) -> None:
        self._pending_records.discard(task)
        if task.cancelled():
            logger.warning("Session record task was cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error("Failed to save completed session: %s", error)
        else:
            logger.info("Completed session saved")

    async def start(self) -> None:
        """Acquire the periodic tick task on the running loop."""
        if self._tick_task is not None and not self._tick_task.done():
            return
        self._tick_task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.TICK_INTERVAL)
            self.tick()

    async def aclose(self) -> None:
        """Cancel the tick task. Pending session records are left to finish."""
        task, self._tick_task = self._tick_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "FocusTimer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
