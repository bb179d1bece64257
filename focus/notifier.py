"""Phase completion notifiers (audible cue + toast message)."""

import sys
from abc import ABC, abstractmethod
from typing import TextIO

from .models import PhaseChange


class PhaseNotifier(ABC):
    """Interface for announcing a finished phase to the user."""

    @abstractmethod
    def phase_completed(self, change: PhaseChange) -> None:
        """Announce a completed phase.

        Called synchronously from the tick that reached zero, so
        implementations must not block.
        """
        pass


class ConsoleNotifier(PhaseNotifier):
    """Rings the terminal bell and prints the toast text."""

    BELL = "\a"

    def __init__(self, stream: TextIO = sys.stdout, bell: bool = True) -> None:
        self._stream = stream
        self._bell = bell

    def phase_completed(self, change: PhaseChange) -> None:
        if self._bell:
            self._stream.write(self.BELL)
        self._stream.write(f"{change.message}\n")
        if change.detail:
            self._stream.write(f"  {change.detail}\n")
        self._stream.flush()
