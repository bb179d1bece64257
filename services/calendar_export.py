"""Calendar export of stored study schedules."""

from datetime import date
from typing import Optional

from interpreter import ScheduleInterpreter
from transformer import ICalTransformer

from .errors import NotFoundError
from .logging_handler import setup_logger
from .store import RecordStore

logger = setup_logger(__name__)

SCHEDULES_TABLE = "study_schedules"


class CalendarExportService:
    """Turns a stored schedule into an iCalendar document."""

    def __init__(self, store: RecordStore, interpreter: Optional[ScheduleInterpreter] = None) -> None:
        self._store = store
        self._interpreter = interpreter or ScheduleInterpreter()

    def export(self, schedule_id: str, anchor_date: Optional[date] = None) -> bytes:
        """Fetch schedule ``schedule_id`` and serialize it as iCalendar.

        Raises:
            NotFoundError: If the id is empty or no schedule has it.
            StoreError: If the store could not be queried.
        """
        if not schedule_id:
            raise NotFoundError("Schedule ID is required")

        schedule = self._store.get(SCHEDULES_TABLE, schedule_id)
        if not schedule:
            logger.warning("Calendar requested for unknown schedule %s", schedule_id)
            raise NotFoundError("Schedule not found")

        segments = self._interpreter.parse(schedule.get("generated_schedule") or "")
        transformer = ICalTransformer()
        transformer.transform(segments, str(schedule.get("id", schedule_id)), anchor_date)
        return transformer.to_ical()
