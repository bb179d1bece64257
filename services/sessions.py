"""Persistence of completed focus sessions."""

import asyncio
from typing import Optional

from focus.engine import SessionSink
from focus.models import CompletedSessionRecord

from .logging_handler import setup_logger
from .store import RecordStore

logger = setup_logger(__name__)

SESSIONS_TABLE = "study_sessions"


class SessionRecorder(SessionSink):
    """Stores completed Work phases as ``study_sessions`` rows for one user."""

    def __init__(self, store: RecordStore, user_id: str, profile_id: Optional[str] = None) -> None:
        self._store = store
        self._user_id = user_id
        self._profile_id = profile_id

    async def record_session(self, record: CompletedSessionRecord) -> None:
        row = record.to_row(self._user_id, self._profile_id)
        # Blocking client call, run off the event loop.
        await asyncio.to_thread(self._store.insert, SESSIONS_TABLE, row)
        logger.debug("Stored %s for user %s", record.notes, self._user_id)
