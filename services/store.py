"""Record store port and its adapter for the hosted REST backend."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional

import requests

from .errors import StoreError
from .logging_handler import setup_logger

logger = setup_logger(__name__)

Row = dict[str, Any]


class RecordStore(ABC):
    """Row-oriented store with create/read/update/delete on named tables."""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Row]:
        """Return rows of ``table`` matching every filter.

        A filter value that is a list, tuple or set matches by membership,
        anything else by equality.
        """
        pass

    @abstractmethod
    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        pass

    @abstractmethod
    def update(self, table: str, record_id: str, changes: Mapping[str, Any]) -> Row:
        pass

    @abstractmethod
    def delete(self, table: str, record_id: str) -> None:
        pass

    def get(self, table: str, record_id: str) -> Optional[Row]:
        """Return the row with primary key ``record_id``, or None."""
        rows = self.select(table, {"id": record_id}, limit=1)
        return rows[0] if rows else None


def _format_filter(value: Any) -> str:
    if isinstance(value, (list, tuple, set)):
        return "in.(" + ",".join(str(v) for v in value) + ")"
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class PostgrestStore(RecordStore):
    """RecordStore over a PostgREST endpoint (``{url}/rest/v1/{table}``)."""

    TIMEOUT = 15

    def __init__(
        self,
        url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            url: Project URL of the hosted backend.
            api_key: Service key sent as ``apikey`` and bearer token.
            session: HTTP session to reuse (default: a new one).
        """
        self._base_url = url.rstrip("/") + "/rest/v1"
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            }
        )

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Iterable[tuple[str, str]]] = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        url = f"{self._base_url}/{table}"
        try:
            response = self._session.request(
                method,
                url,
                params=list(params or []),
                json=dict(payload) if payload is not None else None,
                timeout=self.TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, table, e)
            raise StoreError(f"Store request failed: {e}") from e

        if not response.ok:
            logger.error("%s %s returned %s: %s", method, table, response.status_code, response.text)
            raise StoreError(f"Store request to '{table}' failed with status {response.status_code}")

        if not response.content:
            return None
        return response.json()

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Row]:
        params = [("select", "*")]
        for column, value in (filters or {}).items():
            params.append((column, _format_filter(value)))
        if order_by:
            params.append(("order", f"{order_by}.{'desc' if descending else 'asc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))
        return self._request("GET", table, params) or []

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        rows = self._request("POST", table, payload=row) or []
        return rows[0] if rows else dict(row)

    def update(self, table: str, record_id: str, changes: Mapping[str, Any]) -> Row:
        rows = self._request("PATCH", table, [("id", _format_filter(record_id))], changes) or []
        if not rows:
            raise StoreError(f"No row '{record_id}' in '{table}' to update")
        return rows[0]

    def delete(self, table: str, record_id: str) -> None:
        self._request("DELETE", table, [("id", _format_filter(record_id))])
