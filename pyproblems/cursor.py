import dataclasses
import enum
import logging
import threading
from collections import deque
from typing import Deque, Iterator, List, Optional, Tuple, TypeVar

from pyproblems.db import Database
from pyproblems.exc import ExhaustedCursor
from pyproblems.model.table import Table

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 100000


@dataclasses.dataclass(frozen=True)
class Predicate(object):
    """A WHERE clause with ``?`` placeholders; ``sql`` of None matches no row."""
    sql: Optional[str]
    params: Tuple = ()

    @property
    def matches_nothing(self) -> bool:
        return self.sql is None


class CursorState(enum.Enum):
    NEEDS_FETCH = "needs_fetch"
    HAS_BUFFERED = "has_buffered"
    EXHAUSTED = "exhausted"


class PaginatedCursor(Iterator[T]):
    """Forward-only, single-pass iteration over the rows matching a predicate.

    Rows are fetched in pages of ``page_size`` using LIMIT/OFFSET, each page in its
    own read-only transaction, so at most one page is held in memory. Rows written
    concurrently to the table may be skipped or seen twice. A page shorter than
    ``page_size`` ends the iteration without a further query.
    """

    def __init__(self, database: Database, table: Table[T], predicate: Predicate,
                 page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"Page size must be positive, got {page_size}")
        self.database = database
        self.table = table
        self.predicate = predicate
        self.page_size = page_size

        self._lock = threading.RLock()
        self._buffer: Deque[T] = deque()
        self._offset = 0
        self._last_page_full = True
        self._state = CursorState.EXHAUSTED if predicate.matches_nothing else CursorState.NEEDS_FETCH

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def offset(self) -> int:
        return self._offset

    def has_next(self) -> bool:
        with self._lock:
            if self._state is CursorState.NEEDS_FETCH:
                self._fetch_page()
            return self._state is CursorState.HAS_BUFFERED

    def next(self) -> T:
        with self._lock:
            if not self.has_next():
                raise ExhaustedCursor(f"No more rows in {self.table} after offset {self._offset}")
            record = self._buffer.popleft()
            if not self._buffer:
                self._state = CursorState.NEEDS_FETCH if self._last_page_full else CursorState.EXHAUSTED
            return record

    def __iter__(self):
        return self

    def __next__(self) -> T:
        with self._lock:
            if not self.has_next():
                raise StopIteration
            return self.next()

    def _page_statement(self) -> str:
        return (
            f"SELECT {self.table.select_list()} FROM {self.table.name} "
            f"WHERE {self.predicate.sql} "
            f"ORDER BY {', '.join(self.table.key)} "
            f"LIMIT ? OFFSET ?"
        )

    def _fetch_page(self):
        statement = self._page_statement()
        params = (*self.predicate.params, self.page_size, self._offset)

        def work(cursor) -> List[T]:
            cursor.execute(statement, params)
            return [self.table.from_row(row) for row in cursor.fetchall()]

        page = self.database.read_only(work)
        log.debug("Fetched %d rows of %s at offset %d", len(page), self.table, self._offset)
        self._offset += len(page)
        self._last_page_full = len(page) == self.page_size
        self._buffer.extend(page)
        self._state = CursorState.HAS_BUFFERED if page else CursorState.EXHAUSTED
