import logging
import threading
from typing import Callable, Optional, Sequence, TypeVar

from pyproblems.db import Database
from pyproblems.exc import EmptyBatch
from pyproblems.model.table import Table

log = logging.getLogger(__name__)

T = TypeVar("T")

FailureCallback = Callable[[Sequence, Exception], None]


class BatchUpserter(object):
    """Writes batches of records, replacing every non-key column on key conflicts.

    Each batch is one write transaction. Batches are serialized across all tables.
    A batch that fails, whether the backend rejects it or a record cannot be mapped to
    a row, is rolled back, logged record by record and reported to ``on_failure``;
    :meth:`upsert` then returns normally, so ingestion continues and callers needing
    confirmation have to query the store again.
    """

    def __init__(self, database: Database,
                 on_failure: Optional[FailureCallback] = None,
                 reject_empty: bool = False):
        self.database = database
        self.on_failure = on_failure
        self.reject_empty = reject_empty
        self.failed_batches = 0
        self._lock = threading.Lock()

    def upsert(self, table: Table[T], records: Sequence[T]) -> bool:
        """Returns whether the batch was committed."""
        records = list(records)
        if not records:
            if self.reject_empty:
                raise EmptyBatch(f"Empty batch for {table}")
            log.debug("Skipping empty batch for %s", table)
            return True

        def work(cursor):
            statement = self.database.dialect.upsert(table)
            params = [table.to_row(record) for record in records]
            cursor.executemany(statement, params)

        with self._lock:
            try:
                self.database.write_transaction(work)
            except Exception as e:
                self.failed_batches += 1
                self._report(table, records, e)
                return False
        log.debug("Upserted %d records into %s", len(records), table)
        return True

    def _report(self, table: Table, records: Sequence, error: Exception):
        log.exception("Failed to upsert %d records into %s", len(records), table)
        for record in records:
            log.error("%s", record)
        if self.on_failure is not None:
            self.on_failure(records, error)
