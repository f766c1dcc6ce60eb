import pathlib
from typing import Collection, Dict, Mapping, Optional, Sequence, Union

from pyproblems import action
from pyproblems.action.ingest import BatchUpserter, FailureCallback
from pyproblems.cache import MetadataCache
from pyproblems.cursor import DEFAULT_PAGE_SIZE, PaginatedCursor, Predicate
from pyproblems.db import Database, DatabaseConfig
from pyproblems.model import (
    Contest,
    Problem,
    Submission,
    Table,
    CONTESTS,
    PROBLEMS,
    SUBMISSIONS,
)


class SqlClient(object):
    """Record access for contests, problems and submissions on one backend."""

    def __init__(self, database: Database,
                 page_size: int = DEFAULT_PAGE_SIZE,
                 on_upsert_failure: Optional[FailureCallback] = None):
        self.database = database
        self.page_size = page_size
        self.metadata = MetadataCache(database)
        self.upserter = BatchUpserter(database, on_failure=on_upsert_failure)

    @staticmethod
    def from_config(config: Union[pathlib.Path, dict, None] = None, **kwargs) -> "SqlClient":
        return SqlClient(DatabaseConfig(config).create_database(), **kwargs)

    # Reference data

    def reload_metadata(self) -> None:
        self.metadata.reload()

    def contests(self) -> Mapping[str, Contest]:
        return self.metadata.contests()

    def problems(self) -> Mapping[str, Problem]:
        return self.metadata.problems()

    def last_reloaded_time(self) -> int:
        return self.metadata.last_reloaded_time()

    # Submissions

    def query(self, predicate: Predicate, page_size: Optional[int] = None) -> PaginatedCursor[Submission]:
        return PaginatedCursor(self.database, SUBMISSIONS, predicate,
                               page_size=self.page_size if page_size is None else page_size)

    def query_by_ids(self, ids: Collection[int]) -> PaginatedCursor[Submission]:
        return self.query(action.submissions_by_ids(ids))

    def query_by_users(self, user_ids: Collection[str]) -> PaginatedCursor[Submission]:
        return self.query(action.submissions_by_users(user_ids))

    def query_all_accepted(self) -> PaginatedCursor[Submission]:
        return self.query(action.accepted_submissions())

    # Derived tables

    def recompute_solver_counts(self) -> None:
        action.recompute_solver_counts(self.database)

    def recompute_shortest_accepted(self) -> None:
        action.recompute_shortest_accepted(self.database)

    def solver_counts(self) -> Dict[str, int]:
        return action.find_solver_counts(self.database)

    def shortest_submissions(self) -> Dict[str, int]:
        return action.find_shortest_submissions(self.database)

    # Ingestion, failures are logged and reported to on_upsert_failure only

    def batch_upsert(self, table: Table, records: Sequence) -> None:
        self.upserter.upsert(table, records)

    def upsert_submissions(self, records: Sequence[Submission]) -> None:
        self.batch_upsert(SUBMISSIONS, records)

    def upsert_contests(self, records: Sequence[Contest]) -> None:
        self.batch_upsert(CONTESTS, records)

    def upsert_problems(self, records: Sequence[Problem]) -> None:
        self.batch_upsert(PROBLEMS, records)
