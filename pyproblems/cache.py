import dataclasses
import logging
import threading
import time
from types import MappingProxyType
from typing import Dict, List, Mapping, TypeVar

from pyproblems.db import Database
from pyproblems.model import Contest, Problem, Table, CONTESTS, PROBLEMS

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class MetadataSnapshot(object):
    contests: Mapping[str, Contest]
    problems: Mapping[str, Problem]
    # Milliseconds since the epoch, 0 if never loaded
    last_reloaded: int


EMPTY_SNAPSHOT = MetadataSnapshot(contests=MappingProxyType({}), problems=MappingProxyType({}), last_reloaded=0)


def load_table(database: Database, table: Table[T]) -> List[T]:
    log.info("reloading %s", table)

    def work(cursor) -> List[T]:
        cursor.execute(f"SELECT {table.select_list()} FROM {table.name}")
        return [table.from_row(row) for row in cursor.fetchall()]

    return database.read_only(work)


class MetadataCache(object):
    """In-memory copy of the contests and problems tables.

    Both maps are held by one immutable snapshot which a reload replaces as a whole,
    so readers never see contests and problems from different reloads. Readers do not
    lock, they only dereference the current snapshot.
    """

    def __init__(self, database: Database):
        self.database = database
        self._reload_lock = threading.Lock()
        self._snapshot: MetadataSnapshot = EMPTY_SNAPSHOT

    @property
    def snapshot(self) -> MetadataSnapshot:
        return self._snapshot

    def reload(self) -> MetadataSnapshot:
        with self._reload_lock:
            contests: Dict[str, Contest] = {contest.id: contest for contest in load_table(self.database, CONTESTS)}
            problems: Dict[str, Problem] = {problem.id: problem for problem in load_table(self.database, PROBLEMS)}
            snapshot = MetadataSnapshot(contests=MappingProxyType(contests),
                                        problems=MappingProxyType(problems),
                                        last_reloaded=int(time.time() * 1000))
            self._snapshot = snapshot
        log.debug("Loaded %d contests and %d problems", len(contests), len(problems))
        return snapshot

    def contests(self) -> Mapping[str, Contest]:
        return self._snapshot.contests

    def problems(self) -> Mapping[str, Problem]:
        return self._snapshot.problems

    def last_reloaded_time(self) -> int:
        return self._snapshot.last_reloaded
