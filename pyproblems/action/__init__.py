from .query import (
    submissions_by_ids as submissions_by_ids,
    submissions_by_users as submissions_by_users,
    accepted_submissions as accepted_submissions,
    find_solver_counts as find_solver_counts,
    find_shortest_submissions as find_shortest_submissions,
)
from .update import (
    recompute_solver_counts as recompute_solver_counts,
    recompute_shortest_accepted as recompute_shortest_accepted,
)
from .ingest import BatchUpserter as BatchUpserter
