import logging

from pyproblems.db import Database
from pyproblems.model import SubmissionStatus, SOLVERS, SHORTEST, SUBMISSIONS

log = logging.getLogger(__name__)

ACCEPTED = SubmissionStatus.ACCEPTED.serialize()


def recompute_solver_counts(database: Database) -> None:
    """Replaces the solver table with the number of distinct accepting users per problem.

    Problems without accepted submissions get no row.
    """
    log.info("Recomputing %s", SOLVERS)

    def work(cursor):
        cursor.execute(f"DELETE FROM {SOLVERS.name}")
        cursor.execute(
            f"INSERT INTO {SOLVERS.name} (problem_id, solvers) "
            f"SELECT s.problem_id, COUNT(DISTINCT s.user_id) "
            f"FROM {SUBMISSIONS.name} s "
            f"WHERE s.result = ? "
            f"GROUP BY s.problem_id",
            (ACCEPTED,),
        )
        return cursor.rowcount

    rows = database.write_transaction(work)
    log.debug("Inserted %s rows into %s", rows, SOLVERS)


def recompute_shortest_accepted(database: Database) -> None:
    """Replaces the shortest table with the shortest accepted submission per problem.

    Among accepted submissions of minimal length the smallest submission id wins,
    regardless of submission time.
    """
    log.info("Recomputing %s", SHORTEST)

    def work(cursor):
        cursor.execute(f"DELETE FROM {SHORTEST.name}")
        cursor.execute(
            f"INSERT INTO {SHORTEST.name} (problem_id, submission_id) "
            f"SELECT s.problem_id, MIN(s.id) "
            f"FROM {SUBMISSIONS.name} s "
            f"  JOIN ("
            f"    SELECT problem_id, MIN(length) AS length "
            f"    FROM {SUBMISSIONS.name} "
            f"    WHERE result = ? "
            f"    GROUP BY problem_id"
            f"  ) m ON s.problem_id = m.problem_id AND s.length = m.length "
            f"WHERE s.result = ? "
            f"GROUP BY s.problem_id",
            (ACCEPTED, ACCEPTED),
        )
        return cursor.rowcount

    rows = database.write_transaction(work)
    log.debug("Inserted %s rows into %s", rows, SHORTEST)
