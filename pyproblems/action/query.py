from typing import Collection, Dict

from pyproblems.cursor import Predicate
from pyproblems.db import Database, list_param
from pyproblems.model import SubmissionStatus, SOLVERS, SHORTEST


def submissions_by_ids(ids: Collection[int]) -> Predicate:
    if not ids:
        return Predicate(None)
    return Predicate(f"id IN {list_param(ids)}", tuple(ids))


def submissions_by_users(user_ids: Collection[str]) -> Predicate:
    if not user_ids:
        return Predicate(None)
    return Predicate(f"user_id IN {list_param(user_ids)}", tuple(user_ids))


def accepted_submissions() -> Predicate:
    return Predicate("result = ?", (SubmissionStatus.ACCEPTED.serialize(),))


def find_solver_counts(database: Database) -> Dict[str, int]:
    def work(cursor):
        cursor.execute(f"SELECT {SOLVERS.select_list()} FROM {SOLVERS.name}")
        return {problem_id: int(solvers) for problem_id, solvers in cursor.fetchall()}

    return database.read_only(work)


def find_shortest_submissions(database: Database) -> Dict[str, int]:
    def work(cursor):
        cursor.execute(f"SELECT {SHORTEST.select_list()} FROM {SHORTEST.name}")
        return {problem_id: submission_id for problem_id, submission_id in cursor.fetchall()}

    return database.read_only(work)
