from typing import Optional

import pytest

from pyproblems import SqlClient
from pyproblems.db import SQLiteDatabase
from pyproblems.exc import BackendError
from pyproblems.model import Contest, Problem, Submission, SubmissionStatus

SCHEMA = """
CREATE TABLE contests (
    id TEXT PRIMARY KEY,
    start_epoch_second INTEGER NOT NULL,
    duration_second INTEGER NOT NULL,
    title TEXT NOT NULL,
    rate_change TEXT NOT NULL
);
CREATE TABLE problems (
    id TEXT PRIMARY KEY,
    contest_id TEXT NOT NULL,
    title TEXT NOT NULL
);
CREATE TABLE submissions (
    id INTEGER PRIMARY KEY,
    epoch_second INTEGER NOT NULL,
    problem_id TEXT NOT NULL,
    contest_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    language TEXT NOT NULL,
    point REAL NOT NULL,
    length INTEGER NOT NULL,
    result TEXT NOT NULL,
    execution_time INTEGER
);
CREATE TABLE solver (
    problem_id TEXT PRIMARY KEY,
    solvers INTEGER NOT NULL
);
CREATE TABLE shortest (
    problem_id TEXT PRIMARY KEY,
    submission_id INTEGER NOT NULL
);
"""


class CountingDatabase(SQLiteDatabase):
    """SQLite backend counting read transactions, optionally failing one of them."""

    def __init__(self):
        super().__init__(":memory:")
        self.reads = 0
        self.fail_on_read: Optional[int] = None

    def read_only(self, work):
        self.reads += 1
        if self.fail_on_read == self.reads:
            raise BackendError("injected read failure")
        return super().read_only(work)


@pytest.fixture
def database():
    db = CountingDatabase()
    db.execute_script(SCHEMA)
    yield db
    db.close()


@pytest.fixture
def client(database):
    return SqlClient(database)


def make_submission(submission_id: int,
                    problem_id: str = "abc001_a",
                    user_id: str = "alice",
                    length: int = 100,
                    result=SubmissionStatus.ACCEPTED,
                    epoch_second: Optional[int] = None) -> Submission:
    return Submission(
        id=submission_id,
        epoch_second=epoch_second if epoch_second is not None else 1500000000 + submission_id,
        problem_id=problem_id,
        contest_id=problem_id.split("_")[0],
        user_id=user_id,
        language="Python3 (3.4.3)",
        point=100.0,
        length=length,
        result=result,
        execution_time=17,
    )


def make_contest(contest_id: str, title: Optional[str] = None) -> Contest:
    return Contest(id=contest_id, start_epoch_second=1468670400, duration_second=6000,
                   title=title or f"Contest {contest_id}", rate_change="-")


def make_problem(problem_id: str, title: Optional[str] = None) -> Problem:
    return Problem(id=problem_id, contest_id=problem_id.split("_")[0], title=title or f"Problem {problem_id}")
