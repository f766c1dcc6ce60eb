import dataclasses

from .table import Table


@dataclasses.dataclass(frozen=True)
class SolverCount(object):
    problem_id: str
    solvers: int


@dataclasses.dataclass(frozen=True)
class ShortestSubmission(object):
    problem_id: str
    submission_id: int


SOLVERS: Table[SolverCount] = Table(
    "solver",
    columns=[
        ("problem_id", lambda s: s.problem_id),
        ("solvers", lambda s: s.solvers),
    ],
    key=["problem_id"],
    from_row=SolverCount,
)

SHORTEST: Table[ShortestSubmission] = Table(
    "shortest",
    columns=[
        ("problem_id", lambda s: s.problem_id),
        ("submission_id", lambda s: s.submission_id),
    ],
    key=["problem_id"],
    from_row=ShortestSubmission,
)
