import dataclasses

from .table import Table


@dataclasses.dataclass(frozen=True)
class Problem(object):
    id: str
    # Not enforced as a foreign key, a problem may reference an unknown contest
    contest_id: str
    title: str

    def __str__(self):
        return f"P({self.id})"


PROBLEMS: Table[Problem] = Table(
    "problems",
    columns=[
        ("id", lambda p: p.id),
        ("contest_id", lambda p: p.contest_id),
        ("title", lambda p: p.title),
    ],
    key=["id"],
    from_row=Problem,
)
