import dataclasses

from .table import Table


@dataclasses.dataclass(frozen=True)
class Contest(object):
    id: str
    start_epoch_second: int
    duration_second: int
    title: str
    rate_change: str

    @property
    def end_epoch_second(self) -> int:
        return self.start_epoch_second + self.duration_second

    def __str__(self):
        return f"C({self.id})"


CONTESTS: Table[Contest] = Table(
    "contests",
    columns=[
        ("id", lambda c: c.id),
        ("start_epoch_second", lambda c: c.start_epoch_second),
        ("duration_second", lambda c: c.duration_second),
        ("title", lambda c: c.title),
        ("rate_change", lambda c: c.rate_change),
    ],
    key=["id"],
    from_row=Contest,
)
