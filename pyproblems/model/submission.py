import dataclasses
import enum
from typing import Optional, Union

from .table import Table


class SubmissionStatus(enum.Enum):
    ACCEPTED = "AC"
    WRONG_ANSWER = "WA"
    TIME_LIMIT = "TLE"
    MEMORY_LIMIT = "MLE"
    RUN_ERROR = "RE"
    COMPILER_ERROR = "CE"
    OUTPUT_LIMIT = "OLE"
    INTERNAL_ERROR = "IE"
    WAITING_JUDGE = "WJ"
    WAITING_REJUDGE = "WR"

    @staticmethod
    def parse(key: str) -> Union["SubmissionStatus", str]:
        # The judge introduces new codes from time to time, keep those verbatim
        try:
            return SubmissionStatus(key)
        except ValueError:
            return key

    def serialize(self):
        return self.value

    def __str__(self):
        return self.serialize()


@dataclasses.dataclass(frozen=True)
class Submission(object):
    id: int
    epoch_second: int
    problem_id: str
    contest_id: str
    user_id: str
    language: str
    point: float
    length: int
    result: Union[SubmissionStatus, str]
    execution_time: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.result, str):
            object.__setattr__(self, "result", SubmissionStatus.parse(self.result))

    @property
    def is_accepted(self) -> bool:
        return self.result == SubmissionStatus.ACCEPTED

    def __str__(self):
        return f"S({self.id}@{self.problem_id}/{self.user_id}:{self.result})"


def _serialize_result(result: Union[SubmissionStatus, str]) -> str:
    if isinstance(result, SubmissionStatus):
        return result.serialize()
    return result


SUBMISSIONS: Table[Submission] = Table(
    "submissions",
    columns=[
        ("id", lambda s: s.id),
        ("epoch_second", lambda s: s.epoch_second),
        ("problem_id", lambda s: s.problem_id),
        ("contest_id", lambda s: s.contest_id),
        ("user_id", lambda s: s.user_id),
        ("language", lambda s: s.language),
        ("point", lambda s: s.point),
        ("length", lambda s: s.length),
        ("result", lambda s: _serialize_result(s.result)),
        ("execution_time", lambda s: s.execution_time),
    ],
    key=["id"],
    from_row=Submission,
)
