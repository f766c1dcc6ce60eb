from .table import Table
from .contest import Contest, CONTESTS
from .problem import Problem, PROBLEMS
from .submission import Submission, SubmissionStatus, SUBMISSIONS
from .aggregate import SolverCount, ShortestSubmission, SOLVERS, SHORTEST
