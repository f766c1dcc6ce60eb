from .client import SqlClient
from .exc import PyProblemsError, BackendError, ConfigurationError, ExhaustedCursor, EmptyBatch
