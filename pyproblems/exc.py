class PyProblemsError(Exception):
    pass


class ConfigurationError(PyProblemsError):
    pass


class BackendError(PyProblemsError):
    """Connectivity, constraint or timeout failure reported by the backend."""
    pass


class ExhaustedCursor(PyProblemsError):
    pass


class EmptyBatch(PyProblemsError):
    pass
