"""
Doubt Solver: Error Types
Every failure a request can hit. Rendered as {"error": message} by main.py.
"""


class DoubtSolverError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DoubtSolverError):
    """Missing or invalid input. Nothing is stored."""
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(DoubtSolverError):
    status_code = 404
    default_message = "Not found"


class UpstreamError(DoubtSolverError):
    """The chat-completion call failed. Never retried."""
    status_code = 500
    default_message = "AI error"


class PersistenceError(DoubtSolverError):
    status_code = 500
    default_message = "Database error"
