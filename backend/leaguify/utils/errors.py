"""Error taxonomy for league operations.

Routes translate these into HTTP responses, see ``leaguify.app``.
"""


class LeaguifyError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LeaguifyError):
    """Malformed or inconsistent submission (wrong player set, duplicates, bad scores)."""


class NotFoundError(LeaguifyError):
    pass


class PreconditionError(LeaguifyError):
    """The requested state transition is not allowed in the current state."""


class ConflictError(LeaguifyError):
    """A concurrent writer already created the rows we tried to create."""
