"""Error kinds raised by the originality engine."""


class OriginalityError(Exception):
    """Base class for engine errors."""


class NotFound(OriginalityError):
    """A referenced submission or analysis record does not exist."""

    def __init__(self, submission_id: str, what: str = "analysis check"):
        self.submission_id = submission_id
        super().__init__(f"No {what} found for submission {submission_id!r}")


class ValidationFailure(OriginalityError, ValueError):
    """Input that cannot be analysed at all (e.g. text is missing)."""


class StoreFailure(OriginalityError):
    """The corpus store could not be read or written."""
