"""Domain exceptions for the Entries bounded context."""


class EntryValidationError(ValueError):
    """Raised when entry input violates a domain invariant.

    The message is user-facing (e.g. "Rating must be between 0 and 5") and
    is passed through unchanged by the command service.
    """

    pass
