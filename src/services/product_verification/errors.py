"""Exception types raised by the product verification engine."""


class VerificationError(Exception):
    """Base class for verification failures."""


class CatalogLoadError(VerificationError):
    """The reference catalog source is missing, unreadable or empty."""


class CatalogUnavailableError(VerificationError):
    """A verification call was made without a loaded catalog."""

    def __init__(self, message: str = "catalog unavailable: no reference catalog has been loaded"):
        super().__init__(message)


class VerificationDeadlineExceeded(VerificationError):
    """The operation deadline expired before the batch completed."""


class InvalidLineItem(VerificationError):
    """A line item cannot be classified (missing or non-string designation)."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"line item {index}: {reason}")
