"""Exceptions raised by the statistics engine."""


class InvalidArgumentError(ValueError):
    """Raised when a caller passes an argument the statistics cannot accept.

    Covers percentile values outside ``(0, 100]``, rank lookups outside the
    indexed range, and malformed frequency tables or request records.
    """
