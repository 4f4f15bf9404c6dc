from __future__ import annotations

"""
Domain Exceptions.

Failure taxonomy shared by the resolver, the attribution engine and the
interface layers. Query misses are not errors and never appear here.
"""


class Binary2TreemapError(Exception):
    """Base class for every error raised by this package."""


class ResolverError(Binary2TreemapError):
    """The location resolver could not be built or failed internally."""


class AttributionError(Binary2TreemapError):
    """
    Tree construction was aborted.

    Raised when the resolver fails while probing an offset. The original
    exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, offset: int = -1) -> None:
        super().__init__(message)
        self.offset = offset
