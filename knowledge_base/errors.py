from __future__ import annotations

"""
Error taxonomy and result types for catalog loading and merging.

Per-source problems never surface as exceptions to callers of the
merge: the loader wraps them in a :class:`Failure` and the merger skips
them.  Only the total-failure case (:class:`NoValidSources`) is
observable, and it is also returned as a :class:`Failure` so callers are
forced to look at it before touching a catalog.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class CatalogError(Exception):
    """Base class for knowledge catalog errors."""


class SourceUnavailable(CatalogError):
    """A single source document could not be fetched or parsed."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Knowledge source {identifier!r} unavailable: {reason}")


class NoValidSources(CatalogError):
    """Every source handed to the merger was absent."""

    def __init__(self, attempted: int = 0):
        self.attempted = attempted
        super().__init__(f"No valid knowledge sources found (attempted {attempted})")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: CatalogError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Union[Success[T], Failure]
