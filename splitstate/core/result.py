"""Result types for railway-oriented programming.

Command dispatch, queries and write-store saves return a Result, so expected
failures (rejections, version conflicts, missing views) are values the caller
has to handle rather than exceptions it may forget to catch.

Usage:
    match await store.save(...):
        case Success(value=version):
            ...
        case Failure(error=conflict):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Outcome carrying a value."""

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Outcome carrying an error value."""

    error: E


type Result[T, E] = Success[T] | Failure[E]
