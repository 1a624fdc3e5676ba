"""Discriminated success/failure results returned by public pipeline operations.

Each protocol step raises internally and converts to a ``Result`` at its
public boundary, so callers branch on ``result.ok`` instead of catching
exceptions.  A ``Failure`` carries the tagged error instance; its type
identifies which step failed and whether a retry makes sense.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Literal, TypeVar

if TYPE_CHECKING:
    from wallet_trading.clients.polymarket.exceptions import PolymarketError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome wrapping the produced value.

    Args:
        value: The value produced by the operation.

    """

    value: T

    @property
    def ok(self) -> Literal[True]:
        """Return ``True``; a success is always ok."""
        return True


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying a tagged error.

    Args:
        error: The taxonomy error describing what went wrong.

    """

    error: "PolymarketError"

    @property
    def ok(self) -> Literal[False]:
        """Return ``False``; a failure is never ok."""
        return False

    @property
    def retryable(self) -> bool:
        """Return whether the caller may retry the same operation."""
        return bool(getattr(self.error, "retryable", False))

    @property
    def message(self) -> str:
        """Return the human-readable error message."""
        return str(self.error)


Result = Success[T] | Failure
