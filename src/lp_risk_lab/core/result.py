"""Tagged success/failure values returned by context-dependent operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")


class RiskError(Exception):
    """Raised when a failed :class:`Err` is unwrapped."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: RiskError

    def is_ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.error)

    def unwrap(self) -> NoReturn:
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok[T], Err]

SETTINGS_MISSING = "No risk settings configured"


def settings_missing() -> Err:
    return Err(RiskError(SETTINGS_MISSING))


__all__ = ["Err", "Ok", "Result", "RiskError", "SETTINGS_MISSING", "settings_missing"]
