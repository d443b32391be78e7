"""
Result type used across layers instead of exceptions for expected failures.

Usage:
    result = Return.ok(value)
    result = Return.err(Error("CODE", "Human readable message"))

    if result.is_err():
        handle(result.error)
    use(result.value)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Error:
    """Error value carried by a failed Result"""

    code: str
    message: str
    reason: Optional[str] = None
    details: Optional[Dict[str, Any]] = field(default=None, compare=False)


class Ok(Generic[T]):
    __slots__ = ("value",)

    def __init__(self, value: T):
        self.value = value

    @property
    def error(self) -> None:
        return None

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


class Err:
    __slots__ = ("error",)

    def __init__(self, error: Error):
        self.error = error

    @property
    def value(self) -> Any:
        raise AttributeError(f"Err result has no value: {self.error.code}")

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err]


class Return:
    @staticmethod
    def ok(value: T = None) -> Ok[T]:
        return Ok(value)

    @staticmethod
    def err(error: Error) -> Err:
        return Err(error)
