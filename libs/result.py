"""
Result type shared by application use cases.

Use cases return ``Result`` values instead of raising for expected business
failures. The API layer inspects ``is_err()`` and maps ``error.code`` to an
HTTP status.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Error:
    """Business error with a stable machine-readable code"""

    code: str
    message: str


class Result(Generic[T]):
    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self._value = value
        self._error = error

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        if self._error is not None:
            raise ValueError(f"Result is an error: {self._error.code}")
        return self._value

    @property
    def error(self) -> Optional[Error]:
        return self._error

    def __repr__(self) -> str:
        if self.is_err():
            return f"Result(error={self._error!r})"
        return f"Result(value={self._value!r})"


class Return:
    """Constructors for Result values"""

    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result:
        return Result(error=error)
