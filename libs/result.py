"""Result type shared by use cases

A use case returns ``Return.ok(value)`` on success or ``Return.err(Error(...))``
on a handled failure. Callers branch on ``is_ok()`` / ``is_err()``.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Error:
    """Machine-readable failure returned from a use case"""

    code: str
    message: str
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {"code": self.code, "message": self.message}
        if self.reason:
            payload["reason"] = self.reason
        return payload


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
        if self.is_ok():
            return f"Result(ok={self._value!r})"
        return f"Result(err={self._error!r})"


class Return:
    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result:
        return Result(error=error)
