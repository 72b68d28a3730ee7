"""
Ok/Err result for command parsing.

Parsing a command line can fail in ordinary, expected ways (a typo, a missing
argument). Those failures come back as Err carrying the message to show the
user, leaving exceptions for I/O problems such as a failed save.

    result = parse_command(line)
    if result.is_err():
        state.last_error = result.error
    else:
        apply_command(config, result.value)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    @property
    def value(self) -> None:
        return None

    def unwrap(self) -> NoReturn:
        """Always raises; there is no value to return."""
        raise ValueError(f"unwrap() on Err({self.error!r})")


Result = Union[Ok[T], Err[E]]
