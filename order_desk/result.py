"""Tagged success/failure values returned instead of raised."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a payload."""

    value: T
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying a reason."""

    error: E
    ok: ClassVar[bool] = False


Result = Union[Ok[T], Err[E]]
