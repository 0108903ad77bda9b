from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T

    def __bool__(self):
        return True


@dataclass(frozen=True)
class NotFound:
    """A lookup that failed. `reason` is meant to be logged by the caller."""
    reason: str

    def __bool__(self):
        return False


Resolution = Union[Found[T], NotFound]
