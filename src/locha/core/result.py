"""
Link resolution outcomes.

`build_groups` checks every link of a payload against its feature ids
and keeps going past failures. Each check yields an `Ok` holding the
usable link, or an `Err` holding the exception describing why the link
was dropped. `partition` splits a batch of outcomes in one pass.
"""

from dataclasses import dataclass
from typing import Generic, Iterable, List, Tuple, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed check. `unwrap` re-raises the carried exception."""
    error: E

    def __bool__(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Union[Ok[T], Err[E]]


def partition(results: Iterable[Result[T, E]]) -> Tuple[List[T], List[E]]:
    """Split outcomes into (values, errors), keeping their order."""
    values: List[T] = []
    errors: List[E] = []
    for result in results:
        if result:
            values.append(result.value)
        else:
            errors.append(result.error)
    return values, errors
