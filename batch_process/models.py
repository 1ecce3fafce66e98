"""
Outcome types for items processed with ``continue_on_error``.

An outcome is either ``Ok`` (the worker's value) or ``Err`` (the exception
left after all attempts), so a worker returning an exception object as its
value is never mistaken for a failure.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Generic, NoReturn, Tuple, TypeVar, Union

from telemetry.exceptions import get_error_summary
from telemetry.resilience import Attempt, OperationTimeoutError

R = TypeVar("R")


@dataclass(frozen=True)
class Ok(Generic[R]):
    """Successful outcome of one item."""
    value: R
    index: int
    attempts: Tuple[Attempt, ...] = ()

    ok: ClassVar[bool] = True

    def unwrap(self) -> R:
        return self.value


@dataclass(frozen=True)
class Err:
    """Permanent failure of one item, captured instead of aborting the run."""
    error: BaseException
    index: int
    attempts: Tuple[Attempt, ...] = ()

    ok: ClassVar[bool] = False

    def unwrap(self) -> NoReturn:
        raise self.error

    @property
    def timed_out(self) -> bool:
        return isinstance(self.error, OperationTimeoutError)

    def summary(self) -> Dict[str, Any]:
        summary = get_error_summary(self.error)
        summary["index"] = self.index
        summary["attempts"] = len(self.attempts)
        return summary


Outcome = Union[Ok[R], Err]
