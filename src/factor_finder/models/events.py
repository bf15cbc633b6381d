from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple, Union

from factor_finder.errors import ErrorKind


class FactorMethod(str, Enum):
    TRIAL_DIVISION = "trial-division"
    SAS_RESOLVE = "sas-resolve"

    def __str__(self):
        return self.value


@dataclass(frozen=True, slots=True)
class Log:
    message: str
    type: ClassVar[str] = "log"


@dataclass(frozen=True, slots=True)
class Status:
    message: str
    type: ClassVar[str] = "status"


@dataclass(frozen=True, slots=True)
class Progress:
    """Percentage of the search space traversed, clamped to 0..100."""

    value: float
    type: ClassVar[str] = "progress"

    def __post_init__(self):
        object.__setattr__(self, "value", min(100.0, max(0.0, float(self.value))))


@dataclass(frozen=True, slots=True)
class CandidateBatch:
    candidates: Tuple[str, ...] = field(default_factory=tuple)
    type: ClassVar[str] = "s_candidate_batch"


@dataclass(frozen=True, slots=True)
class FactorFound:
    factor: str
    method: FactorMethod
    type: ClassVar[str] = "factor_found"


@dataclass(frozen=True, slots=True)
class SMinResult:
    s_min: str
    type: ClassVar[str] = "s_min_result"


@dataclass(frozen=True, slots=True)
class Complete:
    type: ClassVar[str] = "complete"


@dataclass(frozen=True, slots=True)
class Error:
    kind: ErrorKind
    message: str
    type: ClassVar[str] = "error"


TaskEvent = Union[Log, Status, Progress, CandidateBatch, FactorFound, SMinResult, Complete, Error]

TERMINAL_EVENTS = (Complete, Error, SMinResult)


def is_terminal(event: TaskEvent) -> bool:
    return isinstance(event, TERMINAL_EVENTS)


def event_to_dict(event: TaskEvent) -> Dict[str, Any]:
    """Flatten an event into a JSON-friendly dict tagged with its type."""
    data: Dict[str, Any] = {"type": event.type}
    for f in fields(event):
        value = getattr(event, f.name)
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)
        data[f.name] = value
    return data
