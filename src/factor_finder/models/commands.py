from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, List, Literal, Tuple, Union

from pydantic import BaseModel, Field, TypeAdapter

from factor_finder.errors import DomainError
from factor_finder.numeric.bigint import parse_bigint, power


class SearchMode(str, Enum):
    S_MIN = "s_min"
    TRIAL = "trial"
    SGS = "sgs"
    RESOLVE = "resolve"

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, value: str) -> "SearchMode":
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise DomainError(f"invalid search mode {value!r}, expected one of: {valid}", field="mode") from None


class TargetFields(BaseModel):
    base: str
    exponent: str
    addend: str


class StartSMin(TargetFields):
    command: Literal["start_s_min"] = "start_s_min"


class StartTrial(TargetFields):
    command: Literal["start_trial"] = "start_trial"
    max: str


class StartSgs(TargetFields):
    command: Literal["start_sgs"] = "start_sgs"
    min: str
    max: str


class StartResolve(TargetFields):
    command: Literal["start_resolve"] = "start_resolve"
    s_candidates: List[str] = Field(default_factory=list)


SearchCommand = Annotated[
    Union[StartSMin, StartTrial, StartSgs, StartResolve],
    Field(discriminator="command"),
]

search_command_adapter: TypeAdapter[SearchCommand] = TypeAdapter(SearchCommand)

COMMAND_MODES = {
    "start_s_min": SearchMode.S_MIN,
    "start_trial": SearchMode.TRIAL,
    "start_sgs": SearchMode.SGS,
    "start_resolve": SearchMode.RESOLVE,
}


@dataclass(frozen=True, slots=True)
class SearchParameters:
    """Parsed, read-only parameters of one search task."""

    mode: SearchMode
    base: int
    exponent: int
    addend: int
    min: int = 0
    max: int = 0
    s_candidates: Tuple[int, ...] = field(default_factory=tuple)

    def target(self) -> int:
        """N = base ** exponent + addend. Negative targets are rejected."""
        n = power(self.base, self.exponent) + self.addend
        if n < 0:
            raise DomainError(f"N must be non-negative, got {n}", field="addend")
        return n

    @classmethod
    def from_command(cls, command: SearchCommand) -> "SearchParameters":
        """Parse every decimal field of a command up front, before any arithmetic."""
        mode = COMMAND_MODES.get(command.command)
        if mode is None:
            raise DomainError(f"invalid command {command.command!r}", field="command")

        values = dict(
            mode=mode,
            base=parse_bigint(command.base, field="base"),
            exponent=parse_bigint(command.exponent, field="exponent"),
            addend=parse_bigint(command.addend, field="addend"),
        )
        match command:
            case StartTrial():
                values["max"] = parse_bigint(command.max, field="max")
            case StartSgs():
                values["min"] = parse_bigint(command.min, field="min")
                values["max"] = parse_bigint(command.max, field="max")
            case StartResolve():
                values["s_candidates"] = tuple(
                    parse_bigint(s, field=f"s_candidates[{i}]") for i, s in enumerate(command.s_candidates)
                )
        return cls(**values)


def build_command(
    mode: str,
    base: str,
    exponent: str,
    addend: str,
    *,
    min: str = "1",
    max: str = "2000",
    s_candidates: Tuple[str, ...] = (),
) -> SearchCommand:
    """Build the command for a mode name. Unknown modes fail before any arithmetic."""
    match SearchMode.parse(mode):
        case SearchMode.S_MIN:
            return StartSMin(base=base, exponent=exponent, addend=addend)
        case SearchMode.TRIAL:
            return StartTrial(base=base, exponent=exponent, addend=addend, max=max)
        case SearchMode.SGS:
            return StartSgs(base=base, exponent=exponent, addend=addend, min=min, max=max)
        case SearchMode.RESOLVE:
            return StartResolve(base=base, exponent=exponent, addend=addend, s_candidates=list(s_candidates))
