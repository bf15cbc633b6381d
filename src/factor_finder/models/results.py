from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from factor_finder.models.events import CandidateBatch, FactorFound, FactorMethod, SMinResult, TaskEvent
from factor_finder.numeric.bigint import parse_bigint


@dataclass(frozen=True, slots=True)
class FactorResult:
    factor: int
    method: FactorMethod


class FactorResultSet:
    """Found factors keyed by value. The first method to report a factor wins."""

    def __init__(self) -> None:
        self._by_factor: Dict[int, FactorResult] = {}

    def add(self, factor: int, method: FactorMethod) -> bool:
        """Add a factor. Returns False when the value was already known."""
        if factor in self._by_factor:
            return False
        self._by_factor[factor] = FactorResult(factor=factor, method=method)
        return True

    def __iter__(self) -> Iterator[FactorResult]:
        for factor in sorted(self._by_factor):
            yield self._by_factor[factor]

    def __len__(self) -> int:
        return len(self._by_factor)

    def __contains__(self, factor: int) -> bool:
        return factor in self._by_factor

    def factors(self) -> List[int]:
        return sorted(self._by_factor)


class CandidateSet:
    """Deduplicated S candidates in arrival order."""

    def __init__(self) -> None:
        self._seen: Dict[int, None] = {}

    def extend(self, candidates: Iterable[int]) -> int:
        """Add candidates, returning how many were new."""
        added = 0
        for s in candidates:
            if s not in self._seen:
                self._seen[s] = None
                added += 1
        return added

    def __iter__(self) -> Iterator[int]:
        return iter(self._seen)

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, s: int) -> bool:
        return s in self._seen


class SearchResults:
    """Caller-side accumulation of the events of one or more tasks."""

    def __init__(self) -> None:
        self.factors = FactorResultSet()
        self.candidates = CandidateSet()
        self.s_min: Optional[int] = None

    def apply(self, event: TaskEvent) -> None:
        match event:
            case FactorFound(factor=factor, method=method):
                self.factors.add(parse_bigint(factor, field="factor"), method)
            case CandidateBatch(candidates=candidates):
                self.candidates.extend(parse_bigint(s, field="candidates") for s in candidates)
            case SMinResult(s_min=s_min):
                self.s_min = parse_bigint(s_min, field="s_min")
