from typing import Iterator, Optional, Sequence, Tuple

from factor_finder.config import DEFAULT_CONFIG, EngineConfig
from factor_finder.models.events import Complete, FactorFound, FactorMethod, Log, Progress, Status, TaskEvent
from factor_finder.numeric.bigint import to_decimal
from factor_finder.numeric.isqrt import isqrt


def resolve_factor_pair(n: int, s: int) -> Optional[Tuple[int, int]]:
    """Recover (x, y) with x + y = s and x * y = n, or None if s is not such a sum."""
    d_sq = s * s - 4 * n
    if d_sq < 0:
        return None

    d = isqrt(d_sq)
    if d * d != d_sq:
        return None

    total = s + d
    if total % 2 != 0:
        return None

    factor = total // 2
    if factor < 1 or n % factor != 0:
        return None
    return factor, n // factor


def sas_resolve(n: int, s_candidates: Sequence[int], config: EngineConfig = DEFAULT_CONFIG) -> Iterator[TaskEvent]:
    """Try every candidate sum in input order; report both factors of each pair found."""
    yield Status("SAS resolver running...")

    total = len(s_candidates)
    if total == 0:
        yield Log("No S candidates to resolve.")
        yield Progress(100)
        yield Complete()
        return

    pairs = 0
    for index, s in enumerate(s_candidates):
        pair = resolve_factor_pair(n, s)
        if pair is not None:
            pairs += 1
            for factor in pair:
                # Trivial divisors are not factor results.
                if factor > 1:
                    yield FactorFound(factor=to_decimal(factor), method=FactorMethod.SAS_RESOLVE)
        yield Progress((index + 1) * 100 / total)

    yield Log(f"SAS resolver matched {pairs} of {total} candidate(s).")
    yield Complete()
