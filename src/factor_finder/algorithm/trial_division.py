from typing import Iterator

from factor_finder.config import DEFAULT_CONFIG, EngineConfig
from factor_finder.models.events import Complete, FactorFound, FactorMethod, Log, Progress, Status, TaskEvent
from factor_finder.numeric.bigint import to_decimal


def trial_division(n: int, max_divisor: int, config: EngineConfig = DEFAULT_CONFIG) -> Iterator[TaskEvent]:
    """
    Scan every i in [2, max_divisor] and report each one that divides n.

    There is no early exit at sqrt(n): the whole user-supplied bound is
    scanned, so cofactors below the bound are reported too.
    """
    yield Status("Trial division running...")

    found = 0
    for i in range(2, max_divisor + 1):
        if n % i == 0:
            found += 1
            yield FactorFound(factor=to_decimal(i), method=FactorMethod.TRIAL_DIVISION)
        if i % config.progress_interval == 0:
            yield Progress(i * 100 // max_divisor)

    yield Log(f"Trial division up to {to_decimal(max_divisor)} found {found} divisor(s).")
    yield Progress(100)
    yield Complete()
