from typing import Iterator

from factor_finder.config import DEFAULT_CONFIG, EngineConfig
from factor_finder.errors import ComputationError
from factor_finder.models.events import Log, SMinResult, Status, TaskEvent
from factor_finder.numeric.bigint import digit_count, to_decimal
from factor_finder.numeric.isqrt import isqrt


def compute_s_min(n: int) -> int:
    """Least S with S^2 > 4n.

    2 * isqrt(n) never exceeds the answer, and at most two increments are
    needed since (2 * isqrt(n) + 2)^2 > 4n.
    """
    s = isqrt(n) * 2
    four_n = 4 * n
    while s * s <= four_n:
        s += 1
    return s


def find_s_min(n: int, config: EngineConfig = DEFAULT_CONFIG) -> Iterator[TaskEvent]:
    yield Status("Computing S_min...")
    try:
        s_min = compute_s_min(n)
        s_min_text = to_decimal(s_min)
    except (ArithmeticError, MemoryError) as e:
        raise ComputationError(f"failed to calculate S_min for N: {e}") from e

    yield Log(f"S_min has {digit_count(s_min)} digit(s).")
    yield SMinResult(s_min=s_min_text)
