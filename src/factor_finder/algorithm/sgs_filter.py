from typing import Dict, Iterator, List, Sequence

from factor_finder.config import DEFAULT_CONFIG, QR_PRIMES, EngineConfig
from factor_finder.models.events import CandidateBatch, Complete, Log, Progress, Status, TaskEvent
from factor_finder.numeric.bigint import to_decimal
from factor_finder.numeric.modpow import legendre


class QuadraticResidueFilter:
    """
    Necessary-condition screen for candidate sums S of a factor pair of n.

    If n = x * y then S = x + y gives the square discriminant (x - y)^2 =
    S^2 - 4n, which is a quadratic residue (or 0) modulo every prime. An S
    whose discriminant is a strict non-residue modulo any prime of the set
    can therefore never be a factor-pair sum. Passing proves nothing.
    """

    def __init__(self, n: int, primes: Sequence[int] = QR_PRIMES):
        self.n = n
        self.four_n = 4 * n
        self.primes = tuple(primes)
        self._n_mods: Dict[int, int] = {p: n % p for p in self.primes}

    def passes(self, s: int) -> bool:
        s_sq = s * s
        if s_sq <= self.four_n:
            return False

        for p in self.primes:
            d_mod_p = (s_sq - 4 * self._n_mods[p]) % p
            # 0 is not a non-residue and counts as a pass.
            if legendre(d_mod_p, p) == p - 1:
                return False
        return True


def sgs_filter(n: int, s_min: int, s_max: int, config: EngineConfig = DEFAULT_CONFIG) -> Iterator[TaskEvent]:
    """Screen every S in [s_min, s_max], emitting survivors in batches of config.batch_size."""
    qr_filter = QuadraticResidueFilter(n, config.qr_primes)

    yield Status("SGS filter running...")
    span = s_max - s_min
    batch: List[str] = []
    kept = 0

    for scanned, s in enumerate(range(s_min, s_max + 1), start=1):
        if qr_filter.passes(s):
            kept += 1
            batch.append(to_decimal(s))
            if len(batch) >= config.batch_size:
                yield CandidateBatch(candidates=tuple(batch))
                batch = []

        if scanned % config.progress_interval == 0 and span > 0:
            yield Progress((s - s_min) * 100 // span)

    if batch:
        yield CandidateBatch(candidates=tuple(batch))

    yield Log(f"SGS filter kept {kept} of {max(span + 1, 0)} value(s) of S.")
    yield Progress(100)
    yield Complete()
