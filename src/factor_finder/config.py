from dataclasses import dataclass, field, replace
from typing import Tuple

from factor_finder.errors import DomainError

QR_PRIMES = (3, 5, 7, 11, 13, 17, 19, 23)


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Tunables for the search engine. None of these affect correctness."""

    batch_size: int = 100
    progress_interval: int = 1000
    qr_primes: Tuple[int, ...] = field(default=QR_PRIMES)
    api_timeout: float = 30.0

    def __post_init__(self):
        if self.batch_size < 1:
            raise DomainError(f"batch_size must be positive, got {self.batch_size}", field="batch_size")
        if self.progress_interval < 1:
            raise DomainError(
                f"progress_interval must be positive, got {self.progress_interval}",
                field="progress_interval",
            )
        if self.api_timeout <= 0:
            raise DomainError(f"api_timeout must be positive, got {self.api_timeout}", field="api_timeout")
        for p in self.qr_primes:
            if not _is_odd_prime(p):
                raise DomainError(f"qr_primes must be odd primes, got {p}", field="qr_primes")

    def with_overrides(self, **overrides) -> "EngineConfig":
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _is_odd_prime(p: int) -> bool:
    if p < 3 or p % 2 == 0:
        return False
    d = 3
    while d * d <= p:
        if p % d == 0:
            return False
        d += 2
    return True


DEFAULT_CONFIG = EngineConfig()
