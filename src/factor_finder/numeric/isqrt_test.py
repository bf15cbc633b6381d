import math
import random

import pytest

from factor_finder.errors import DomainError
from factor_finder.numeric.isqrt import is_perfect_square, isqrt


class TestIsqrt:
    """Test suite for the Newton integer square root"""

    def test_small_values(self):
        """Test isqrt(n)^2 <= n < (isqrt(n) + 1)^2 for small n"""
        for n in range(0, 5000):
            r = isqrt(n)
            assert r * r <= n < (r + 1) * (r + 1)

    def test_trivial_inputs(self):
        """Test that 0 and 1 are returned unchanged"""
        assert isqrt(0) == 0
        assert isqrt(1) == 1

    def test_large_boundaries(self):
        """Test exactness around a large perfect square"""
        assert isqrt(10 ** 100) == 10 ** 50
        assert isqrt(10 ** 100 - 1) == 10 ** 50 - 1
        assert isqrt(10 ** 100 + 1) == 10 ** 50

    def test_matches_reference(self):
        """Test agreement with math.isqrt on random big values"""
        rng = random.Random(1729)
        for _ in range(200):
            n = rng.getrandbits(rng.randint(1, 600))
            assert isqrt(n) == math.isqrt(n)

    def test_negative(self):
        """Test that negative input is a DomainError"""
        with pytest.raises(DomainError, match="negative"):
            isqrt(-1)


class TestIsPerfectSquare:
    """Test suite for perfect square detection"""

    def test_squares(self):
        """Test squares and their neighbours"""
        for r in range(0, 200):
            assert is_perfect_square(r * r)
            if r > 1:
                assert not is_perfect_square(r * r + 1)
                assert not is_perfect_square(r * r - 1)

    def test_negative_is_not_square(self):
        """Test that negative values are never squares"""
        assert not is_perfect_square(-4)
