import pytest

from factor_finder.algorithm.s_min import compute_s_min, find_s_min
from factor_finder.errors import ComputationError, DomainError
from factor_finder.models.events import SMinResult, Status


class TestComputeSMin:
    """Test suite for the minimal sum S with S^2 > 4N"""

    def test_minimality_small(self):
        """Test S^2 > 4N and (S - 1)^2 <= 4N for small N"""
        for n in range(0, 5000):
            s = compute_s_min(n)
            assert s * s > 4 * n
            assert (s - 1) * (s - 1) <= 4 * n

    def test_minimality_large(self):
        """Test minimality around big squares"""
        for n in [10 ** 40, 10 ** 40 - 1, 10 ** 40 + 1, 2 ** 255 + 19, (10 ** 30 + 7) * (10 ** 30 + 9)]:
            s = compute_s_min(n)
            assert s * s > 4 * n
            assert (s - 1) * (s - 1) <= 4 * n

    def test_1729(self):
        """Test the value for N = 1729"""
        assert compute_s_min(1729) == 84


class TestFindSMin:
    """Test suite for the S_min event stream"""

    def test_events(self):
        """Test that the stream ends with the S_min result"""
        events = list(find_s_min(1729))
        assert isinstance(events[0], Status)
        assert events[-1] == SMinResult(s_min="84")

    def test_arithmetic_failure_is_computation_error(self, monkeypatch):
        """Test that arithmetic failures surface as a ComputationError"""
        import factor_finder.algorithm.s_min as s_min_module

        def explode(n):
            raise OverflowError("too big")

        monkeypatch.setattr(s_min_module, "compute_s_min", explode)
        with pytest.raises(ComputationError, match="too big"):
            list(find_s_min(1729))

    def test_engine_errors_pass_through(self, monkeypatch):
        """Test that engine errors keep their own kind"""
        import factor_finder.algorithm.s_min as s_min_module

        def negative(n):
            raise DomainError("square root of negative number: -1")

        monkeypatch.setattr(s_min_module, "compute_s_min", negative)
        with pytest.raises(DomainError):
            list(find_s_min(1729))
