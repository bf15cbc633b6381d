from factor_finder.algorithm.sgs_filter import QuadraticResidueFilter, sgs_filter
from factor_finder.config import EngineConfig
from factor_finder.models.events import CandidateBatch, Complete, Progress


def candidates_of(events):
    return [int(s) for e in events if isinstance(e, CandidateBatch) for s in e.candidates]


class TestQuadraticResidueFilter:
    """Test suite for the quadratic-residue screen"""

    def test_true_sums_always_pass(self):
        """Test that x + y passes for every N = x * y with x != y"""
        for x in range(2, 60):
            for y in range(x + 1, 60):
                assert QuadraticResidueFilter(x * y).passes(x + y), (x, y)

    def test_boundary_is_skipped(self):
        """Test that S with S^2 <= 4N never passes"""
        qr_filter = QuadraticResidueFilter(1729)
        assert not qr_filter.passes(83)
        assert not qr_filter.passes(0)
        # x == y gives a zero discriminant, which is on the boundary.
        assert not QuadraticResidueFilter(49).passes(14)

    def test_rejects_non_residue(self):
        """Test that S = 84 is rejected for N = 1729 (discriminant 140 is 2 mod 3)"""
        assert not QuadraticResidueFilter(1729).passes(84)

    def test_zero_residue_passes(self):
        """Test that a discriminant divisible by a filter prime is not rejected"""
        # N = 3 * 6, S = 9, discriminant 9 is 0 mod 3.
        assert QuadraticResidueFilter(18).passes(9)

    def test_custom_primes(self):
        """Test filtering against a custom prime set"""
        qr_filter = QuadraticResidueFilter(1729, primes=(3,))
        assert qr_filter.primes == (3,)
        assert not qr_filter.passes(84)


class TestSgsFilter:
    """Test suite for the SGS event stream"""

    def test_1729_keeps_factor_pair_sums(self):
        """Test that every factor-pair sum of 1729 in range survives"""
        events = list(sgs_filter(1729, 1, 300))
        candidates = candidates_of(events)
        for s in (110, 146, 254):
            assert s in candidates
        assert 84 not in candidates
        assert all(s * s > 4 * 1729 for s in candidates)
        assert candidates == sorted(candidates)
        assert isinstance(events[-1], Complete)

    def test_batches(self):
        """Test that batching does not change the candidates"""
        whole = candidates_of(sgs_filter(1729, 1, 300))
        events = list(sgs_filter(1729, 1, 300, EngineConfig(batch_size=2)))
        batches = [e for e in events if isinstance(e, CandidateBatch)]
        assert all(1 <= len(b.candidates) <= 2 for b in batches)
        assert candidates_of(events) == whole

    def test_progress(self):
        """Test that progress increases and ends at 100 before completion"""
        events = list(sgs_filter(1729, 1, 300, EngineConfig(progress_interval=100)))
        values = [e.value for e in events if isinstance(e, Progress)]
        assert values == sorted(values)
        assert values[0] == 33.0
        assert events[-2] == Progress(100)

    def test_reversed_range(self):
        """Test that an empty range completes without candidates"""
        events = list(sgs_filter(1729, 10, 5))
        assert candidates_of(events) == []
        assert isinstance(events[-1], Complete)
