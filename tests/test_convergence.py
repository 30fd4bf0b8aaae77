import math

import numpy as np
import pytest

from mcintegral import (
    ConvergencePoint,
    ConvergenceSeries,
    ConvergenceSweep,
    Domain,
    Interval,
    ScalarEstimator,
    SweepConfig,
    VolumeEstimator,
    estimator_for,
)


class TestSweepConfig:
    """Test the sample-count schedule"""

    def test_defaults(self):
        """Test the default floor and step count"""
        cfg = SweepConfig()
        assert cfg.floor == 100
        assert cfg.n_steps == 20
        assert cfg.min_step == 1
        assert cfg.n_trials == 1

    def test_schedule_exact_division(self):
        """Test a schedule whose last step lands on max_points"""
        counts = SweepConfig().schedule(2_000)
        assert counts[0] == 100
        assert counts[1] - counts[0] == 100
        assert counts[-1] == 2_000
        assert counts.count(2_000) == 1

    def test_schedule_appends_endpoint(self):
        """Test max_points is appended when stepping overshoots it"""
        counts = SweepConfig().schedule(1_050)
        # step = 52: 100, 152, ..., 1036, then 1050
        assert counts[-2] == 1036
        assert counts[-1] == 1_050

    def test_schedule_strictly_increasing(self):
        """Test sample counts strictly increase"""
        counts = SweepConfig().schedule(12_345)
        assert all(b > a for a, b in zip(counts, counts[1:]))

    @pytest.mark.parametrize("max_points", [1, 19, 50, 99])
    def test_below_floor_is_single_point(self, max_points):
        """Test max_points under the floor yields one point at max_points"""
        assert SweepConfig().schedule(max_points) == [max_points]

    def test_at_floor(self):
        """Test max_points equal to the floor"""
        assert SweepConfig().schedule(100) == [100]

    def test_small_max_uses_min_step(self):
        """Test the step never drops to zero"""
        cfg = SweepConfig(floor=5)
        assert cfg.step(10) == 1
        assert cfg.schedule(10) == [5, 6, 7, 8, 9, 10]

    def test_configurable_floor(self):
        """Test a custom floor moves the first count"""
        assert SweepConfig(floor=10).schedule(1_000)[0] == 10

    @pytest.mark.parametrize("max_points", [0, -20])
    def test_invalid_max_points(self, max_points):
        """Test non-positive maxima are rejected"""
        with pytest.raises(ValueError, match="n_points must be positive"):
            SweepConfig().schedule(max_points)

    @pytest.mark.parametrize("field", ["floor", "n_steps", "min_step", "n_trials"])
    def test_invalid_config(self, field):
        """Test every config field must be >= 1"""
        with pytest.raises(ValueError, match=field):
            SweepConfig(**{field: 0})


class TestEstimatorFor:
    """Test estimator selection by domain shape"""

    def test_interval(self):
        """Test an Interval selects the scalar estimator"""
        assert isinstance(estimator_for(Interval(0, 1)), ScalarEstimator)

    def test_pair_of_numbers(self):
        """Test a numeric pair selects the scalar estimator"""
        assert isinstance(estimator_for((0.0, 1.0)), ScalarEstimator)

    def test_numpy_pair(self):
        """Test a NumPy array of two bounds selects the scalar estimator"""
        assert isinstance(estimator_for(np.array([0.0, 1.0])), ScalarEstimator)

    def test_numpy_box(self):
        """Test a 2-D NumPy array of bounds selects the volume estimator"""
        assert isinstance(estimator_for(np.array([[0.0, 1.0], [0.0, 1.0]])), VolumeEstimator)

    def test_list_of_intervals(self):
        """Test two Interval objects form a box, not a pair of bounds"""
        assert isinstance(estimator_for([Interval(0, 1), Interval(0, 2)]), VolumeEstimator)

    def test_domain(self):
        """Test a Domain selects the volume estimator"""
        assert isinstance(estimator_for(Domain.from_bounds([(0, 1)])), VolumeEstimator)

    def test_sequence_of_pairs(self):
        """Test a list of pairs selects the volume estimator"""
        assert isinstance(estimator_for([(0, 1), (0, 1)]), VolumeEstimator)

    def test_shares_source(self, source):
        """Test the chosen estimator draws from the given source"""
        assert estimator_for((0, 1), source).source is source


class TestConvergenceSweep:
    """Test the error-versus-sample-count sweep"""

    def test_numpy_interval(self, sweep):
        """Test a NumPy pair of bounds is swept with the scalar estimator"""
        series = sweep.run(np.array([0.0, 1.0]), lambda x: x, 200, 0.5)
        assert series.estimator == "scalar"
        assert series.last.n_points == 200

    def test_scalar_series_ends_at_max(self, sweep):
        """Test the last point is exactly max_points"""
        series = sweep.run((0.0, 1.0), lambda x: x * x, max_points=1_050, reference=1 / 3)
        assert series.last.n_points == 1_050
        assert series.estimator == "scalar"

    def test_volume_series_ends_at_max(self, sweep):
        """Test the multidimensional sweep also ends at max_points"""
        series = sweep.run([(0, 1), (0, 1)], lambda p: p[0] * p[1], max_points=777, reference=0.25)
        assert series.last.n_points == 777
        assert series.estimator == "volume"

    def test_matches_schedule(self, sweep):
        """Test the series visits exactly the configured sample counts"""
        series = sweep.run((0, 1), lambda x: x, max_points=3_000, reference=0.5)
        assert list(series.n_points) == SweepConfig().schedule(3_000)

    def test_errors_are_absolute_differences(self):
        """Test errors equal |estimate - reference|"""
        series = ConvergenceSweep(seed=1).run((0, 2), lambda x: 3.0, max_points=200, reference=10.0)
        # constant integrand: every estimate is exactly 6
        np.testing.assert_allclose(series.errors, 4.0)

    def test_below_floor_single_point(self, sweep):
        """Test max_points under the floor gives one point at max_points"""
        series = sweep.run((0, 1), lambda x: x, max_points=20, reference=0.5)
        assert len(series) == 1
        assert series.last.n_points == 20

    @pytest.mark.parametrize("max_points", [0, -1])
    def test_invalid_max_points(self, sweep, counting_integrand, max_points):
        """Test invalid maxima fail before any evaluation"""
        with pytest.raises(ValueError):
            sweep.run((0, 1), counting_integrand, max_points=max_points, reference=0.0)
        assert counting_integrand.calls == 0

    def test_integrand_failure_aborts_sweep(self, sweep, failing_integrand):
        """Test integrand errors propagate out of the sweep"""
        with pytest.raises(ZeroDivisionError):
            sweep.run((0, 1), failing_integrand, max_points=500, reference=0.0)

    def test_degenerate_domain_zero_errors_against_zero(self, sweep):
        """Test a degenerate box gives zero error against reference 0"""
        series = sweep.run([(0, 1), (1, 1)], lambda p: 5.0, max_points=400, reference=0.0)
        assert np.all(series.errors == 0.0)

    def test_explicit_estimator(self):
        """Test a supplied estimator is used for every point"""
        est = VolumeEstimator(seed=3)
        sw = ConvergenceSweep(est)
        assert sw.source is est.source
        series = sw.run([(0, 1)], lambda p: p[0], max_points=300, reference=0.5)
        assert series.estimator == "volume"

    def test_seeded_reproducible(self):
        """Test two sweeps with the same seed agree"""
        a = ConvergenceSweep(seed=5).run((0, math.pi), math.sin, max_points=1_000, reference=2.0)
        b = ConvergenceSweep(seed=5).run((0, math.pi), math.sin, max_points=1_000, reference=2.0)
        np.testing.assert_array_equal(a.errors, b.errors)

    def test_trials_average_errors(self):
        """Test n_trials records the mean absolute error over trials"""
        cfg = SweepConfig(n_trials=50)
        series = ConvergenceSweep(config=cfg, seed=11).run(
            (0, 1), lambda x: x * x, max_points=10_000, reference=1 / 3, vectorized=True
        )
        # averaged errors decay close to the theoretical n^-1/2 rate
        assert series.errors[0] > series.errors[-1]
        assert series.fitted_rate() == pytest.approx(-0.5, abs=0.2)

    def test_vectorized_sweep(self, sweep):
        """Test vectorized integrands are forwarded to the estimator"""
        series = sweep.run((0, 1), lambda x: x * x, max_points=2_000, reference=1 / 3, vectorized=True)
        assert series.last.n_points == 2_000
        assert np.all(series.errors < 0.1)


class TestConvergenceSeries:
    """Test the series container"""

    def _series(self):
        pts = tuple(ConvergencePoint(n, 1.0 / math.sqrt(n)) for n in (100, 400, 1_600, 6_400))
        return ConvergenceSeries(points=pts, reference=0.0, estimator="scalar")

    def test_arrays_are_aligned(self):
        """Test n_points and errors line up"""
        s = self._series()
        np.testing.assert_array_equal(s.n_points, [100, 400, 1_600, 6_400])
        np.testing.assert_allclose(s.errors, [0.1, 0.05, 0.025, 0.0125])

    def test_sequence_protocol(self):
        """Test len, iteration and indexing"""
        s = self._series()
        assert len(s) == 4
        assert [p.n_points for p in s] == [100, 400, 1_600, 6_400]
        assert s[0].n_points == 100
        assert s.last.n_points == 6_400

    def test_fitted_rate_exact(self):
        """Test the fitted slope of an exact n^-1/2 series"""
        assert self._series().fitted_rate() == pytest.approx(-0.5)

    def test_fitted_rate_ignores_zero_errors(self):
        """Test zero errors are excluded from the log fit"""
        pts = (ConvergencePoint(100, 0.0),) + self._series().points
        s = ConvergenceSeries(points=pts, reference=0.0)
        assert s.fitted_rate() == pytest.approx(-0.5)

    def test_fitted_rate_nan_when_insufficient(self):
        """Test the rate is undefined with fewer than two usable points"""
        s = ConvergenceSeries(points=(ConvergencePoint(100, 0.1),), reference=0.0)
        assert math.isnan(s.fitted_rate())
