import numpy as np
import pytest
from scipy import constants

from bestwplane import BestWPlaneAccessor, ToleranceExceeded
from bestwplane._utils._constants import EARTH_ROTATION_RATE
from bestwplane.direction import UVWSource


TANGENT_POINT = np.array([1.2, -0.6])

UV = np.array([[u, v] for u in (-100.0, -50.0, 0.0, 50.0, 100.0) for v in (-80.0, -20.0, 30.0, 90.0)])


class LinearDriftSource(UVWSource):
    """
    Coplanar chunk whose plane tilts linearly with time, w = drift_rate*t*u.
    Moving the tangent point longitude back by EARTH_ROTATION_RATE*dt is the same as observing dt later.
    """

    def __init__(self, time, drift_rate, reference_ra=TANGENT_POINT[0]):
        self.time = time
        self.drift_rate = drift_rate
        self.reference_ra = reference_ra
        self.n_calls = 0

    def rotated_uvw(self, tangent_point):
        self.n_calls += 1
        time = self.time + (self.reference_ra - tangent_point[0])/EARTH_ROTATION_RATE
        return np.column_stack([UV, self.drift_rate*time*UV[:, 0]])

    def frequency(self):
        # one metre per wavelength
        return np.array([constants.c])


class StaticUVWSource(UVWSource):

    def __init__(self, uvw):
        self.uvw = np.asarray(uvw, dtype=float)

    def rotated_uvw(self, tangent_point):
        return self.uvw

    def frequency(self):
        return np.array([constants.c])


def _run_track(predict_w_plane, times, drift_rate=1.03e-4):
    accessor = BestWPlaneAccessor({'w_tolerance': 1.0, 'check_residual': True, 'predict_w_plane': predict_w_plane,
                                   'predict_time_interval': 10.0})
    commit_times = []
    for time in times:
        accessor.associate(LinearDriftSource(time, drift_rate))
        plane_epoch = accessor.plane_epoch
        accessor.corrected_uvw(TANGENT_POINT)
        if accessor.plane_epoch != plane_epoch:
            commit_times.append(time)
        assert accessor.max_deviation < accessor.tolerance_in_metres
    return accessor, commit_times


def test_predictive_plane_commits_less_often():
    times = np.arange(80)*15.0

    reactive, reactive_commits = _run_track(False, times)
    predictive, predictive_commits = _run_track(True, times)

    assert reactive.plane_epoch == len(reactive_commits)
    assert predictive.plane_epoch == len(predictive_commits)
    assert 0 < len(predictive_commits) < len(reactive_commits)
    assert reactive_commits == [105.0*(i + 1) for i in range(11)]
    assert predictive_commits == [105.0, 300.0, 495.0, 690.0, 885.0, 1080.0]


def test_predictive_plane_is_fitted_ahead():
    # deviation of the plane for t reaches the 1 m tolerance 97 s later, the search in 10 s steps
    # overshoots to 100 s and rolls back to 90 s
    accessor = BestWPlaneAccessor({'w_tolerance': 1.0, 'predict_w_plane': True, 'predict_time_interval': 10.0})
    accessor.associate(LinearDriftSource(105.0, 1.03e-4))

    corrected = accessor.corrected_uvw(TANGENT_POINT)

    assert accessor.plane_epoch == 1
    assert np.isclose(accessor.coeff_a, 1.03e-4*195.0, rtol=1e-9)
    assert np.isclose(accessor.coeff_b, 0.0, atol=1e-12)
    assert np.isclose(accessor.max_deviation, 1.03e-4*90.0*100.0)
    assert np.isclose(np.max(np.abs(corrected[:, 2])), accessor.max_deviation)


def test_predictive_plane_no_refit_within_tolerance():
    accessor = BestWPlaneAccessor({'w_tolerance': 1.0, 'predict_w_plane': True, 'predict_time_interval': 10.0})
    source = LinearDriftSource(50.0, 1.03e-4)
    accessor.associate(source)

    accessor.corrected_uvw(TANGENT_POINT)

    assert accessor.plane_epoch == 0
    assert source.n_calls == 1


def test_predictive_search_ceiling():
    uvw = np.column_stack([UV, 0.5*UV[:, 0]])
    accessor = BestWPlaneAccessor({'w_tolerance': 1.0, 'predict_w_plane': True, 'max_advance_steps': 5})
    accessor.associate(StaticUVWSource(uvw))

    with pytest.warns(UserWarning):
        corrected = accessor.corrected_uvw(TANGENT_POINT)

    assert accessor.plane_epoch == 1
    assert np.isclose(accessor.coeff_a, 0.5)
    np.testing.assert_allclose(corrected[:, 2], 0.0, atol=1e-9)


def test_predictive_hard_violation():
    rng = np.random.default_rng(11)
    uvw = np.column_stack([UV, rng.uniform(-50.0, 50.0, size=UV.shape[0])])

    accessor = BestWPlaneAccessor({'w_tolerance': 1.0, 'predict_w_plane': True, 'check_residual': False})
    accessor.associate(StaticUVWSource(uvw))
    accessor.corrected_uvw(TANGENT_POINT)

    assert accessor.plane_epoch == 0
    assert (accessor.coeff_a, accessor.coeff_b) == (0.0, 0.0)
    assert accessor.max_deviation > accessor.tolerance_in_metres

    checked = BestWPlaneAccessor({'w_tolerance': 1.0, 'predict_w_plane': True, 'check_residual': True})
    checked.associate(StaticUVWSource(uvw))
    with pytest.raises(ToleranceExceeded):
        checked.corrected_uvw(TANGENT_POINT)


def test_predictive_singular_geometry_keeps_plane():
    u = np.arange(-5.0, 6.0)*10.0
    uvw = np.column_stack([u, 2.0*u, 0.3*u + 2.0])

    accessor = BestWPlaneAccessor({'w_tolerance': 1.0, 'predict_w_plane': True, 'check_residual': False})
    accessor.associate(StaticUVWSource(uvw))
    accessor.corrected_uvw(TANGENT_POINT)

    assert accessor.plane_epoch == 0
    assert np.isclose(accessor.max_deviation, 17.0)
