#   Copyright 2019 AUI, Inc. Washington DC, USA
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.

"""
Refit policies of the best w-plane accessor. Both return the achieved deviation and the
coefficients to commit (None when the current plane has to be kept). They never touch the
accessor state themselves.
"""

import warnings
import numpy as np

from bestwplane._utils._constants import EARTH_ROTATION_RATE, MIN_FIT_ROWS
from bestwplane.direction.tangent_point import shift_longitude
from .fit_w_plane import fit_w_plane
from .max_w_deviation import max_w_deviation


def _update_w_plane_if_necessary(uvw, tolerance, coeffs):
    """
    Fit a new plane if the deviation from the current one reaches the tolerance.

    Parameters
    ----------
    uvw : numpy.ndarray, shape (n_row, 3)
    tolerance : float
        Tolerance in metres.
    coeffs : tuple of float
        Currently committed (A, B).
    Returns
    -------
    max_deviation : float
        Deviation from the plane that is in use after the call. If a new fit took place and
        this still exceeds the tolerance, the layout is too non-coplanar.
    new_coeffs : tuple of float or None
    """
    max_deviation = max_w_deviation(uvw, *coeffs)

    if (uvw.shape[0] < MIN_FIT_ROWS) or (max_deviation < tolerance):
        return max_deviation, None

    new_coeffs = fit_w_plane(uvw)
    if new_coeffs is None:
        return max_deviation, None

    return max_w_deviation(uvw, *new_coeffs), new_coeffs


def _update_advanced_time_w_plane_if_necessary(uvw_source, tangent_point, uvw, tolerance, coeffs, wplane_parms):
    """
    Fit a plane for a moment in the future, assuming a continuous track.

    A plane fitted for the current time is best now and drifts out of tolerance after some
    interval. A plane fitted for the middle of that interval is at the tolerance now, trends to
    zero deviation and drifts back to the tolerance, so refits happen about half as often.
    The tangent point is moved along in longitude to emulate the elapsed time.

    Parameters
    ----------
    uvw_source : bestwplane.direction.uvw_source.UVWSource
        Source of the current chunk, queried again for advanced tangent points.
    tangent_point : numpy.ndarray
        [ra, dec] in radians.
    uvw : numpy.ndarray, shape (n_row, 3)
        Coordinates at tangent_point.
    tolerance : float
        Tolerance in metres.
    coeffs : tuple of float
        Currently committed (A, B).
    wplane_parms : dict
        Checked parameters (predict_time_interval, max_advance_steps, verbose).
    Returns
    -------
    max_deviation : float
    new_coeffs : tuple of float or None
    """
    verbose = wplane_parms['verbose']
    max_deviation = max_w_deviation(uvw, *coeffs)

    if verbose:
        print('On entry current deviation (using the current plane)', max_deviation, 'tolerance', tolerance)
        print('w = u *', coeffs[0], '+ v *', coeffs[1])

    if max_deviation < tolerance:
        return max_deviation, None

    if uvw.shape[0] < MIN_FIT_ROWS:
        return max_deviation, None

    tmp_coeffs = fit_w_plane(uvw)
    if tmp_coeffs is None:
        if verbose:
            print('Matrix has almost 0 determinant, fit not likely to be valid')
        return max_deviation, None

    advanced_deviation = max_w_deviation(uvw, *tmp_coeffs)
    if advanced_deviation > tolerance:
        # cannot get below tolerance now, let alone in the future
        if verbose:
            print('Current deviation (after next plane fit)', advanced_deviation)
        return advanced_deviation, None

    angle_step = -EARTH_ROTATION_RATE*wplane_parms['predict_time_interval']
    n_step = 0
    while advanced_deviation < tolerance:
        if n_step == wplane_parms['max_advance_steps']:
            warnings.warn('w-plane stays within tolerance for ' + str(n_step*wplane_parms['predict_time_interval']) +
                          ' s, giving up the advanced time search and using the plane fitted for the current time')
            return max_w_deviation(uvw, *tmp_coeffs), tmp_coeffs
        n_step = n_step + 1
        advanced_uvw = _fetch_uvw(uvw_source, shift_longitude(tangent_point, n_step*angle_step))
        advanced_deviation = max_w_deviation(advanced_uvw, *tmp_coeffs)
        if verbose:
            print('Current deviation (after', n_step*wplane_parms['predict_time_interval'], 'seconds)', advanced_deviation)

    if n_step == 0:
        return advanced_deviation, tmp_coeffs

    # pull back one step at a time until the plane is good for the present as well
    accepted_coeffs = None
    while n_step > 0:
        n_step = n_step - 1
        if n_step == 0:
            rolled_back_uvw = uvw
        else:
            rolled_back_uvw = _fetch_uvw(uvw_source, shift_longitude(tangent_point, n_step*angle_step))

        if rolled_back_uvw.shape[0] < MIN_FIT_ROWS:
            break
        candidate_coeffs = fit_w_plane(rolled_back_uvw)
        if candidate_coeffs is None:
            break

        accepted_coeffs = candidate_coeffs
        if max_w_deviation(uvw, *candidate_coeffs) < tolerance:
            break

    if accepted_coeffs is None:
        return max_deviation, None

    max_deviation = max_w_deviation(uvw, *accepted_coeffs)
    if verbose:
        print('On exit deviation', max_deviation, 'plane fitted', n_step*wplane_parms['predict_time_interval'], 'seconds ahead')
        print('w = u *', accepted_coeffs[0], '+ v *', accepted_coeffs[1])
    return max_deviation, accepted_coeffs


def _fetch_uvw(uvw_source, tangent_point):
    return np.asarray(uvw_source.rotated_uvw(tangent_point), dtype=np.double).reshape(-1, 3)
