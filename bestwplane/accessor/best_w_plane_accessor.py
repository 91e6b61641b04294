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

import copy

import numpy as np
from scipy import constants

from bestwplane._utils._check_parms import _check_wplane_parms
from bestwplane._utils._errors import PreconditionViolation, ToleranceExceeded
from bestwplane.direction.tangent_point import _as_tangent_point, tangent_points_match
from bestwplane.fitting.max_w_deviation import max_w_deviation
from bestwplane.fitting.update_w_plane import _update_w_plane_if_necessary, _update_advanced_time_w_plane_if_necessary, _fetch_uvw
from .change_epoch import EpochTracker


class BestWPlaneAccessor:
    """
    Adapter of a chunk source which fits a plane w = A*u + B*v and corrects w to represent the
    distance from this plane rather than the absolute w-term. The planar component can be taken
    out as a shift in the image space using coeff_a and coeff_b.

    A new plane is only fitted when the deviation from the current one exceeds the tolerance.
    One accessor serves a single tangent point, bound by the first call to corrected_uvw.

    Parameters
    ----------
    wplane_parms : dict
    wplane_parms['w_tolerance'] : number
        w-term tolerance in wavelengths. Converted to metres with the highest frequency of each chunk.
    wplane_parms['check_residual'] : bool, default = True
        If true ToleranceExceeded is raised when the residual w-term after the fit exceeds the tolerance.
    wplane_parms['predict_w_plane'] : bool, default = False
        If true the plane is fitted for a moment in the future (continuous track assumed), which
        reduces the number of refits.
    wplane_parms['predict_time_interval'] : number, default = 60.0, units = seconds
        Time step of the advanced time search.
    wplane_parms['max_advance_steps'] : int, default = 1440
        Largest number of time steps of the advanced time search.
    wplane_parms['tangent_tolerance'] : number, default = 1e-6, units = radians
        Tangent points closer than this are considered the same.
    wplane_parms['verbose'] : bool, default = False
        Print the progress of the fitting.
    """

    def __init__(self, wplane_parms):
        _wplane_parms = copy.deepcopy(wplane_parms)
        if not _check_wplane_parms(_wplane_parms):
            raise PreconditionViolation('######### ERROR: wplane_parms checking failed')

        self._wplane_parms = _wplane_parms
        self._coeffs = (0.0, 0.0)
        self._epochs = EpochTracker()
        self._uvw_source = None
        self._tangent_point = None
        self._corrected_uvw = None
        self._cached_source_epoch = None
        self._max_deviation = None
        self._tolerance_in_metres = None
        self._plane_state = 'PLANE_STALE'

    def associate(self, uvw_source):
        """
        Attach the source of the next chunk. Cached coordinates become stale.
        """
        self._uvw_source = uvw_source
        self._epochs.notify_source_changed()

    def notify_of_changes(self):
        """
        Signal that the associated source now serves different data.
        """
        self._epochs.notify_source_changed()

    def corrected_uvw(self, tangent_point):
        """
        uvw after rotation with the best plane subtracted from w.

        Parameters
        ----------
        tangent_point : list of number, length = 2, units = radians
            Tangent point to rotate the coordinates to. Must match the one of the first call.
        Returns
        -------
        corrected_uvw : numpy.ndarray, shape (n_row, 3)
            Read-only array, the same object is returned until the source changes.
        """
        tangent_point = _as_tangent_point(tangent_point)

        if (self._tangent_point is not None) and not tangent_points_match(tangent_point, self._tangent_point, self._wplane_parms['tangent_tolerance']):
            raise PreconditionViolation('Current implementation implies that only one tangent point is used per single BestWPlaneAccessor. '
                                        'corrected_uvw got tangent point=' + str(tangent_point) + ', while the bound one is ' + str(self._tangent_point))

        if self.state == 'FITTED':
            return self._corrected_uvw

        if self._uvw_source is None:
            raise PreconditionViolation('######### ERROR: no chunk source has been associated with the BestWPlaneAccessor')

        source_epoch = self._epochs.snapshot().source_epoch
        uvw = _fetch_uvw(self._uvw_source, tangent_point)
        tolerance_in_metres = _tolerance_in_metres(self._wplane_parms['w_tolerance'], self._uvw_source.frequency())
        self._tangent_point = tangent_point

        if self._wplane_parms['predict_w_plane']:
            max_deviation, new_coeffs = _update_advanced_time_w_plane_if_necessary(self._uvw_source, tangent_point, uvw,
                                                                                  tolerance_in_metres, self._coeffs, self._wplane_parms)
        else:
            max_deviation, new_coeffs = _update_w_plane_if_necessary(uvw, tolerance_in_metres, self._coeffs)

        if new_coeffs is not None:
            new_coeffs = (float(new_coeffs[0]), float(new_coeffs[1]))
        if (new_coeffs is not None) and (new_coeffs != self._coeffs):
            self._coeffs = new_coeffs
            self._epochs.notify_plane_changed()
            self._plane_state = 'PLANE_FRESH'
            if self._wplane_parms['verbose']:
                print('New w-plane fitted: w = u *', self._coeffs[0], '+ v *', self._coeffs[1], ', max deviation', max_deviation, 'm')
        else:
            self._plane_state = 'PLANE_STALE'

        self._max_deviation = max_deviation
        self._tolerance_in_metres = tolerance_in_metres

        if self._wplane_parms['check_residual']:
            _check_residual(uvw, self._coeffs, tolerance_in_metres, self._wplane_parms['w_tolerance'])

        corrected_uvw = uvw.copy()
        corrected_uvw[:, 2] -= self._coeffs[0]*uvw[:, 0] + self._coeffs[1]*uvw[:, 1]
        corrected_uvw.flags.writeable = False

        self._corrected_uvw = corrected_uvw
        self._cached_source_epoch = source_epoch
        return corrected_uvw

    @property
    def coeff_a(self):
        return self._coeffs[0]

    @property
    def coeff_b(self):
        return self._coeffs[1]

    @property
    def epoch(self):
        return self._epochs.snapshot()

    @property
    def source_epoch(self):
        return self._epochs.snapshot().source_epoch

    @property
    def plane_epoch(self):
        return self._epochs.snapshot().plane_epoch

    @property
    def max_deviation(self):
        """Deviation (metres) reported by the last recomputation, None before the first one."""
        return self._max_deviation

    @property
    def tolerance_in_metres(self):
        return self._tolerance_in_metres

    @property
    def tangent_point(self):
        if self._tangent_point is None:
            return None
        return self._tangent_point.copy()

    @property
    def wplane_parms(self):
        return copy.deepcopy(self._wplane_parms)

    @property
    def state(self):
        if self._cached_source_epoch is None:
            return 'UNINITIALIZED'
        if self._cached_source_epoch == self._epochs.snapshot().source_epoch:
            return 'FITTED'
        return 'STALE'

    @property
    def plane_state(self):
        return self._plane_state

    def copy(self):
        """
        Independent accessor with the same configuration, plane, bound tangent point, associated
        source and epoch counter values. The copy owns its own counters and cache, so changes
        in one instance are not seen by the other.
        """
        other = BestWPlaneAccessor.__new__(BestWPlaneAccessor)
        other.__dict__.update(self.__dict__)
        other._wplane_parms = copy.deepcopy(self._wplane_parms)
        other._epochs = self._epochs.copy()
        if self._tangent_point is not None:
            other._tangent_point = self._tangent_point.copy()
        if self._corrected_uvw is not None:
            other._corrected_uvw = np.array(self._corrected_uvw)
            other._corrected_uvw.flags.writeable = False
        return other

    __copy__ = copy


def _tolerance_in_metres(w_tolerance, freq_chan):
    freq_chan = np.atleast_1d(np.asarray(freq_chan, dtype=np.double))
    if freq_chan.size < 1:
        raise PreconditionViolation('An unexpected chunk with zero spectral channels has been encountered')

    # use the largest frequency/smallest wavelength, i.e. worst case scenario
    max_freq = np.max(freq_chan)
    if not(max_freq > 0):
        raise PreconditionViolation('######### ERROR: channel frequencies must be positive, got a maximum of ' + str(max_freq) + ' Hz')
    return w_tolerance*constants.c/max_freq


def _check_residual(uvw, coeffs, tolerance_in_metres, w_tolerance):
    max_deviation = max_w_deviation(uvw, *coeffs)
    if not(max_deviation < tolerance_in_metres):
        raise ToleranceExceeded('The antenna layout is significantly non-coplanar. The largest w-term deviation after the fit of ' +
                                str(max_deviation) + ' metres exceeds the w-term tolerance of ' + str(w_tolerance) +
                                ' wavelengths equivalent to ' + str(tolerance_in_metres) + ' metres.')
    return max_deviation
