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
Sources of uvw coordinates and frequencies for a single chunk of visibilities. The best w-plane
accessor only needs rotated_uvw and frequency, any object providing these can be associated.
"""

import numpy as np
from scipy.spatial.transform import Rotation as R

from .tangent_point import _as_tangent_point


class UVWSource:
    """
    Interface of a chunk source.
    """

    def rotated_uvw(self, tangent_point):
        """
        uvw (metres) of every row of the chunk for the given tangent point [ra, dec] (radians).
        Returns a numpy.ndarray of shape (n_row, 3).
        """
        raise NotImplementedError('rotated_uvw must be implemented by the chunk source')

    def frequency(self):
        """
        Frequencies (Hz) of the spectral channels of the chunk.
        """
        raise NotImplementedError('frequency must be implemented by the chunk source')


class BaselineUVWSource(UVWSource):
    """
    uvw computed from baseline vectors in the equatorial frame.

    Parameters
    ----------
    xyz : array_like, shape (n_baseline, 3)
        Baselines in metres, X towards hour angle 0, Y towards hour angle -6h, Z towards the pole.
    frequency : array_like
        Channel frequencies in Hz.
    lst : float
        Local sidereal time of the chunk in radians.

    The hour angle is lst - ra, so moving the tangent point longitude by -d is the same as
    observing d/(2 pi) sidereal days later.
    """

    def __init__(self, xyz, frequency, lst=0.0):
        self.xyz = np.asarray(xyz, dtype=np.double).reshape(-1, 3)
        self.freq_chan = np.atleast_1d(np.asarray(frequency, dtype=np.double))
        self.lst = float(lst)

    def rotated_uvw(self, tangent_point):
        ra, dec = _as_tangent_point(tangent_point)
        return self.xyz @ _uvw_rotmat(self.lst - ra, dec)

    def frequency(self):
        return self.freq_chan


class XdsUVWSource(UVWSource):
    """
    One time step of a visibility xarray Dataset.

    Parameters
    ----------
    vis_xds : xarray.core.dataset.Dataset
        Visibility dataset with a uvw data variable (time x baseline x uvw_index, metres) and a
        chan coordinate (Hz).
    phase_center : list of number, length = 2, units = radians
        Phase center the stored uvw refer to.
    time_index : int
        Index along the time axis.
    uvw_name : str, default = 'UVW'

    Baselines with NaN coordinates are left out of the chunk, valid_baselines marks the rows served.
    """

    def __init__(self, vis_xds, phase_center, time_index, uvw_name='UVW'):
        uvw = np.asarray(vis_xds[uvw_name][time_index].values, dtype=np.double)
        self.valid_baselines = ~np.any(np.isnan(uvw), axis=-1)
        self.uvw = uvw[self.valid_baselines, :]
        self.freq_chan = np.asarray(vis_xds.coords['chan'].values, dtype=np.double)
        self.phase_center = _as_tangent_point(phase_center)
        # lst cancels between the two directions, so the stored uvw go back to xyz as if at lst = 0
        self.rotmat_phase_center = _uvw_rotmat(-self.phase_center[0], self.phase_center[1])

    def rotated_uvw(self, tangent_point):
        ra_image, dec_image = _as_tangent_point(tangent_point)
        uvw_rotmat = np.matmul(self.rotmat_phase_center.T, _uvw_rotmat(-ra_image, dec_image))
        return self.uvw @ uvw_rotmat

    def frequency(self):
        return self.freq_chan


def _uvw_rotmat(hour_angle, dec):
    """
    Matrix taking equatorial baselines (row vectors) to right-handed uvw for a direction at the given
    hour angle and declination, i.e. uvw = xyz @ _uvw_rotmat(hour_angle, dec). u points east, v north
    and w towards the direction.
    """
    return R.from_euler('ZX', [[np.pi/2 - hour_angle, np.pi/2 - dec]]).as_matrix()[0]
