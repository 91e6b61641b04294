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

import numpy as np
from numba import jit
import numba

from bestwplane._utils._errors import PreconditionViolation


def _as_tangent_point(tangent_point):
    tangent_point = np.asarray(tangent_point, dtype=np.double)
    if tangent_point.shape != (2,):
        raise PreconditionViolation("######### ERROR: a tangent point must be [ra, dec] in radians, got shape " + str(tangent_point.shape))
    return tangent_point


def shift_longitude(tangent_point, angle):
    """
    Return a new [ra, dec] with the longitude moved by angle (radians). The input is not modified.
    """
    tangent_point = _as_tangent_point(tangent_point)
    return np.array([tangent_point[0] + angle, tangent_point[1]])


def angular_separation(tangent_point_1, tangent_point_2):
    cosine_1 = _directional_cosine(_as_tangent_point(tangent_point_1))
    cosine_2 = _directional_cosine(_as_tangent_point(tangent_point_2))
    # atan2 keeps precision for tiny separations
    return np.arctan2(np.linalg.norm(np.cross(cosine_1, cosine_2)), np.dot(cosine_1, cosine_2))


def tangent_points_match(tangent_point_1, tangent_point_2, tolerance=1e-6):
    return angular_separation(tangent_point_1, tangent_point_2) < tolerance


@jit(nopython=True, cache=True, nogil=True)
def _directional_cosine(phase_center_in_radians):
    # [ra, dec] to direction cosines, see equation 160 of https://arxiv.org/pdf/astro-ph/0207413.pdf
    phase_center_cosine = np.zeros((3,), dtype=numba.f8)
    phase_center_cosine[0] = np.cos(phase_center_in_radians[0])*np.cos(phase_center_in_radians[1])
    phase_center_cosine[1] = np.sin(phase_center_in_radians[0])*np.cos(phase_center_in_radians[1])
    phase_center_cosine[2] = np.sin(phase_center_in_radians[1])
    return phase_center_cosine
