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

from bestwplane._utils._constants import SINGULAR_DETERMINANT, MIN_FIT_ROWS
from bestwplane._utils._errors import PreconditionViolation


def fit_w_plane(uvw):
    """
    Least-squares fit of the plane w = A*u + B*v through the origin.

    Parameters
    ----------
    uvw : numpy.ndarray, shape (n_row, 3)
        uvw coordinates in metres. At least two rows are required.
    Returns
    -------
    coeffs : tuple of float or None
        (A, B) or None if the normal equations are singular (the caller must keep its
        current plane).
    """
    uvw = np.ascontiguousarray(uvw, dtype=np.double).reshape(-1, 3)
    if uvw.shape[0] < MIN_FIT_ROWS:
        raise PreconditionViolation('######### ERROR: at least ' + str(MIN_FIT_ROWS) + ' rows are required to fit a w-plane, got ' + str(uvw.shape[0]))

    su2, sv2, suv, suw, svw = _accumulate_plane_sums(uvw)

    # some tolerance has to be put on the determinant to avoid unconstrained fits
    det = su2*sv2 - suv**2
    if np.abs(det) < SINGULAR_DETERMINANT:
        return None

    coeff_a = (sv2*suw - suv*svw)/det
    coeff_b = (su2*svw - suv*suw)/det
    return coeff_a, coeff_b


@jit(nopython=True, cache=True, nogil=True)
def _accumulate_plane_sums(uvw):
    su2 = 0.0
    sv2 = 0.0
    suv = 0.0
    suw = 0.0
    svw = 0.0
    for i_row in range(uvw.shape[0]):
        u = uvw[i_row, 0]
        v = uvw[i_row, 1]
        w = uvw[i_row, 2]
        su2 += u*u
        sv2 += v*v
        suv += u*v
        suw += u*w
        svw += v*w
    return su2, sv2, suv, suw, svw
