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


def max_w_deviation(uvw, coeff_a, coeff_b):
    """
    Largest |A*u + B*v - w| over all rows, in the units of uvw. Zero for an empty chunk.
    """
    uvw = np.ascontiguousarray(uvw, dtype=np.double).reshape(-1, 3)
    return _max_w_deviation(uvw, float(coeff_a), float(coeff_b))


@jit(nopython=True, cache=True, nogil=True)
def _max_w_deviation(uvw, coeff_a, coeff_b):
    max_deviation = 0.0
    for i_row in range(uvw.shape[0]):
        deviation = np.abs(coeff_a*uvw[i_row, 0] + coeff_b*uvw[i_row, 1] - uvw[i_row, 2])
        if deviation > max_deviation:
            max_deviation = deviation
    return max_deviation
