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

SIDEREAL_DAY = 86400.0 # seconds per full turn of the tangent point longitude

EARTH_ROTATION_RATE = 2.0*np.pi/SIDEREAL_DAY # rad/s

SINGULAR_DETERMINANT = 1e-7

MIN_FIT_ROWS = 2
