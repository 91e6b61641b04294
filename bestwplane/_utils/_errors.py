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

class PreconditionViolation(ValueError):
    """
    Raised when the accessor is used outside of its contract: missing or empty spectral
    axis, a second tangent point, no associated source, too few rows for a fit or
    invalid parameters.
    """


class ToleranceExceeded(RuntimeError):
    """
    Raised when check_residual is enabled and the best plane still leaves a w-term
    larger than the tolerance (the layout is too non-coplanar).
    """
