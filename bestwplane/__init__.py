"""
Best w-plane correction of non-coplanar interferometer geometry for wide-field imaging.
"""
from ._utils._errors import PreconditionViolation, ToleranceExceeded
from .accessor import BestWPlaneAccessor, ChangeEpoch
from .fitting import fit_w_plane, max_w_deviation
