"""
These functions apply the best w-plane correction to Visibility data in the xarray Dataset (xds)
format. They take an xds as input and return a new xds.

The input xarray Dataset is never modified.

To access these functions, use your favorite variation of:
``import bestwplane.vis``
"""
from .correct_w_plane import correct_w_plane
