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

def correct_w_plane(vis_xds, wplane_parms, sel_parms={}):
    """
    Subtract the best fitting w-plane from the uvw coordinates of a visibility dataset, one time
    step at a time, refitting the plane only when the w-term tolerance requires it.

    The input xarray Dataset is never modified.

    Parameters
    ----------
    vis_xds : xarray.core.dataset.Dataset
        Input visibility dataset with a uvw data variable (time x baseline x uvw_index, metres)
        and a chan coordinate (Hz).
    wplane_parms : dict
        See bestwplane.accessor.BestWPlaneAccessor. wplane_parms['w_tolerance'] is required.
    sel_parms : dict
    sel_parms['uvw'] : str, default = 'UVW'
        Name of the input uvw data variable.
    sel_parms['uvw_out'] : str, default = 'UVW_WPLANE'
        Name of the corrected uvw data variable.
    sel_parms['image_phase_center'] : list of number, length = 2, units = radians, default = vis_xds.attrs['phase_center']
        Tangent point the coordinates are rotated to.
    sel_parms['data_phase_center'] : list of number, length = 2, units = radians, default = vis_xds.attrs['phase_center']
        Phase center the stored uvw refer to. Defaults to image_phase_center if the dataset has no phase_center attribute.
    Returns
    -------
    vis_xds : xarray.core.dataset.Dataset
        New dataset with the corrected uvw and the WPLANE_COEFF (time x wplane_coeff), WPLANE_EPOCH (time)
        and WPLANE_MAX_DEVIATION (time, metres) data variables.
    """
    import copy
    import numpy as np
    import xarray as xr
    import dask.array as da
    from bestwplane._utils._check_parms import _check_sel_parms
    from bestwplane._utils._errors import PreconditionViolation
    from bestwplane.accessor import BestWPlaneAccessor
    from bestwplane.direction.uvw_source import XdsUVWSource

    _sel_parms = copy.deepcopy(sel_parms)
    _wplane_parms = copy.deepcopy(wplane_parms)

    ##############Parameter Checking and Set Defaults##############
    if not _check_sel_parms(vis_xds, _sel_parms, {'uvw':'UVW', 'uvw_out':'UVW_WPLANE'}):
        raise PreconditionViolation('######### ERROR: sel_parms checking failed')

    # one accessor for the whole dataset, it checks wplane_parms itself
    accessor = BestWPlaneAccessor(_wplane_parms)
    verbose = accessor.wplane_parms['verbose']
    #################################################################

    if verbose:
        print('######################### Start correct_w_plane #########################')

    uvw_xda = vis_xds[_sel_parms['uvw']]
    time_dim = uvw_xda.dims[0]
    n_time, n_baseline = uvw_xda.shape[0:2]

    corrected_uvw = np.full((n_time, n_baseline, 3), np.nan, dtype=np.double)
    wplane_coeff = np.zeros((n_time, 2), dtype=np.double)
    wplane_epoch = np.zeros((n_time,), dtype=np.int64)
    wplane_max_deviation = np.zeros((n_time,), dtype=np.double)

    for i_time in range(n_time):
        uvw_source = XdsUVWSource(vis_xds, _sel_parms['data_phase_center'], i_time, uvw_name=_sel_parms['uvw'])
        accessor.associate(uvw_source)
        corrected_uvw[i_time, uvw_source.valid_baselines, :] = accessor.corrected_uvw(_sel_parms['image_phase_center'])
        wplane_coeff[i_time, :] = [accessor.coeff_a, accessor.coeff_b]
        wplane_epoch[i_time] = accessor.plane_epoch
        wplane_max_deviation[i_time] = accessor.max_deviation

    if isinstance(uvw_xda.data, da.Array):
        uvw_chunks = uvw_xda.data.chunksize
    else:
        uvw_chunks = 'auto'

    new_xds = vis_xds.assign({_sel_parms['uvw_out']: xr.DataArray(da.from_array(corrected_uvw, chunks=uvw_chunks), dims=uvw_xda.dims),
                              'WPLANE_COEFF': xr.DataArray(wplane_coeff, dims=(time_dim, 'wplane_coeff')),
                              'WPLANE_EPOCH': xr.DataArray(wplane_epoch, dims=(time_dim,)),
                              'WPLANE_MAX_DEVIATION': xr.DataArray(wplane_max_deviation, dims=(time_dim,))})
    new_xds = new_xds.assign_attrs(wplane_parms=accessor.wplane_parms,
                                   wplane_image_phase_center=list(np.asarray(_sel_parms['image_phase_center'], dtype=float)))

    if verbose:
        print('######################### Finished correct_w_plane,', accessor.plane_epoch, 'planes fitted #########################')
    return new_xds
