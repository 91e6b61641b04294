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

import numbers
import numpy as np


def _check_parms(parm_dict, string_key, acceptable_data_types, acceptable_data = None, acceptable_range = None, list_acceptable_data_types=None, list_len=None, default=None):
    """
    Check a single entry of a parameter dictionary and fill in the default if it is missing.

    Parameters
    ----------
    parm_dict: dict
        The dictionary in which the a parameter will be checked
    string_key : str
    acceptable_data_types : list
    acceptable_data : list
    acceptable_range : list (length of 2)
    list_acceptable_data_types : list
    list_len : int
        If list_len is -1 than the list can be any length.
    default :
    Returns
    -------
    parm_passed : bool
    """
    if string_key not in parm_dict:
        if default is None:
            print('######### ERROR:Parameter ', string_key, 'must be specified')
            return False
        parm_dict[string_key] = default
        return True

    value = parm_dict[string_key]

    if (list in acceptable_data_types) or (np.ndarray in acceptable_data_types):
        if not isinstance(value, tuple(acceptable_data_types)):
            print('######### ERROR:Parameter ', string_key, 'must be of type ', acceptable_data_types)
            return False
        if (len(value) != list_len) and (list_len != -1):
            print('######### ERROR:Parameter ', string_key, 'must be a list of ', list_acceptable_data_types, ' and length', list_len, '. Wrong length.')
            return False
        elements = list(value)
        element_types = list_acceptable_data_types
    else:
        elements = [value]
        element_types = acceptable_data_types

    for element in elements:
        if not isinstance(element, tuple(element_types)):
            print('######### ERROR:Parameter ', string_key, 'must be of type ', element_types)
            return False

        if acceptable_data is not None:
            if not(element in acceptable_data):
                print('######### ERROR: Invalid', string_key, '. Can only be one of ', acceptable_data, '.')
                return False

        if acceptable_range is not None:
            if (element < acceptable_range[0]) or (element > acceptable_range[1]):
                print('######### ERROR: Invalid', string_key, '. Must be within the range ', acceptable_range, '.')
                return False

    return True


def _check_wplane_parms(wplane_parms):
    parms_passed = True

    if not(_check_parms(wplane_parms, 'w_tolerance', [numbers.Number], acceptable_range=[np.finfo(float).tiny, np.inf])): parms_passed = False
    if not(_check_parms(wplane_parms, 'check_residual', [bool], default=True)): parms_passed = False
    if not(_check_parms(wplane_parms, 'predict_w_plane', [bool], default=False)): parms_passed = False
    if not(_check_parms(wplane_parms, 'predict_time_interval', [numbers.Number], default=60.0, acceptable_range=[np.finfo(float).tiny, np.inf])): parms_passed = False
    if not(_check_parms(wplane_parms, 'max_advance_steps', [numbers.Integral], default=1440, acceptable_range=[1, np.inf])): parms_passed = False
    if not(_check_parms(wplane_parms, 'tangent_tolerance', [numbers.Number], default=1e-6, acceptable_range=[0, np.pi])): parms_passed = False
    if not(_check_parms(wplane_parms, 'verbose', [bool], default=False)): parms_passed = False

    if parms_passed == True:
        wplane_parms['w_tolerance'] = float(wplane_parms['w_tolerance'])
        wplane_parms['predict_time_interval'] = float(wplane_parms['predict_time_interval'])
        wplane_parms['max_advance_steps'] = int(wplane_parms['max_advance_steps'])
        wplane_parms['tangent_tolerance'] = float(wplane_parms['tangent_tolerance'])

    return parms_passed


def _check_sel_parms(xds, sel_parms, defaults):
    parms_passed = True

    for sel in defaults:
        if not(_check_parms(sel_parms, sel, [str], default=defaults[sel])): parms_passed = False

    if parms_passed and (sel_parms['uvw'] not in xds.data_vars):
        print('######### ERROR Data array ', sel_parms['uvw'], 'can not be found in dataset.')
        parms_passed = False

    # the stored uvw refer to the dataset phase center, the image phase center is the tangent point
    if 'phase_center' in xds.attrs:
        dataset_phase_center = list(np.asarray(xds.attrs['phase_center'], dtype=float))
        if not(_check_parms(sel_parms, 'data_phase_center', [list, np.ndarray], list_acceptable_data_types=[numbers.Number], list_len=2, default=dataset_phase_center)): parms_passed = False
        if not(_check_parms(sel_parms, 'image_phase_center', [list, np.ndarray], list_acceptable_data_types=[numbers.Number], list_len=2, default=dataset_phase_center)): parms_passed = False
    else:
        if not(_check_parms(sel_parms, 'image_phase_center', [list, np.ndarray], list_acceptable_data_types=[numbers.Number], list_len=2)): parms_passed = False
        elif not(_check_parms(sel_parms, 'data_phase_center', [list, np.ndarray], list_acceptable_data_types=[numbers.Number], list_len=2, default=list(sel_parms['image_phase_center']))): parms_passed = False

    return parms_passed
