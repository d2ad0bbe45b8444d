# Copyright 2025-2026 The PyExaChem Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
import numpy
import h5py
from pyscf.lib.chkfile import load
from pyexachem import numpy as np
from pyexachem import ops

# pylint: disable=consider-using-f-string
def dump(chkfile, key, value):
    def save_as_group(key, value, root):
        if isinstance(value, dict):
            root1 = root.create_group(key)
            for k in value:
                save_as_group(k, value[k], root1)
        elif isinstance(value, (tuple, list, range)):
            root1 = root.create_group(key + '__from_list__')
            for k, v in enumerate(value):
                save_as_group('%06d'%k, v, root1)
        else:
            root[key] = ops.to_numpy(value)

    if h5py.is_hdf5(chkfile):
        with h5py.File(chkfile, 'r+') as fh5:
            if key in fh5:
                del fh5[key]
            elif key + '__from_list__' in fh5:
                del fh5[key+'__from_list__']
            save_as_group(key, value, fh5)
    else:
        with h5py.File(chkfile, 'w') as fh5:
            save_as_group(key, value, fh5)
dump_chkfile_key = save = dump

TENSOR_KEY = 'data'

def write_to_disk(tensor, filename):
    """Write one tensor to its own HDF5 file.

    The file is overwritten. Parent directories must exist.
    """
    data = numpy.asarray(ops.to_numpy(tensor), dtype=numpy.float64)
    with h5py.File(filename, 'w') as fh5:
        fh5[TENSOR_KEY] = data
    return filename

def read_from_disk(filename, shape=None):
    """Read a tensor written by :func:`write_to_disk`.

    Parameters
    ----------
    filename : str
        Path of the HDF5 file.
    shape : tuple, optional
        Expected shape. A stored tensor of a different shape
        raises ``ValueError``.

    Returns
    -------
    tensor : array
        Array of the current backend.
    """
    if not os.path.isfile(filename):
        raise FileNotFoundError(f'Tensor file {filename} does not exist.')
    with h5py.File(filename, 'r') as fh5:
        if TENSOR_KEY not in fh5:
            raise ValueError(f'{filename} does not contain a tensor.')
        data = fh5[TENSOR_KEY][()]
    if shape is not None and tuple(data.shape) != tuple(shape):
        raise ValueError(f'Tensor in {filename} has shape {data.shape}, '
                         f'expected {tuple(shape)}.')
    return np.asarray(data)

__all__ = ['dump', 'save', 'load', 'write_to_disk', 'read_from_disk']
