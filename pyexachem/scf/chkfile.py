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
import h5py
from pyscf.lib.chkfile import load
from pyexachem import ops
from pyexachem.lib.chkfile import save

def dump_scf(movecs_file, e_tot, mo_energy, mo_coeff, mo_occ):
    '''Write the orbitals to the ``movecs`` file (HDF5 group ``scf``).'''
    scf_dic = {'e_tot'    : ops.to_numpy(e_tot),
               'mo_energy': ops.to_numpy(mo_energy),
               'mo_occ'   : ops.to_numpy(mo_occ),
               'mo_coeff' : ops.to_numpy(mo_coeff)}
    save(movecs_file, 'scf', scf_dic)
    return movecs_file

def load_scf(movecs_file):
    '''Read orbitals written by :func:`dump_scf`.'''
    if not os.path.isfile(movecs_file):
        raise FileNotFoundError(f'Orbital file {movecs_file} does not exist.')
    if not h5py.is_hdf5(movecs_file):
        raise ValueError(f'{movecs_file} is not an HDF5 file.')
    scf_dic = load(movecs_file, 'scf')
    if scf_dic is None:
        raise ValueError(f'{movecs_file} does not contain SCF orbitals.')
    return scf_dic
