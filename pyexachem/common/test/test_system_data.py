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
import pytest
from pyexachem.common import SystemData
from pyexachem.gto import build_mol

def test_counts(make_options):
    options_map = make_options('H2O', cc={'freeze': {'core': 1, 'virtual': 1}})
    mol = build_mol(options_map, options_map.geometry)
    sys_data = SystemData(options_map, mol)
    assert sys_data.nbf_orig == sys_data.nbf == 7
    assert sys_data.nelec == (5, 5)
    assert sys_data.n_occ_alpha == sys_data.n_occ_beta == 4
    assert sys_data.n_vir_alpha == sys_data.n_vir_beta == 1
    assert sys_data.nocc == 8
    assert sys_data.nvir == 2
    assert sys_data.nmo == 10
    assert sys_data.nactv == 5

def test_freeze_atomic(make_options):
    options_map = make_options('H2O', cc={'freeze': {'atomic': True}})
    mol = build_mol(options_map, options_map.geometry)
    assert SystemData(options_map, mol).n_frozen_core == 1

def test_too_many_frozen(make_options):
    options_map = make_options('H2', cc={'freeze': {'core': 2}})
    mol = build_mol(options_map, options_map.geometry)
    with pytest.raises(ValueError):
        SystemData(options_map, mol)

def test_paths(make_options, tmp_path):
    options_map = make_options('H2')
    mol = build_mol(options_map, options_map.geometry)
    sys_data = SystemData(options_map, mol)
    assert sys_data.out_fp() == 'test.sto-3g'
    assert sys_data.files_dir() == os.path.join(str(tmp_path), 'test.sto-3g_files',
                                                'restricted')
    assert sys_data.files_prefix('scf') == os.path.join(sys_data.files_dir('scf'),
                                                        'test.sto-3g')
    sys_data.results['output']['SCF'] = {'final_energy': -1.}
    json_file = sys_data.write_json_data('SCF')
    assert os.path.isfile(json_file)
