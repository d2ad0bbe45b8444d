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

import pytest
from pyexachem.common.input_parser import parse_input_dict

GEOMETRIES = {
    'H2': ['H 0 0 0', 'H 0 0 0.74'],
    'H2O': ['O 0 0 0', 'H 0 -0.757 0.587', 'H 0 0.757 0.587'],
    'OH': ['O 0 0 0', 'H 0 0 0.97'],
}

@pytest.fixture
def make_options(tmp_path):
    '''Options of a quiet run writing into ``tmp_path``.'''
    def fn(molecule, basis='sto-3g', scf=None, cd=None, cc=None,
           fci=None, task=None, common=None):
        common = dict(common or {})
        common.setdefault('output_dir', str(tmp_path))
        common.setdefault('file_prefix', 'test')
        scf = dict(scf or {})
        scf.setdefault('verbose', 0)
        scf.setdefault('conve', 1e-10)
        scf.setdefault('convd', 1e-8)
        dct = {'geometry': {'coordinates': GEOMETRIES[molecule], 'units': 'angstrom'},
               'basis': {'basisset': basis},
               'common': common,
               'SCF': scf,
               'CD': cd or {},
               'CC': cc or {},
               'FCI': fci or {},
               'TASK': task or {}}
        return parse_input_dict(dct)[0]
    return fn
