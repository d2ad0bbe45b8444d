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
import json
import pytest
from pyexachem.common import parse_input
from pyexachem.common.input_parser import parse_geometry

def _write(path, dct):
    with open(path, 'w') as f:
        json.dump(dct, f)
    return str(path)

def test_parse_input(tmp_path):
    fname = _write(tmp_path / 'water.json', {
        'geometry': {'coordinates': ['O 0 0 0', ['H', 0, -0.757, 0.587],
                                     'H 0 0.757 0.587'],
                     'units': 'bohr'},
        'basis': {'basisset': 'cc-pvdz', 'gaussian_type': 'cartesian'},
        'SCF': {'charge': 0, 'conve': 1e-9},
        'CC': {'threshold': 1e-7, 'freeze': {'atomic': True}},
        'TASK': {'ccsd': True},
    })
    options_map, geometry = parse_input(fname)
    assert len(geometry) == 3
    assert geometry[1] == ('H', (0., -0.757, 0.587))
    assert options_map.geometry == geometry
    common = options_map.common_options
    assert common.file_prefix == 'water'
    assert common.output_dir == os.path.dirname(fname)
    assert common.geom_units == 'bohr'
    assert common.gaussian_type == 'cartesian'
    assert options_map.ccsd_options.basis == 'cc-pvdz'
    assert options_map.ccsd_options.freeze_atomic
    assert options_map.scf_options.conve == 1e-9
    assert options_map.task_options.task() == 'ccsd'

def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_input(str(tmp_path / 'none.json'))

def test_malformed_json(tmp_path):
    fname = tmp_path / 'bad.json'
    fname.write_text('{"geometry": ')
    with pytest.raises(ValueError):
        parse_input(str(fname))

def test_unknown_section(tmp_path):
    fname = _write(tmp_path / 'x.json', {'geometry': {'coordinates': ['H 0 0 0']},
                                        'DFT': {}})
    with pytest.raises(KeyError):
        parse_input(fname)

def test_parse_geometry():
    assert parse_geometry(['He 0, 0, 1']) == [('He', (0., 0., 1.))]
    with pytest.raises(ValueError):
        parse_geometry(['H 0 0'])
    with pytest.raises(ValueError):
        parse_geometry([])
