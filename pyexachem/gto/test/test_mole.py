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
from pyexachem.gto import build_mol
from pyexachem.gto.mole import element_of, find_basis_file

H_STO3G = '''\
BASIS "ao basis" PRINT
#BASIS SET: (3s) -> [1s]
H    S
      3.42525091             0.15432897
      0.62391373             0.53532814
      0.16885540             0.44463454
END
'''

def test_h2(make_options):
    options_map = make_options('H2')
    mol = build_mol(options_map, options_map.geometry)
    assert mol.nao == 2
    assert mol.nelectron == 2
    assert mol.spin == 0
    assert abs(mol.atom_coord(1)[2] - 0.74 / 0.52917721092) < 1e-4

def test_open_shell(make_options):
    options_map = make_options('OH', scf={'scf_type': 'unrestricted', 'multiplicity': 2})
    mol = build_mol(options_map, options_map.geometry)
    assert mol.spin == 1
    assert mol.nelec == (5, 4)

def test_inconsistent_multiplicity(make_options):
    options_map = make_options('H2', scf={'scf_type': 'unrestricted', 'multiplicity': 2})
    with pytest.raises(ValueError):
        build_mol(options_map, options_map.geometry)

def test_cartesian(make_options):
    options_map = make_options('H2O', basis='cc-pvdz')
    assert build_mol(options_map, options_map.geometry).nao == 24
    options_map = make_options('H2O', basis='cc-pvdz',
                               common={'gaussian_type': 'cartesian'})
    assert build_mol(options_map, options_map.geometry).nao == 25

def test_atom_basis(make_options):
    options_map = make_options('H2O', basis='6-31g',
                               common={'atom_basis': {'H': 'sto-3g'}})
    assert build_mol(options_map, options_map.geometry).nao == 11

def test_basis_dir(make_options, tmp_path):
    (tmp_path / 'mybasis.nw').write_text(H_STO3G)
    assert find_basis_file('mybasis', str(tmp_path)).endswith('mybasis.nw')
    assert find_basis_file('cc-pvdz', str(tmp_path)) is None

    options_map = make_options('H2', basis='mybasis',
                               common={'basis_dir': str(tmp_path)})
    mol = build_mol(options_map, options_map.geometry)
    assert mol.nao == 2

    options_map = make_options('H2O', basis='mybasis',
                               common={'basis_dir': str(tmp_path)})
    with pytest.raises(ValueError):
        build_mol(options_map, options_map.geometry)

def test_element_of():
    assert element_of('H1') == 'H'
    assert element_of('cl') == 'Cl'
    with pytest.raises(ValueError):
        element_of('12')
