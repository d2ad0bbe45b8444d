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
import pytest
from pyscf import ao2mo
from pyexachem import cholesky
from pyexachem.scf import hartree_fock_driver
from pyexachem.gto import build_mol

def test_cholesky_accuracy(make_options):
    options_map = make_options('H2O', basis='6-31g')
    mol = build_mol(options_map, options_map.geometry)
    for diagtol in (1e-4, 1e-8):
        chol, count = cholesky.cholesky_2e(mol, diagtol)
        chol = numpy.asarray(chol)
        assert chol.shape == (mol.nao, mol.nao, count)
        eri = numpy.einsum('pqK,rsK->pqrs', chol, chol)
        assert abs(eri - mol.intor('int2e')).max() < diagtol

def test_cholesky_cap(make_options):
    options_map = make_options('H2O')
    mol = build_mol(options_map, options_map.geometry)
    chol, count = cholesky.cholesky_2e(mol, 1e-12, max_cvecs=5)
    assert count == 5
    assert numpy.asarray(chol).shape[-1] == 5

def test_mo_vectors(make_options):
    options_map = make_options('H2O', cd={'diagtol': 1e-10},
                               cc={'freeze': {'core': 1}})
    sys_data, mf = hartree_fock_driver(options_map)
    cholVpr, d_f1, lcao, chol_count, max_cvecs = cholesky.cd_svd_driver(sys_data, mf)
    assert max_cvecs == 12 * 7
    assert chol_count <= max_cvecs
    assert numpy.asarray(cholVpr).shape == (6, 6, chol_count)
    assert numpy.asarray(d_f1).shape == (6, 6)

    mo = numpy.asarray(lcao)
    eri_mo = ao2mo.restore(1, ao2mo.full(mf.mol, mo), 6)
    eri = numpy.einsum('pqK,rsK->pqrs', cholVpr, cholVpr)
    assert abs(eri - eri_mo).max() < 1e-7
    mo_energy = numpy.asarray(mf.mo_energy)[1:]
    assert abs(numpy.diag(d_f1) - mo_energy).max() < 1e-6

def test_mo_vectors_uhf(make_options):
    options_map = make_options('OH', scf={'scf_type': 'unrestricted', 'multiplicity': 2})
    sys_data, mf = hartree_fock_driver(options_map)
    cholVpr, d_f1, lcao, chol_count, _ = cholesky.cd_svd_driver(sys_data, mf)
    assert numpy.asarray(cholVpr).shape == (2, 6, 6, chol_count)
    assert numpy.asarray(d_f1).shape == (2, 6, 6)
    assert numpy.asarray(lcao).shape == (2, 6, 6)

def test_cd_2e_restart(make_options):
    options_map = make_options('H2O')
    sys_data, mf, cholVpr, d_f1, chol_count = cholesky.cd_2e_driver(options_map)
    f1file, v2file, cholfile = cholesky.cd_svd.cholesky_files(sys_data)
    for fname in (f1file, v2file, cholfile):
        assert os.path.isfile(fname)

    res = cholesky.get_cholesky_tensors(sys_data, mf)
    assert res[-1]
    assert res[3] == chol_count
    assert abs(numpy.asarray(res[0]) - numpy.asarray(cholVpr)).max() < 1e-14
    assert abs(numpy.asarray(res[1]) - numpy.asarray(d_f1)).max() < 1e-14

def test_readv2_missing_count(make_options):
    options_map = make_options('H2')
    sys_data, mf = hartree_fock_driver(options_map)
    with pytest.raises(FileNotFoundError):
        cholesky.cd_svd_driver(sys_data, mf, readv2=True,
                               cholfile=sys_data.files_prefix() + '.cholcount')

def test_restart_shape_mismatch(make_options):
    options_map = make_options('H2O')
    sys_data, mf, _, _, _ = cholesky.cd_2e_driver(options_map)
    options_map = make_options('H2O', cc={'freeze': {'core': 1}})
    sys_data, mf = hartree_fock_driver(options_map)
    with pytest.raises(ValueError):
        cholesky.get_cholesky_tensors(sys_data, mf)
