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
from pyscf import scf as pyscf_scf
from pyscf import cc as pyscf_cc
from pyexachem import config_update
from pyexachem import cc
from pyexachem.cholesky import cd_svd_driver
from pyexachem.scf import hartree_fock_driver
from pyexachem.gto import build_mol

CD = {'diagtol': 1e-10}
CC = {'threshold': 1e-9, 'ccsd_maxiter': 100}

def _pyscf_mf(options_map, unrestricted=False):
    mol = build_mol(options_map, options_map.geometry)
    if unrestricted:
        mf = pyscf_scf.UHF(mol)
    else:
        mf = pyscf_scf.RHF(mol)
    mf.conv_tol = 1e-11
    mf.kernel()
    return mf

def test_h2_equals_fci(make_options):
    sys_data, mycc = cc.cd_ccsd_driver(make_options('H2', cd=CD, cc=CC))
    assert isinstance(mycc, cc.RCCSD)
    assert mycc.converged
    assert abs(mycc.e_tot - -1.1372838345) < 1e-6
    res = sys_data.results['output']['CCSD']
    assert abs(res['energy']['total'] - mycc.e_tot) < 1e-12

@pytest.mark.parametrize('frozen', [0, 1])
def test_rccsd_water(make_options, frozen):
    options_map = make_options('H2O', basis='6-31g', cd=CD,
                               cc=dict(CC, freeze={'core': frozen}))
    _, mycc = cc.cd_ccsd_driver(options_map)
    mycc_ref = pyscf_cc.CCSD(_pyscf_mf(options_map), frozen=frozen or None)
    mycc_ref.conv_tol = 1e-10
    mycc_ref.kernel()
    assert abs(mycc.e_corr - mycc_ref.e_corr) < 1e-6

def test_gccsd_closed_shell(make_options):
    _, rcc = cc.cd_ccsd_driver(make_options('H2O', cd=CD, cc=CC))
    options_map = make_options('H2O', cd=CD, cc=CC,
                               scf={'scf_type': 'unrestricted'})
    _, gcc = cc.cd_ccsd_driver(options_map)
    assert isinstance(gcc, cc.GCCSD)
    assert gcc.nocc == 10
    assert gcc.nmo == 14
    assert abs(gcc.e_corr - rcc.e_corr) < 1e-7

def test_gccsd_open_shell(make_options):
    options_map = make_options('OH', cd=CD, cc=CC,
                               scf={'scf_type': 'unrestricted', 'multiplicity': 2})
    _, mycc = cc.cd_ccsd_driver(options_map)
    mycc_ref = pyscf_cc.UCCSD(_pyscf_mf(options_map, unrestricted=True))
    mycc_ref.conv_tol = 1e-10
    mycc_ref.kernel()
    assert abs(mycc.e_corr - mycc_ref.e_corr) < 1e-6

def test_no_jit(make_options):
    options_map = make_options('H2O', cd=CD, cc=CC)
    sys_data, mf = hartree_fock_driver(options_map)
    cholVpr, d_f1 = cd_svd_driver(sys_data, mf)[:2]
    mycc = cc.driver.make_ccsd(sys_data, mf, cholVpr, d_f1)
    e_jit = mycc.kernel()[0]
    with config_update('pyexachem_jit', False):
        mycc = cc.driver.make_ccsd(sys_data, mf, cholVpr, d_f1)
        e_nojit = mycc.kernel()[0]
    assert abs(e_jit - e_nojit) < 1e-9

def test_amplitude_restart(make_options):
    options_map = make_options('H2O', cd=CD, cc=dict(CC, writet=True, writet_iter=2))
    sys_data, mycc = cc.cd_ccsd_driver(options_map)
    t1file, t2file = mycc.amps_files()
    assert os.path.isfile(t1file)
    assert os.path.isfile(t2file)
    nocc, nvir = mycc.t1.shape
    t1, t2 = mycc.load_amps()
    assert abs(numpy.asarray(t1) - numpy.asarray(mycc.t1)).max() < 1e-12
    assert numpy.asarray(t2).shape == (nocc, nocc, nvir, nvir)

    options_map = make_options('H2O', cd=CD, cc=dict(CC, readt=True))
    sys_data, mycc1 = cc.cd_ccsd_driver(options_map)
    assert sys_data.results['output']['CCSD']['restart']
    assert abs(mycc1.e_corr - mycc.e_corr) < 1e-8

def test_readt_without_amplitudes(make_options):
    options_map = make_options('H2O', cd=dict(CD, write_cv=True), cc=CC)
    cc.cd_ccsd_driver(options_map)
    options_map = make_options('H2O', cd=CD, cc=dict(CC, readt=True))
    _, mycc = cc.cd_ccsd_driver(options_map)
    assert mycc.converged
