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
from pyscf import ao2mo
from pyscf import mcscf
from pyscf import scf as pyscf_scf
from pyscf.fci import direct_spin1
from pyexachem import fci
from pyexachem import ops
from pyexachem import scf
from pyexachem.backend import with_backend
from pyexachem.common.options import FCIOptions
from pyexachem.gto import build_mol

CD = {'diagtol': 1e-10}

def test_h2_fci(make_options):
    options_map = make_options('H2', cd=CD, task={'fci': True})
    sys_data, files_prefix = fci.fci_driver(options_map)
    fcid_file = files_prefix + '.fcidump'
    assert os.path.isfile(fcid_file)
    assert files_prefix == sys_data.files_prefix('fci')
    e_fci = sys_data.results['output']['FCI']['energy']
    assert abs(e_fci[0] - -1.1372838345) < 1e-6

    data = fci.read_fcidump(fcid_file)
    assert data['NORB'] == 2
    assert data['NELEC'] == 2
    assert data['ORBSYM'] == [1, 1]
    assert abs(data['ECORE'] - 0.7151043391) < 1e-6

def test_fcidump_only(make_options):
    options_map = make_options('H2O', cd=CD, task={'fcidump': True})
    sys_data, files_prefix = fci.fci_driver(options_map)
    assert 'FCIDUMP' in sys_data.results['output']
    assert 'energy' not in sys_data.results['output']['FCIDUMP']
    data = fci.read_fcidump(files_prefix + '.fcidump')
    assert data['NORB'] == 7
    assert data['NELEC'] == 10

def test_frozen_core(make_options):
    options_map = make_options('H2O', cd=CD, cc={'freeze': {'core': 1}},
                               fci={'nroots': 2}, task={'fci': True})
    sys_data, _ = fci.fci_driver(options_map)
    e_fci = sys_data.results['output']['FCI']['energy']
    assert len(e_fci) == 2

    mf = pyscf_scf.RHF(build_mol(options_map, options_map.geometry))
    mf.conv_tol = 1e-11
    mf.kernel()
    e_ref = mcscf.CASCI(mf, 6, 8).kernel()[0]
    assert abs(e_fci[0] - e_ref) < 1e-6

def test_nactive(make_options):
    options_map = make_options('H2O', cd=CD, fci={'nactive': 6}, task={'fcidump': True})
    _, files_prefix = fci.fci_driver(options_map)
    assert fci.read_fcidump(files_prefix + '.fcidump')['NORB'] == 6

def test_iuhf(make_options):
    options_map = make_options('OH', cd=CD, task={'fci': True},
                               scf={'scf_type': 'unrestricted', 'multiplicity': 2})
    sys_data, files_prefix = fci.fci_driver(options_map)
    data = fci.read_fcidump(files_prefix + '.fcidump')
    assert data['IUHF'] == 1
    assert data['MS2'] == 1
    assert data['NELEC'] == 9

    # FCI does not depend on the orbitals
    mf = pyscf_scf.RHF(build_mol(options_map, options_map.geometry))
    mol = mf.mol
    s, u = numpy.linalg.eigh(mf.get_ovlp())
    mo = u / numpy.sqrt(s)
    h1 = mo.T @ mf.get_hcore() @ mo
    eri = ao2mo.restore(1, ao2mo.full(mol, mo), mo.shape[1])
    e_ref = direct_spin1.FCI().kernel(h1, eri, mo.shape[1], mol.nelec,
                                      ecore=mol.energy_nuc())[0]
    e_fci = sys_data.results['output']['FCI']['energy'][0]
    assert abs(e_fci - e_ref) < 1e-6

def test_solver_from_file(make_options):
    options_map = make_options('H2', cd=CD, task={'fcidump': True})
    _, files_prefix = fci.fci_driver(options_map)
    e = fci.run_fci_solver(files_prefix + '.fcidump', FCIOptions())
    assert abs(e[0] - -1.1372838345) < 1e-6

def test_numpy_backend(make_options):
    options_map = make_options('H2', cd=CD, task={'fci': True})
    with with_backend('numpy'):
        sys_data, files_prefix = fci.fci_driver(options_map)
    e_fci = sys_data.results['output']['FCI']['energy']
    assert abs(e_fci[0] - -1.1372838345) < 1e-6
    data = fci.read_fcidump(files_prefix + '.fcidump')
    assert abs(data['ECORE'] - 0.7151043391) < 1e-6

def test_frozen_core_uhf(make_options):
    options_map = make_options('OH', cd=CD, cc={'freeze': {'core': 1}}, task={'fci': True},
                               scf={'scf_type': 'unrestricted', 'multiplicity': 2})
    sys_data, files_prefix = fci.fci_driver(options_map)
    data = fci.read_fcidump(files_prefix + '.fcidump')
    assert data['IUHF'] == 1
    assert data['NORB'] == 5
    assert data['NELEC'] == 7

    mf = pyscf_scf.UHF(build_mol(options_map, options_map.geometry))
    mf.conv_tol = 1e-11
    mf.kernel()
    mc = mcscf.UCASCI(mf, 5, (4, 3))
    mc.verbose = 0
    e_ref = mc.kernel()[0]
    e_fci = sys_data.results['output']['FCI']['energy'][0]
    assert abs(e_fci - e_ref) < 1e-6

def test_linear_dependency(make_options):
    options_map = make_options('H2O', basis='6-31g', cd=CD, scf={'tol_lindep': .3},
                               cc={'freeze': {'core': 1}}, task={'fci': True})
    sys_data, files_prefix = fci.fci_driver(options_map)
    assert sys_data.nbf < sys_data.nbf_orig
    ncas = sys_data.nbf - 1
    data = fci.read_fcidump(files_prefix + '.fcidump')
    assert data['NORB'] == ncas
    assert data['NELEC'] == 8

    # CASCI on the same orbitals, rebuilt by a second SCF run
    _, mf = scf.hartree_fock_driver(options_map)
    mo_coeff = numpy.asarray(ops.to_numpy(mf.mo_coeff))
    mc = mcscf.CASCI(pyscf_scf.RHF(mf.mol), ncas, 8)
    mc.verbose = 0
    mc.canonicalization = False
    e_ref = mc.kernel(mo_coeff)[0]
    e_fci = sys_data.results['output']['FCI']['energy'][0]
    assert abs(e_fci - e_ref) < 1e-6
