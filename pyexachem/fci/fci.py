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

"""
FCIDUMP generation from the Cholesky-decomposed Hamiltonian.
"""
import os
from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.common import fcidump
from pyexachem.lib import logger
from pyexachem.lib.chkfile import read_from_disk
from pyexachem.cholesky import get_cholesky_tensors
from pyexachem.scf import hartree_fock_driver
from pyexachem.scf.driver import _load_options
from pyexachem.fci.solver import run_fci_solver

read_fcidump = fcidump.read

def full_eri(cholVpr):
    '''``(pr|qs) = sum_L B[p,r,L] B[q,s,L]``.

    Unrestricted vectors give the ``(aa, ab, bb)`` blocks.
    '''
    if cholVpr.ndim == 4:
        return (full_eri(cholVpr[0]),
                np.einsum('prL,qsL->prqs', cholVpr[0], cholVpr[1]),
                full_eri(cholVpr[1]))
    return np.einsum('prL,qsL->prqs', cholVpr, cholVpr)

def _coulomb(eri, nocc):
    return np.einsum('pqii->pq', eri[:,:,:nocc,:nocc])

def _exchange(eri, nocc):
    return np.einsum('piiq->pq', eri[:,:nocc,:nocc,:])

def fold_core_rhf(f_mo, full_v2, nocc, e_hf):
    '''Effective one-electron operator and constant of the correlated space.

    ``f_mo`` already carries the frozen-core and the correlated occupied
    potential. The latter is removed from it.
    '''
    h_eff = f_mo - 2 * _coulomb(full_v2, nocc) + _exchange(full_v2, nocc)
    e_act = np.einsum('ii->', h_eff[:nocc,:nocc] + f_mo[:nocc,:nocc])
    return h_eff, e_hf - e_act

def fold_core_uhf(f_mo, full_v2, nocc, e_hf):
    eri_aa, eri_ab, eri_bb = full_v2
    nocca, noccb = nocc
    j_a = _coulomb(eri_aa, nocca) + np.einsum('pqii->pq', eri_ab[:,:,:noccb,:noccb])
    j_b = _coulomb(eri_bb, noccb) + np.einsum('iipq->pq', eri_ab[:nocca,:nocca])
    h_a = f_mo[0] - j_a + _exchange(eri_aa, nocca)
    h_b = f_mo[1] - j_b + _exchange(eri_bb, noccb)
    e_act = .5 * (np.einsum('ii->', h_a[:nocca,:nocca] + f_mo[0][:nocca,:nocca])
                  + np.einsum('ii->', h_b[:noccb,:noccb] + f_mo[1][:noccb,:noccb]))
    return (h_a, h_b), e_hf - e_act

def _active_window(sys_data, norb):
    nactive = sys_data.options_map.fci_options.nactive
    if nactive == 0:
        return norb
    if nactive > norb:
        raise ValueError(f'nactive = {nactive} exceeds the {norb} correlated orbitals.')
    if nactive < max(sys_data.n_occ_alpha, sys_data.n_occ_beta):
        raise ValueError(f'nactive = {nactive} does not hold the occupied orbitals.')
    return nactive

def generate_fcidump(sys_data, mf, lcao, d_f1, full_v2):
    '''Write the FCIDUMP of the correlated orbitals.

    Returns
    -------
    files_prefix : str
        ``<files_dir>/fci/<out_fp>``; the file is ``files_prefix + '.fcidump'``.
    '''
    log = logger.new_logger(sys_data)
    cput0 = log.get_t0()
    files_dir = sys_data.files_dir('fci')
    os.makedirs(files_dir, exist_ok=True)
    files_prefix = os.path.join(files_dir, sys_data.out_fp())
    hcore = read_from_disk(os.path.join(files_dir, '..', 'scf', sys_data.out_fp() + '.hcore'),
                           (sys_data.nbf_orig, sys_data.nbf_orig))

    if sys_data.is_restricted:
        hcore_mo = lcao.T @ hcore @ lcao
    else:
        hcore_mo = np.array([c.T @ hcore @ c for c in lcao])

    nocc = (sys_data.n_occ_alpha, sys_data.n_occ_beta)
    nuc = float(mf.energy_nuc())
    if sys_data.n_frozen_core > 0:
        e_hf = float(ops.to_numpy(mf.e_tot))
        if sys_data.is_restricted:
            h1e, ecore = fold_core_rhf(d_f1, full_v2, nocc[0], e_hf)
        else:
            h1e, ecore = fold_core_uhf(d_f1, full_v2, nocc, e_hf)
        ecore = float(ops.to_numpy(ecore))
        log.info('Frozen core energy (nuclear repulsion included) = %.15g', ecore)
    else:
        h1e, ecore = hcore_mo, nuc

    norb = _active_window(sys_data, lcao.shape[-1])
    nelec = sum(nocc)
    ms = nocc[0] - nocc[1]
    orbsym = [1] * norb
    tol = sys_data.options_map.fci_options.tol
    act = slice(0, norb)
    fcid_file = files_prefix + '.fcidump'
    if sys_data.is_restricted:
        fcidump.from_integrals(fcid_file, h1e[act,act], full_v2[act,act,act,act],
                               norb, nelec, ecore, ms, orbsym, tol=tol)
    else:
        h1e = [h[act,act] for h in h1e]
        h2e = [g[act,act,act,act] for g in full_v2]
        fcidump.from_integrals_uhf(fcid_file, h1e, h2e, norb, nelec,
                                   ecore, ms, orbsym, tol=tol)
    log.info('FCIDUMP written to %s (norb = %d, nelec = %d)', fcid_file, norb, nelec)
    log.timer('FCIDUMP', *cput0)
    return files_prefix

def fci_driver(options_map):
    '''Hartree-Fock, Cholesky decomposition and FCIDUMP generation.

    When the ``fci`` task is requested the FCI solver runs on the FCIDUMP.

    Returns
    -------
    sys_data : :class:`SystemData`
    files_prefix : str
    '''
    options_map = _load_options(options_map)
    sys_data, mf = hartree_fock_driver(options_map)
    ccsd_options = options_map.ccsd_options
    log = logger.new_logger(sys_data)
    cput0 = log.get_t0()

    ccsd_options.print(log)
    log.note('#occupied, #virtual = %d, %d', sys_data.nocc, sys_data.nvir)

    cholVpr, d_f1, lcao, chol_count, max_cvecs, ccsd_restart = \
            get_cholesky_tensors(sys_data, mf, ccsd_options.readt,
                                 ccsd_options.writet or options_map.cd_options.write_cv)

    full_v2 = full_eri(cholVpr)
    del cholVpr

    files_prefix = generate_fcidump(sys_data, mf, lcao, d_f1, full_v2)
    del full_v2

    fcid_file = files_prefix + '.fcidump'
    results = {'fcidump': fcid_file,
               'n_cholesky_vectors': chol_count,
               'restart': bool(ccsd_restart)}
    if options_map.task_options.fci:
        e_fci = run_fci_solver(fcid_file, options_map.fci_options, sys_data)
        results['energy'] = e_fci
        log.note('FCI energy / hartree: %s', ' '.join('%.15f' % e for e in e_fci))
    section = 'FCI' if options_map.task_options.fci else 'FCIDUMP'
    sys_data.results['output'][section] = results
    sys_data.write_json_data(section)
    log.timer('FCI driver', *cput0)
    return sys_data, files_prefix
