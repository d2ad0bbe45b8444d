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
MP2 correlation energy from MO Cholesky vectors.
"""
from functools import partial
from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.ops import jit
from pyexachem.lib import logger
from pyexachem.cholesky import (
    get_cholesky_tensors,
)
from pyexachem.scf import hartree_fock_driver
from pyexachem.scf.driver import _load_options

def _ovov(cholVpr, nocc):
    b_ov = cholVpr[:nocc,nocc:]
    return np.einsum('iaK,jbK->iajb', b_ov, b_ov)

@partial(jit, static_argnums=(2,))
def energy_restricted(cholVpr, d_f1, nocc):
    '''Closed-shell MP2 correlation energy.'''
    eps = np.diagonal(d_f1)
    e_occ, e_vir = eps[:nocc], eps[nocc:]
    ovov = _ovov(cholVpr, nocc)
    denom = (e_occ[:,None,None,None] - e_vir[None,:,None,None]
             + e_occ[None,None,:,None] - e_vir[None,None,None,:])
    t2 = ovov / denom
    return np.einsum('iajb,iajb->', t2, 2*ovov - ovov.transpose(0,3,2,1))

@partial(jit, static_argnums=(2,3))
def energy_unrestricted(cholVpr, d_f1, nocca, noccb):
    '''Open-shell MP2 correlation energy; tensors carry a spin axis.'''
    def same_spin(b, f, nocc):
        eps = np.diagonal(f)
        e_occ, e_vir = eps[:nocc], eps[nocc:]
        ovov = _ovov(b, nocc)
        denom = (e_occ[:,None,None,None] - e_vir[None,:,None,None]
                 + e_occ[None,None,:,None] - e_vir[None,None,None,:])
        t2 = (ovov - ovov.transpose(0,3,2,1)) / denom
        return .5 * np.einsum('iajb,iajb->', t2, ovov)

    e_aa = same_spin(cholVpr[0], d_f1[0], nocca)
    e_bb = same_spin(cholVpr[1], d_f1[1], noccb)

    eps_a = np.diagonal(d_f1[0])
    eps_b = np.diagonal(d_f1[1])
    b_ov_a = cholVpr[0][:nocca,nocca:]
    b_ov_b = cholVpr[1][:noccb,noccb:]
    ovov_ab = np.einsum('iaK,jbK->iajb', b_ov_a, b_ov_b)
    denom = (eps_a[:nocca,None,None,None] - eps_a[None,nocca:,None,None]
             + eps_b[None,None,:noccb,None] - eps_b[None,None,None,noccb:])
    e_ab = np.einsum('iajb,iajb->', ovov_ab / denom, ovov_ab)
    return e_aa + e_bb + e_ab

def cd_mp2_driver(options_map):
    '''Hartree-Fock, Cholesky decomposition and MP2.

    Returns
    -------
    sys_data : :class:`SystemData`
    e_corr : float
        MP2 correlation energy.
    '''
    options_map = _load_options(options_map)
    sys_data, mf = hartree_fock_driver(options_map)
    log = logger.new_logger(sys_data)
    ccsd_options = options_map.ccsd_options
    cput0 = log.get_t0()

    cholVpr, d_f1 = get_cholesky_tensors(
        sys_data, mf, ccsd_options.readt,
        ccsd_options.writet or options_map.cd_options.write_cv)[:2]

    log.banner('CD-MP2')
    if sys_data.is_restricted:
        e_corr = energy_restricted(cholVpr, d_f1, sys_data.n_occ_alpha)
    else:
        e_corr = energy_unrestricted(cholVpr, d_f1,
                                     sys_data.n_occ_alpha, sys_data.n_occ_beta)
    e_corr = float(ops.to_numpy(e_corr))
    e_tot = float(ops.to_numpy(mf.e_tot)) + e_corr
    log.note('MP2 correlation energy / hartree: %.15f', e_corr)
    log.note('MP2 total energy / hartree: %.15f', e_tot)

    sys_data.results['output']['MP2'] = {'energy': {'correlation': e_corr,
                                                    'total': e_tot}}
    sys_data.write_json_data('MP2')
    log.timer('CD-MP2', *cput0)
    return sys_data, e_corr
