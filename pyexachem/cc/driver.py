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
CD-CCSD task: Hartree-Fock, Cholesky decomposition and CCSD.
"""
import os
from pyexachem import ops
from pyexachem.lib import logger
from pyexachem.cholesky import get_cholesky_tensors
from pyexachem.scf import hartree_fock_driver
from pyexachem.scf.driver import _load_options
from pyexachem.cc.rccsd import RCCSD
from pyexachem.cc.gccsd import GCCSD

def make_ccsd(sys_data, mf, cholVpr, d_f1):
    '''CCSD solver configured from the ``CC`` options.'''
    ccsd_options = sys_data.options_map.ccsd_options
    if sys_data.is_restricted:
        mycc = RCCSD(mf, cholVpr, d_f1, sys_data.n_occ_alpha)
    else:
        mycc = GCCSD(mf, cholVpr, d_f1,
                     (sys_data.n_occ_alpha, sys_data.n_occ_beta))
    mycc.verbose = sys_data.verbose
    mycc.stdout = sys_data.stdout
    mycc.conv_tol = ccsd_options.threshold
    mycc.conv_tol_normt = ccsd_options.threshold
    mycc.max_cycle = ccsd_options.ccsd_maxiter
    mycc.diis_space = ccsd_options.ndiis
    mycc.level_shift = ccsd_options.lshift
    mycc.amps_prefix = sys_data.files_prefix()
    if ccsd_options.writet:
        mycc.writet_iter = ccsd_options.write_interval()
    return mycc

def _initial_amplitudes(mycc, log):
    t1file, t2file = mycc.amps_files()
    if not (os.path.isfile(t1file) and os.path.isfile(t2file)):
        log.warn('readt is set but %s is missing; starting from MP2 amplitudes.',
                 t1file if not os.path.isfile(t1file) else t2file)
        return None, None
    t1, t2 = mycc.load_amps()
    log.info('Initial amplitudes read from %s', t1file)
    return t1, t2

def cd_ccsd_driver(options_map):
    '''Run CCSD on the Cholesky-decomposed integrals.

    Returns
    -------
    sys_data : :class:`SystemData`
    mycc : :class:`RCCSD` or :class:`GCCSD`
    '''
    options_map = _load_options(options_map)
    sys_data, mf = hartree_fock_driver(options_map)
    ccsd_options = options_map.ccsd_options
    log = logger.new_logger(sys_data)
    cput0 = log.get_t0()

    log.banner('CD-CCSD')
    ccsd_options.print(log)
    cholVpr, d_f1, lcao, chol_count, max_cvecs, ccsd_restart = \
            get_cholesky_tensors(sys_data, mf, ccsd_options.readt,
                                 ccsd_options.writet or options_map.cd_options.write_cv)
    del lcao

    mycc = make_ccsd(sys_data, mf, cholVpr, d_f1)
    t1 = t2 = None
    if ccsd_options.readt:
        t1, t2 = _initial_amplitudes(mycc, log)
    mycc.kernel(t1, t2)
    if not mycc.converged:
        log.warn('CCSD did not converge in %d iterations.', mycc.max_cycle)
    if ccsd_options.writet:
        mycc.dump_amps()

    e_tot = float(ops.to_numpy(mycc.e_tot))
    log.note('CCSD correlation energy / hartree: %.15f', mycc.e_corr)
    log.note('CCSD total energy / hartree: %.15f', e_tot)
    sys_data.results['output']['CCSD'] = {
        'n_cholesky_vectors': chol_count,
        'restart': bool(ccsd_restart),
        'converged': bool(mycc.converged),
        'energy': {'correlation': mycc.e_corr, 'total': e_tot},
    }
    sys_data.write_json_data('CCSD')
    log.timer('CD-CCSD', *cput0)
    return sys_data, mycc
