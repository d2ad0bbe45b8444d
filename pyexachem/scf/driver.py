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
Hartree-Fock stage shared by every task.
"""
import os
import numpy
from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.common.input_parser import parse_input
from pyexachem.common.system_data import SystemData
from pyexachem.gto import build_mol
from pyexachem.lib import logger
from pyexachem.lib.chkfile import write_to_disk
from pyexachem.scf import chkfile
from pyexachem.scf.hf import RHF
from pyexachem.scf.uhf import UHF

def _load_options(options_map):
    if isinstance(options_map, (str, os.PathLike)):
        options_map, _ = parse_input(options_map)
    return options_map

def _restart_orbitals(sys_data, mf, movecs_file):
    scf_dic = chkfile.load_scf(movecs_file)
    mo_coeff = numpy.asarray(scf_dic['mo_coeff'])
    mo_occ = numpy.asarray(scf_dic['mo_occ'])
    spin_axes = 3 if sys_data.is_unrestricted else 2
    if mo_coeff.ndim != spin_axes:
        raise ValueError(f'Orbitals in {movecs_file} do not match scf_type '
                         f'{sys_data.scf_type}.')
    if mo_coeff.shape[-2] != sys_data.nbf_orig or mo_coeff.shape[-1] != mf.nbf:
        raise ValueError(f'Orbitals in {movecs_file} have shape {mo_coeff.shape[-2:]}, '
                         f'expected ({sys_data.nbf_orig}, {mf.nbf}).')
    return scf_dic, mo_coeff, mo_occ

def hartree_fock_driver(options_map):
    '''Run the SCF calculation.

    Parameters
    ----------
    options_map : :class:`OptionsMap` or str
        Parsed options or the path of a JSON input file.

    Returns
    -------
    sys_data : :class:`SystemData`
    mf : :class:`pyexachem.scf.hf.RHF` or :class:`pyexachem.scf.uhf.UHF`
    '''
    options_map = _load_options(options_map)
    common_options = options_map.common_options
    scf_options = options_map.scf_options

    mol = build_mol(options_map, options_map.geometry)
    log = logger.new_logger(mol, scf_options.verbose)
    cput0 = log.get_t0()
    log.banner('Hartree-Fock')
    options_map.print(log)

    sys_data = SystemData(options_map, mol)
    os.makedirs(sys_data.files_dir('scf'), exist_ok=True)
    files_prefix = sys_data.files_prefix('scf')
    movecs_file = files_prefix + '.movecs'
    hcore_file = files_prefix + '.hcore'

    if sys_data.is_restricted:
        mf = RHF(mol)
    else:
        mf = UHF(mol)
    mf.verbose = scf_options.verbose
    mf.conv_tol = scf_options.conve
    mf.conv_tol_density = scf_options.convd
    mf.max_cycle = common_options.maxiter
    mf.diis_space = scf_options.diis_hist
    mf.damp_density = scf_options.damp / 100.
    mf.level_shift = scf_options.lshift
    mf.tol_lindep = scf_options.tol_lindep
    mf.init_guess = scf_options.guess
    mf.auxbasis = common_options.df_basisset or None
    mf.movecs_file = movecs_file
    mf.writem = scf_options.writem

    dm0 = None
    if scf_options.restart:
        scf_dic, mo_coeff, mo_occ = _restart_orbitals(sys_data, mf, movecs_file)
        log.info('Reading orbitals from %s', movecs_file)
        dm0 = mf.make_rdm1(np.asarray(mo_coeff), mo_occ)
        if scf_options.noscf:
            mf.max_cycle = 0
            mf.mo_coeff = np.asarray(mo_coeff)
            mf.mo_energy = np.asarray(scf_dic['mo_energy'])
            mf.mo_occ = mo_occ

    e_tot = mf.kernel(dm0=dm0)
    if scf_options.noscf:
        mf.converged = True
    elif not mf.converged:
        log.warn('SCF did not converge in %d iterations.', mf.max_cycle)

    write_to_disk(mf.get_hcore(), hcore_file)
    chkfile.dump_scf(movecs_file, mf.e_tot, mf.mo_energy, mf.mo_coeff, mf.mo_occ)

    sys_data.nbf = mf.nbf
    sys_data.update()
    sys_data.print(log)

    log.note('** Total SCF energy = %.15f', e_tot)
    sys_data.results['output']['SCF'] = {
        'final_energy': float(ops.to_numpy(e_tot)),
        'converged': bool(mf.converged),
        'nbf': sys_data.nbf,
    }
    sys_data.write_json_data('SCF')
    log.timer('Hartree-Fock', *cput0)
    return sys_data, mf
