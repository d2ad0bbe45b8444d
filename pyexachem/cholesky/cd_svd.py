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
Cholesky decomposition of the two-electron integrals
====================================================

The AO integrals are factorized as

    (mu nu|la si) ~= sum_K L[mu,nu,K] L[la,si,K]

by a pivoted incomplete Cholesky decomposition. The diagonal
``(mu nu|mu nu)`` is assembled shell pair by shell pair; each step
picks the largest remaining diagonal element as pivot and evaluates
the integral column of the pivot's shell pair.
"""
import os
import numpy
from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.lib import logger
from pyexachem.lib.chkfile import (
    write_to_disk,
    read_from_disk,
)
from pyexachem.scf import hartree_fock_driver
from pyexachem.scf.driver import _load_options

def _shell_of_ao(mol):
    ao_loc = mol.ao_loc_nr()
    return numpy.repeat(numpy.arange(mol.nbas), numpy.diff(ao_loc)), ao_loc

def _diagonal(mol, ao_loc):
    nao = mol.nao
    diag = numpy.zeros((nao, nao))
    for ish in range(mol.nbas):
        i0, i1 = ao_loc[ish], ao_loc[ish+1]
        for jsh in range(ish+1):
            j0, j1 = ao_loc[jsh], ao_loc[jsh+1]
            shls = (ish, ish+1, jsh, jsh+1, ish, ish+1, jsh, jsh+1)
            eri = mol.intor('int2e', shls_slice=shls)
            di, dj = i1 - i0, j1 - j0
            d = numpy.einsum('ijij->ij', eri.reshape(di, dj, di, dj))
            diag[i0:i1,j0:j1] = d
            diag[j0:j1,i0:i1] = d.T
    return diag

def cholesky_2e(mol, diagtol=1e-5, max_cvecs=None, verbose=None):
    '''Pivoted Cholesky vectors of the AO two-electron integrals.

    Parameters
    ----------
    mol : :class:`pyscf.gto.Mole`
    diagtol : float
        The decomposition stops when the largest remaining diagonal
        element is below this value.
    max_cvecs : int, optional
        Maximum number of vectors. Default is ``12 * nao``.

    Returns
    -------
    chol : (nao, nao, count) array
        Backend array of Cholesky vectors.
    count : int
        Number of vectors.
    '''
    log = logger.new_logger(mol, verbose)
    cput0 = log.get_t0()
    nao = mol.nao
    if max_cvecs is None:
        max_cvecs = 12 * nao
    ao_shell, ao_loc = _shell_of_ao(mol)
    diag = _diagonal(mol, ao_loc)
    log.debug('Largest diagonal element of (mu nu|mu nu) = %g', diag.max())

    vecs = numpy.zeros((max_cvecs, nao, nao))
    count = 0
    cached_pair = None
    column = None
    while count < max_cvecs:
        idx = numpy.argmax(diag)
        dmax = diag.flat[idx]
        if dmax < diagtol:
            break
        mu, nu = divmod(idx, nao)
        ish, jsh = ao_shell[mu], ao_shell[nu]
        if cached_pair != (ish, jsh):
            shls = (0, mol.nbas, 0, mol.nbas, ish, ish+1, jsh, jsh+1)
            column = mol.intor('int2e', shls_slice=shls)
            column = column.reshape(nao, nao, ao_loc[ish+1]-ao_loc[ish],
                                    ao_loc[jsh+1]-ao_loc[jsh])
            cached_pair = (ish, jsh)
        col = column[:,:,mu-ao_loc[ish],nu-ao_loc[jsh]].copy()
        if count > 0:
            col -= numpy.einsum('kpq,k->pq', vecs[:count], vecs[:count,mu,nu])
        vec = col / numpy.sqrt(dmax)
        vecs[count] = vec
        diag -= vec * vec
        count += 1

    if count == max_cvecs:
        log.warn('Cholesky decomposition reached the maximum number of '
                 'vectors (%d); largest remaining diagonal = %g',
                 max_cvecs, diag.max())
    log.info('Number of Cholesky vectors = %d', count)
    log.timer('Cholesky decomposition', *cput0)
    chol = np.asarray(vecs[:count].transpose(1,2,0))
    return chol, count

def correlated_orbitals(sys_data, mf):
    '''MO coefficients of the correlated orbitals.

    Frozen core and frozen virtual orbitals are removed. Unrestricted
    references return the alpha and beta coefficients stacked.
    '''
    p0 = sys_data.n_frozen_core
    p1 = sys_data.nbf - sys_data.n_frozen_virtual
    mo_coeff = np.asarray(mf.mo_coeff)
    if sys_data.is_unrestricted:
        return mo_coeff[:,:,p0:p1]
    return mo_coeff[:,p0:p1]

def ao2mo_cholesky(chol, lcao):
    '''Transform AO Cholesky vectors to the MO basis ``(p, q, K)``.'''
    if lcao.ndim == 3:
        return np.array([ao2mo_cholesky(chol, c) for c in lcao])
    tmp = np.einsum('mp,mnK->pnK', lcao, chol)
    return np.einsum('pnK,nq->pqK', tmp, lcao)

def cd_svd_driver(sys_data, mf, readv2=False, cholfile=None):
    '''Cholesky vectors and Fock matrix of the correlated orbitals.

    Returns
    -------
    cholVpr : array or None
        ``(p, q, K)`` MO Cholesky vectors, ``(2, p, q, K)`` for
        unrestricted references. None when ``readv2`` is set.
    d_f1 : array or None
        MO Fock matrix. None when ``readv2`` is set.
    lcao : array
        MO coefficients of the correlated orbitals.
    chol_count : int
    max_cvecs : int
    '''
    log = logger.new_logger(sys_data)
    cd_options = sys_data.options_map.cd_options
    max_cvecs = cd_options.max_cvecs * sys_data.nbf_orig
    lcao = correlated_orbitals(sys_data, mf)

    log.banner('Cholesky decomposition')
    log.info('diagtol = %g  max_cvecs = %d', cd_options.diagtol, max_cvecs)

    if readv2:
        if cholfile is None or not os.path.isfile(cholfile):
            raise FileNotFoundError(f'Cholesky count file {cholfile} does not exist.')
        with open(cholfile, 'r') as f:
            chol_count = int(f.read().split()[0])
        log.info('Restart: %d Cholesky vectors from %s', chol_count, cholfile)
        return None, None, lcao, chol_count, max_cvecs

    cput0 = log.get_t0()
    chol, chol_count = cholesky_2e(mf.mol, cd_options.diagtol, max_cvecs,
                                   verbose=sys_data.verbose)
    cholVpr = ao2mo_cholesky(chol, lcao)
    del chol

    p0 = sys_data.n_frozen_core
    p1 = sys_data.nbf - sys_data.n_frozen_virtual
    f_mo = mf.get_fock_mo()
    if sys_data.is_unrestricted:
        d_f1 = f_mo[:,p0:p1,p0:p1]
    else:
        d_f1 = f_mo[p0:p1,p0:p1]
    log.timer('CD transformation', *cput0)
    return cholVpr, d_f1, lcao, chol_count, max_cvecs

def cholesky_files(sys_data):
    '''Paths of the ``f1_mo``, ``cholv2`` and ``cholcount`` files.'''
    files_prefix = sys_data.files_prefix()
    return (files_prefix + '.f1_mo',
            files_prefix + '.cholv2',
            files_prefix + '.cholcount')

def write_cholesky_files(sys_data, d_f1, cholVpr, chol_count):
    '''Write the restart files; a failure is logged and not raised.'''
    log = logger.new_logger(sys_data)
    f1file, v2file, cholfile = cholesky_files(sys_data)
    try:
        os.makedirs(sys_data.files_dir(), exist_ok=True)
        write_to_disk(d_f1, f1file)
        write_to_disk(cholVpr, v2file)
        with open(cholfile, 'w') as f:
            f.write('%d\n' % chol_count)
    except OSError as err:
        log.error('Failed to write Cholesky restart files in %s: %s',
                  sys_data.files_dir(), err)
        return False
    log.info('Cholesky vectors written to %s', v2file)
    return True

def get_cholesky_tensors(sys_data, mf, readt=False, writet=False):
    '''Cholesky vectors and Fock matrix, reused from disk when available.

    A restart is done when ``readt`` is set or when both the ``f1_mo`` and
    ``cholv2`` files exist. Otherwise the decomposition runs and, with
    ``writet``, its results are written for the next run.

    Returns
    -------
    cholVpr, d_f1, lcao, chol_count, max_cvecs, ccsd_restart
    '''
    log = logger.new_logger(sys_data)
    f1file, v2file, cholfile = cholesky_files(sys_data)
    ccsd_restart = readt or (os.path.isfile(f1file) and os.path.isfile(v2file))

    cholVpr, d_f1, lcao, chol_count, max_cvecs = \
            cd_svd_driver(sys_data, mf, ccsd_restart, cholfile)

    nactv = sys_data.nactv
    if ccsd_restart:
        if sys_data.is_unrestricted:
            f1_shape = (2, nactv, nactv)
        else:
            f1_shape = (nactv, nactv)
        d_f1 = read_from_disk(f1file, f1_shape)
        cholVpr = read_from_disk(v2file, f1_shape + (chol_count,))
        log.info('Read Fock matrix and Cholesky vectors from %s', sys_data.files_dir())
    elif writet:
        write_cholesky_files(sys_data, d_f1, cholVpr, chol_count)
    return cholVpr, d_f1, lcao, chol_count, max_cvecs, ccsd_restart

def cd_2e_driver(options_map):
    '''Hartree-Fock followed by the Cholesky decomposition.

    The ``f1_mo``, ``cholv2`` and ``cholcount`` files are always written.
    '''
    options_map = _load_options(options_map)
    sys_data, mf = hartree_fock_driver(options_map)
    log = logger.new_logger(sys_data)
    cput0 = log.get_t0()

    cholVpr, d_f1, lcao, chol_count, max_cvecs = cd_svd_driver(sys_data, mf)
    write_cholesky_files(sys_data, d_f1, cholVpr, chol_count)

    sys_data.results['output']['CD'] = {'n_cholesky_vectors': chol_count,
                                        'max_cvecs': max_cvecs}
    sys_data.write_json_data('CD')
    log.timer('CD driver', *cput0)
    return sys_data, mf, cholVpr, d_f1, chol_count
