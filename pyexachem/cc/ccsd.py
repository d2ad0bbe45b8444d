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
Shared CCSD iterations for the Cholesky-based solvers.
"""
import os
import numpy
from pyscf import lib
from pyscf.cc import ccsd as pyscf_ccsd
from pyexachem import config
from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.lib import logger
from pyexachem.lib.chkfile import (
    write_to_disk,
    read_from_disk,
)

def _iter(mycc, t1, t2, eris, *,
          diis=None, max_cycle=50, tol=1e-8,
          tolnormt=1e-6, verbose=None):
    log = logger.new_logger(mycc, verbose)

    eold = 0
    eccsd = mycc.energy(t1, t2, eris)
    log.info('Init E_corr(CCSD) = %.15g', eccsd)
    cput1 = log.timer('initialize CCSD')

    conv = False
    for istep in range(max_cycle):
        t1new, t2new = mycc.update_amps(t1, t2, eris)
        tmpvec = mycc.amplitudes_to_vector(t1new, t2new)
        tmpvec -= mycc.amplitudes_to_vector(t1, t2)
        normt = float(np.linalg.norm(tmpvec))
        tmpvec = None
        if mycc.iterative_damping < 1.0:
            alpha = mycc.iterative_damping
            t1new = (1-alpha) * t1 + alpha * t1new
            t2new = (1-alpha) * t2 + alpha * t2new
        t1, t2 = t1new, t2new
        t1new = t2new = None
        t1, t2 = mycc.run_diis(t1, t2, istep, normt, eccsd-eold, diis)
        eold, eccsd = eccsd, mycc.energy(t1, t2, eris)
        log.info('cycle = %d  E_corr(CCSD) = %.15g  dE = %.9g  norm(t1,t2) = %.6g',
                 istep+1, eccsd, eccsd - eold, normt)
        if mycc.writet_iter > 0 and (istep+1) % mycc.writet_iter == 0:
            mycc.dump_amps(t1, t2)
        cput1 = log.timer('CCSD iter', *cput1)
        if abs(eccsd-eold) < tol and normt < tolnormt:
            conv = True
            break
    del log
    return t1, t2, conv


def kernel(mycc, eris=None, t1=None, t2=None, max_cycle=50, tol=1e-8,
           tolnormt=1e-6, verbose=None):
    log = logger.new_logger(mycc, verbose)
    cput0 = log.get_t0()
    if eris is None:
        eris = mycc.ao2mo()
    if t1 is None and t2 is None:
        t1, t2 = mycc.get_init_guess(eris)
    elif t2 is None:
        t2 = mycc.get_init_guess(eris)[1]

    if isinstance(mycc.diis, lib.diis.DIIS):
        adiis = mycc.diis
    elif mycc.diis:
        adiis = lib.diis.DIIS(mycc, mycc.diis_file, incore=True)
        adiis.space = mycc.diis_space
    else:
        adiis = None

    t1, t2, conv = _iter(mycc, t1, t2, eris,
                         diis=adiis, max_cycle=max_cycle, tol=tol,
                         tolnormt=tolnormt, verbose=log)

    eccsd = mycc.energy(t1, t2, eris)
    log.timer('CCSD', *cput0)
    del adiis, log
    return conv, eccsd, t1, t2


class CCSD(pyscf_ccsd.CCSD):
    """Base class of the CCSD solvers working on Cholesky vectors.

    Attributes
    ----------
    cholVpr : array
        MO Cholesky vectors of the correlated orbitals.
    fock : array
        MO Fock matrix of the correlated orbitals.
    amps_prefix : str
        Amplitudes are written to ``<amps_prefix>.t1amp`` and
        ``<amps_prefix>.t2amp``. Nothing is written when None.
    writet_iter : int
        Write the amplitudes every ``writet_iter`` iterations (0 disables).
    """
    _keys = {'cholVpr', 'fock', 'amps_prefix', 'writet_iter'}

    def __init__(self, mf, cholVpr, fock, nocc, nmo, **kwargs):
        pyscf_ccsd.CCSD.__init__(self, mf)
        self.cholVpr = cholVpr
        self.fock = fock
        self.nocc = nocc
        self.nmo = nmo
        self.amps_prefix = None
        self.writet_iter = 0
        self.__dict__.update(kwargs)

    def ao2mo(self, mo_coeff=None):
        raise NotImplementedError

    def init_amps(self, eris=None):
        raise NotImplementedError

    def amplitudes_to_vector(self, t1, t2, out=None):
        return np.concatenate((t1.ravel(), t2.ravel()))

    def vector_to_amplitudes(self, vec, nmo=None, nocc=None):
        if nocc is None:
            nocc = self.nocc
        if nmo is None:
            nmo = self.nmo
        nvir = nmo - nocc
        nov = nocc * nvir
        t1 = vec[:nov].reshape(nocc, nvir)
        t2 = vec[nov:].reshape(nocc, nocc, nvir, nvir)
        return t1, t2

    def run_diis(self, t1, t2, istep, normt, de, adiis):
        if (adiis and istep >= self.diis_start_cycle and
                abs(de) < self.diis_start_energy_diff):
            vec = numpy.asarray(ops.to_numpy(self.amplitudes_to_vector(t1, t2)))
            vec = np.asarray(adiis.update(vec))
            t1, t2 = self.vector_to_amplitudes(vec)
            logger.debug1(self, 'DIIS for step %d', istep)
        return t1, t2

    def amps_files(self):
        return self.amps_prefix + '.t1amp', self.amps_prefix + '.t2amp'

    def dump_amps(self, t1=None, t2=None):
        '''Write the amplitudes; a failure is logged and not raised.'''
        if not self.amps_prefix:
            return None
        if t1 is None:
            t1 = self.t1
        if t2 is None:
            t2 = self.t2
        t1file, t2file = self.amps_files()
        try:
            os.makedirs(os.path.dirname(t1file) or '.', exist_ok=True)
            write_to_disk(t1, t1file)
            write_to_disk(t2, t2file)
        except OSError as err:
            logger.error(self, 'Failed writing CCSD amplitudes: %s', err)
            return None
        logger.debug(self, 'CCSD amplitudes written to %s', t1file)
        return t1file, t2file

    def load_amps(self):
        '''Read amplitudes written by :meth:`dump_amps`.'''
        nvir = self.nmo - self.nocc
        t1file, t2file = self.amps_files()
        t1 = read_from_disk(t1file, (self.nocc, nvir))
        t2 = read_from_disk(t2file, (self.nocc, self.nocc, nvir, nvir))
        return t1, t2

    def ccsd(self, t1=None, t2=None, eris=None):
        if self.verbose >= logger.WARN:
            self.check_sanity()
        self.dump_flags()

        if eris is None:
            eris = self.ao2mo()
        if self.e_hf is None:
            self.e_hf = float(ops.to_numpy(self._scf.e_tot))

        self.converged, e_corr, self.t1, self.t2 = \
                kernel(self, eris, t1, t2, max_cycle=self.max_cycle,
                       tol=self.conv_tol, tolnormt=self.conv_tol_normt,
                       verbose=self.verbose)
        self.e_corr = float(ops.to_numpy(e_corr))
        self._finalize()
        return self.e_corr, self.t1, self.t2

    def kernel(self, t1=None, t2=None, eris=None):
        return self.ccsd(t1, t2, eris)

    def _jitted(self, fn, fn_jit):
        return fn_jit if config.jit else fn
