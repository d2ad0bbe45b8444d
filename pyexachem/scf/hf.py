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
Restricted Hartree-Fock with backend tensors.

Two-electron integrals are kept in memory, either as the full
``(mu nu|la si)`` tensor or as density-fitting three-index tensors.
The eigenproblem is solved in the canonically orthogonalized basis,
dropping overlap eigenvalues below ``tol_lindep``.
"""
from functools import (
    partial,
    wraps,
)
import numpy
import scipy.linalg

from pyscf import lib as pyscf_lib
from pyscf.lib import module_method
from pyscf.df import incore as df_incore
from pyscf.scf import hf as pyscf_hf

from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.ops import jit
from pyexachem.lib import logger
from pyexachem.scf import chkfile
from pyexachem.scf.diis import SCF_DIIS


def _scf(dm, mf, s1e, h1e, *,
         conv_tol=1e-8, conv_tol_density=1e-7, diis=None,
         dump_chk=True, callback=None, log=None):
    if log is None:
        log = logger.new_logger(mf)
    scf_conv = False
    mol = mf.mol
    vhf = mf.get_veff(mol, dm)
    e_tot = mf.energy_tot(dm, h1e, vhf)
    log.info('init E= %.15g', e_tot)
    cput1 = log.timer('initialize scf')

    mo_energy = mo_coeff = mo_occ = None
    for cycle in range(mf.max_cycle):
        dm_last = dm
        last_hf_e = e_tot

        fock = mf.get_fock(h1e, s1e, vhf, dm, cycle, diis)
        mo_energy, mo_coeff = mf.eig(fock, s1e)
        mo_occ = mf.get_occ(mo_energy, mo_coeff)
        dm = mf.make_rdm1(mo_coeff, mo_occ)
        if mf.damp_density < 1:
            dm = dm * mf.damp_density + dm_last * (1. - mf.damp_density)
        vhf = mf.get_veff(mol, dm)
        e_tot = mf.energy_tot(dm, h1e, vhf)

        delta_e = float(e_tot - last_hf_e)
        rms_ddm = float(np.sqrt(np.mean((dm - dm_last)**2)))
        log.info('cycle= %d E= %.15g  delta_E= %4.3g  rms(ddm)= %4.3g',
                 cycle+1, e_tot, delta_e, rms_ddm)

        if callable(mf.check_convergence):
            scf_conv = mf.check_convergence(locals())
        elif abs(delta_e) < conv_tol and rms_ddm < conv_tol_density:
            scf_conv = True

        if dump_chk:
            mf.dump_chk(locals())

        if callable(callback):
            callback(locals())

        cput1 = log.timer(f'cycle = {cycle+1}', *cput1)

        if scf_conv:
            break
    return dm, scf_conv, e_tot, mo_energy, mo_coeff, mo_occ


def kernel(mf, conv_tol=1e-8, conv_tol_density=1e-7,
           dump_chk=True, dm0=None, callback=None, conv_check=True, **kwargs):
    '''SCF iterations.

    Converged when the energy change is below ``conv_tol`` and the root
    mean square change of the density matrix is below ``conv_tol_density``.

    Returns
    -------
    scf_conv : bool
    e_tot : float
    mo_energy, mo_coeff, mo_occ : arrays
    '''
    log = logger.new_logger(mf)
    cput0 = log.get_t0()

    mol = mf.mol
    if dm0 is None:
        dm = mf.get_init_guess(mol, mf.init_guess)
    else:
        dm = dm0
    dm = np.asarray(dm)

    h1e = np.asarray(mf.get_hcore(mol))
    s1e = np.asarray(mf.get_ovlp(mol))

    scf_conv = False
    if mf.max_cycle <= 0:
        # Skip SCF iterations. Compute only the total energy of the initial density
        vhf = mf.get_veff(mol, dm)
        e_tot = mf.energy_tot(dm, h1e, vhf)
        log.info('init E= %.15g', e_tot)

        fock = mf.get_fock(h1e, s1e, vhf, dm)
        mo_energy, mo_coeff = mf.eig(fock, s1e)
        mo_occ = mf.get_occ(mo_energy, mo_coeff)
        return scf_conv, e_tot, mo_energy, mo_coeff, mo_occ

    if isinstance(mf.diis, pyscf_lib.diis.DIIS):
        mf_diis = mf.diis
    elif mf.diis:
        assert issubclass(mf.DIIS, pyscf_lib.diis.DIIS)
        mf_diis = mf.DIIS(mf, mf.diis_file)
        mf_diis.space = mf.diis_space
    else:
        mf_diis = None

    dm, scf_conv, e_tot, mo_energy, mo_coeff, mo_occ = \
            _scf(dm, mf, s1e, h1e,
                 conv_tol=conv_tol, conv_tol_density=conv_tol_density,
                 diis=mf_diis, dump_chk=dump_chk, callback=callback, log=log)

    if scf_conv and conv_check:
        # An extra diagonalization, to remove level shift and damping
        vhf = mf.get_veff(mol, dm)
        fock = mf.get_fock(h1e, s1e, vhf, dm)
        mo_energy, mo_coeff = mf.eig(fock, s1e)
        mo_occ = mf.get_occ(mo_energy, mo_coeff)
        dm, dm_last = mf.make_rdm1(mo_coeff, mo_occ), dm
        vhf = mf.get_veff(mol, dm)
        e_tot, last_hf_e = mf.energy_tot(dm, h1e, vhf), e_tot

        delta_e = float(e_tot - last_hf_e)
        rms_ddm = float(np.sqrt(np.mean((dm - dm_last)**2)))
        conv_tol = conv_tol * 10
        conv_tol_density = conv_tol_density * 10
        scf_conv = abs(delta_e) < conv_tol and rms_ddm < conv_tol_density
        log.info('Extra cycle  E= %.15g  delta_E= %4.3g  rms(ddm)= %4.3g',
                 e_tot, delta_e, rms_ddm)

    log.timer('scf_cycle', *cput0)
    del log
    return scf_conv, e_tot, mo_energy, mo_coeff, mo_occ


@partial(jit, static_argnums=(2,3))
def _dot_eri_dm_s1(eri, dm, with_j, with_k):
    nao = dm.shape[-1]
    eri = eri.reshape((nao,)*4)
    dms = dm.reshape(-1,nao,nao)
    vj = vk = None
    if with_j:
        vj = np.einsum('ijkl,xji->xkl', eri, dms)
        vj = vj.reshape(dm.shape)
    if with_k:
        vk = np.einsum('ijkl,xjk->xil', eri, dms)
        vk = vk.reshape(dm.shape)
    return vj, vk


@partial(jit, static_argnums=(2,3))
def _dot_cderi_dm(cderi, dm, with_j, with_k):
    nao = dm.shape[-1]
    dms = dm.reshape(-1,nao,nao)
    vj = vk = None
    if with_j:
        rho = np.einsum('Lij,xji->xL', cderi, dms)
        vj = np.einsum('Lkl,xL->xkl', cderi, rho)
        vj = vj.reshape(dm.shape)
    if with_k:
        tmp = np.einsum('Lij,xjk->xLik', cderi, dms)
        vk = np.einsum('xLik,Lkl->xil', tmp, cderi)
        vk = vk.reshape(dm.shape)
    return vj, vk


def dot_eri_dm(eri, dm, hermi=0, with_j=True, with_k=True):
    dm = np.asarray(dm)
    nao = dm.shape[-1]
    if eri.size != nao**4:
        raise NotImplementedError('Only the full (s1) integral tensor is supported.')
    return _dot_eri_dm_s1(eri, dm, with_j, with_k)


@wraps(pyscf_hf.energy_elec)
def energy_elec(mf, dm=None, h1e=None, vhf=None):
    if dm is None:
        dm = mf.make_rdm1()
    if h1e is None:
        h1e = mf.get_hcore()
    if vhf is None:
        vhf = mf.get_veff(mf.mol, dm)
    e1 = np.einsum('ij,ji->', h1e, dm).real
    e_coul = np.einsum('ij,ji->', vhf, dm).real * .5
    mf.scf_summary['e1'] = e1
    mf.scf_summary['e2'] = e_coul
    logger.debug(mf, 'E1 = %s  E_coul = %s', e1, e_coul)
    return e1+e_coul, e_coul


@wraps(pyscf_hf.make_rdm1)
def make_rdm1(mo_coeff, mo_occ, **kwargs):
    mo_occ = numpy.asarray(ops.to_numpy(mo_occ))
    mocc = mo_coeff[:,mo_occ>0]
    dm = (mocc*np.asarray(mo_occ[mo_occ>0])) @ mocc.conj().T
    return dm


@wraps(pyscf_hf.level_shift)
def level_shift(s, d, f, factor):
    dm_vir = s - s @ d @ s
    return f + dm_vir * factor


def get_fock(mf, h1e=None, s1e=None, vhf=None, dm=None, cycle=-1, diis=None,
             diis_start_cycle=None, level_shift_factor=None, damp_factor=None,
             fock_last=None):
    if h1e is None:
        h1e = mf.get_hcore()
    if vhf is None:
        vhf = mf.get_veff(mf.mol, dm)
    f = h1e + vhf
    if cycle < 0 and diis is None:  # Not inside the SCF iteration
        return f

    if diis_start_cycle is None:
        diis_start_cycle = mf.diis_start_cycle
    if level_shift_factor is None:
        level_shift_factor = mf.level_shift
    if s1e is None:
        s1e = mf.get_ovlp()
    if dm is None:
        dm = mf.make_rdm1()

    if diis is not None and cycle >= diis_start_cycle:
        f = diis.update(s1e, dm, f, mf, h1e, vhf)
    if abs(level_shift_factor) > 1e-4:
        f = level_shift(s1e, dm*.5, f, level_shift_factor)
    return f


def canonical_orth(s, tol_lindep=1e-5):
    '''Canonical orthogonalization over the eigenvectors of the normalized
    overlap with eigenvalues above ``tol_lindep``.'''
    s = numpy.asarray(ops.to_numpy(s))
    normlz = numpy.power(numpy.diag(s), -0.5)
    snorm = normlz[:,None] * s * normlz
    sval, svec = scipy.linalg.eigh(snorm)
    idx = sval >= tol_lindep
    x = svec[:,idx] / numpy.sqrt(sval[idx])
    return normlz[:,None] * x


@jit
def _eig_orth(h, x):
    h_orth = x.conj().T @ h @ x
    e, c = np.linalg.eigh(h_orth)
    return e, x @ c


class SCF(pyscf_hf.SCF):
    """Subclass of :class:`pyscf.scf.hf.SCF` evaluated with backend tensors.

    Attributes
    ----------
    tol_lindep : float
        Overlap eigenvalues below this value are treated as linear
        dependencies and removed.
    conv_tol_density : float
        Threshold on the root mean square density change.
    damp_density : float
        Fraction of the new density kept in each cycle (1 means no damping).
    auxbasis : str
        Density-fitting basis. The full integral tensor is used when None.
    movecs_file : str
        File the orbitals are written to every ``writem`` cycles.
    """
    DIIS = SCF_DIIS

    _keys = {'tol_lindep', 'conv_tol_density', 'damp_density', 'auxbasis',
             'movecs_file', 'writem'}

    def __init__(self, mol, **kwargs):
        super().__init__(mol)
        self.chkfile = None
        self.direct_scf = False
        self.tol_lindep = 1e-5
        self.conv_tol = 1e-8
        self.conv_tol_density = 1e-7
        self.damp_density = 1.
        self.auxbasis = None
        self.movecs_file = None
        self.writem = 0
        self._cderi = None
        self._orth = None
        self.__dict__.update(kwargs)

    def reset(self, mol=None):
        super().reset(mol)
        self._cderi = None
        self._orth = None
        return self

    @property
    def nbf(self):
        '''Number of orbitals kept after removing linear dependencies.'''
        return self.get_orth().shape[1]

    def get_orth(self, s1e=None):
        if self._orth is None:
            if s1e is None:
                s1e = self.get_ovlp(self.mol)
            self._orth = np.asarray(canonical_orth(s1e, self.tol_lindep))
            nlindep = self.mol.nao - self._orth.shape[1]
            if nlindep > 0:
                logger.info(self, '%d linear dependencies removed (tol_lindep = %g)',
                            nlindep, self.tol_lindep)
        return self._orth

    def build_eri(self, mol=None):
        '''Compute the in-core two-electron integrals.'''
        if mol is None:
            mol = self.mol
        if self.auxbasis:
            if self._cderi is None:
                cderi = df_incore.cholesky_eri(mol, auxbasis=self.auxbasis,
                                               aosym='s2ij', verbose=self.verbose)
                self._cderi = np.asarray(pyscf_lib.unpack_tril(cderi))
                logger.info(self, 'density fitting with %s: %d auxiliary functions',
                            self.auxbasis, self._cderi.shape[0])
        elif self._eri is None:
            self._eri = np.asarray(mol.intor('int2e', aosym='s1'))
        return self

    def get_jk(self, mol=None, dm=None, hermi=1, with_j=True, with_k=True,
               omega=None):
        if mol is None:
            mol = self.mol
        if dm is None:
            dm = self.make_rdm1()
        if omega:
            raise NotImplementedError('Range-separated Coulomb is not supported.')
        self.build_eri(mol)
        dm = np.asarray(dm)
        if self.auxbasis:
            return _dot_cderi_dm(self._cderi, dm, with_j, with_k)
        return dot_eri_dm(self._eri, dm, hermi, with_j, with_k)

    def get_init_guess(self, mol=None, key='minao', **kwargs):
        if mol is None:
            mol = self.mol
        dm0 = super().get_init_guess(mol, key, **kwargs)
        dm0 = numpy.asarray(dm0) #remove tags
        return dm0

    def get_occ(self, mo_energy=None, mo_coeff=None):
        if mo_energy is None:
            mo_energy = self.mo_energy
        mo_energy = numpy.asarray(ops.to_numpy(mo_energy))
        if mo_coeff is not None:
            mo_coeff = numpy.asarray(ops.to_numpy(mo_coeff))
        return pyscf_hf.SCF.get_occ(self, mo_energy, mo_coeff)

    # pylint: disable=arguments-differ
    def kernel(self, dm0=None, **kwargs):
        self.dump_flags()
        self.build(self.mol)

        if self.max_cycle > 0 or self.mo_coeff is None:
            self.converged, self.e_tot, \
                    self.mo_energy, self.mo_coeff, self.mo_occ = \
                    kernel(self, self.conv_tol, self.conv_tol_density,
                           dm0=dm0, callback=self.callback,
                           conv_check=self.conv_check, **kwargs)
        else:
            self.e_tot = kernel(self, self.conv_tol, self.conv_tol_density,
                                dm0=dm0, callback=self.callback,
                                conv_check=self.conv_check, **kwargs)[1]

        self._finalize()
        return self.e_tot

    def eig(self, h, s):
        return _eig_orth(h, self.get_orth(s))

    @wraps(pyscf_hf.SCF.get_veff)
    def get_veff(self, mol=None, dm=None, dm_last=0, vhf_last=0, hermi=1):
        if mol is None:
            mol = self.mol
        if dm is None:
            dm = self.make_rdm1()
        vj, vk = self.get_jk(mol, dm, hermi=hermi)
        return vj - vk * .5

    def dump_chk(self, envs):
        cycle = envs.get('cycle', -1)
        if self.movecs_file and self.writem > 0 and (cycle+1) % self.writem == 0:
            chkfile.dump_scf(self.movecs_file,
                             envs['e_tot'], envs['mo_energy'],
                             envs['mo_coeff'], envs['mo_occ'])
        return self

    def get_fock_mo(self, mo_coeff=None):
        '''Fock matrix of the current density in the MO basis.'''
        if mo_coeff is None:
            mo_coeff = self.mo_coeff
        fock = self.get_fock(dm=self.make_rdm1())
        return mo_coeff.conj().T @ fock @ mo_coeff

    make_rdm1 = module_method(make_rdm1, absences=['mo_coeff', 'mo_occ'])
    energy_elec = energy_elec
    get_fock = get_fock


class RHF(SCF, pyscf_hf.RHF):
    @wraps(pyscf_hf.RHF.check_sanity)
    def check_sanity(self):
        mol = self.mol
        if mol.nelectron != 1 and mol.spin != 0:
            logger.warn(self, 'Invalid number of electrons %d for RHF method.',
                        mol.nelectron)
        return SCF.check_sanity(self)
