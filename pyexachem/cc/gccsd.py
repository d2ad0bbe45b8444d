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
Spin-orbital CCSD for unrestricted references.

Spin orbitals are ordered occupied alpha, occupied beta, virtual alpha,
virtual beta. The antisymmetrized integrals in physicists' notation,
``<pq||rs> = (pr|qs) - (ps|qr)``, are assembled from the alpha and beta
MO Cholesky vectors.
"""
from typing import NamedTuple
import numpy
from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.ops import jit
from pyexachem.lib import logger
from pyexachem.cc import ccsd
from pyexachem.cc import gintermediates as imd

class _PhysicistsERIs(NamedTuple):
    fock: object
    mo_energy: object
    oooo: object
    ooov: object
    oovv: object
    ovov: object
    ovvo: object
    ovvv: object
    vvvv: object

def spin_orbital_index(nocca, noccb, nmo):
    '''Spin-orbital positions of the alpha and beta spatial orbitals.'''
    nvira, nvirb = nmo - nocca, nmo - noccb
    nocc = nocca + noccb
    idxa = numpy.hstack((numpy.arange(nocca), nocc + numpy.arange(nvira)))
    idxb = numpy.hstack((nocca + numpy.arange(noccb),
                         nocc + nvira + numpy.arange(nvirb)))
    return idxa, idxb

def spatial2spin(tensors, nocca, noccb):
    '''Embed ``(alpha, beta)`` matrices (optionally with a trailing
    Cholesky index) in the spin-orbital basis.'''
    mat_a, mat_b = tensors[0], tensors[1]
    nmo = mat_a.shape[0]
    idxa, idxb = spin_orbital_index(nocca, noccb, nmo)
    nso = 2 * nmo
    out = np.zeros((nso, nso) + tuple(mat_a.shape[2:]), dtype=mat_a.dtype)
    out = ops.index_update(out, ops.index[idxa[:,None],idxa], mat_a)
    out = ops.index_update(out, ops.index[idxb[:,None],idxb], mat_b)
    return out

def make_eris(cholVpr, fock, nocca, noccb):
    '''Antisymmetrized integral blocks from ``(2, p, q, K)`` Cholesky vectors.'''
    chol_so = spatial2spin(cholVpr, nocca, noccb)
    fock_so = spatial2spin(fock, nocca, noccb)
    nocc = nocca + noccb
    eri = np.einsum('pqK,rsK->pqrs', chol_so, chol_so)
    eri = eri.transpose(0,2,1,3) - eri.transpose(0,2,3,1)
    o = slice(0, nocc)
    v = slice(nocc, None)
    return _PhysicistsERIs(fock=fock_so,
                           mo_energy=np.diagonal(fock_so).real,
                           oooo=eri[o,o,o,o],
                           ooov=eri[o,o,o,v],
                           oovv=eri[o,o,v,v],
                           ovov=eri[o,v,o,v],
                           ovvo=eri[o,v,v,o],
                           ovvv=eri[o,v,v,v],
                           vvvv=eri[v,v,v,v])

def update_amps(t1, t2, eris, level_shift=0.):
    nocc, nvir = t1.shape
    fock = eris.fock

    fov = fock[:nocc,nocc:]
    mo_e_o = eris.mo_energy[:nocc]
    mo_e_v = eris.mo_energy[nocc:] + level_shift

    tau = imd.make_tau(t2, t1, t1)

    Fvv = imd.cc_Fvv(t1, t2, eris)
    Foo = imd.cc_Foo(t1, t2, eris)
    Fov = imd.cc_Fov(t1, t2, eris)
    Woooo = imd.cc_Woooo(t1, t2, eris)
    Wvvvv = imd.cc_Wvvvv(t1, t2, eris)
    Wovvo = imd.cc_Wovvo(t1, t2, eris)

    # Move energy terms to the other side
    Fvv = Fvv - np.diag(mo_e_v)
    Foo = Foo - np.diag(mo_e_o)

    # T1 equation
    t1new  =  np.einsum('ie,ae->ia', t1, Fvv)
    t1new += -np.einsum('ma,mi->ia', t1, Foo)
    t1new +=  np.einsum('imae,me->ia', t2, Fov)
    t1new += -np.einsum('nf,naif->ia', t1, eris.ovov)
    t1new += -0.5*np.einsum('imef,maef->ia', t2, eris.ovvv)
    t1new += -0.5*np.einsum('mnae,mnie->ia', t2, eris.ooov)
    t1new += fov.conj()

    # T2 equation
    Ftmp = Fvv - 0.5*np.einsum('mb,me->be', t1, Fov)
    tmp = np.einsum('ijae,be->ijab', t2, Ftmp)
    t2new = tmp - tmp.transpose(0,1,3,2)
    Ftmp = Foo + 0.5*np.einsum('je,me->mj', t1, Fov)
    tmp = np.einsum('imab,mj->ijab', t2, Ftmp)
    t2new -= tmp - tmp.transpose(1,0,2,3)
    t2new += eris.oovv.conj()
    t2new += 0.5*np.einsum('mnab,mnij->ijab', tau, Woooo)
    t2new += 0.5*np.einsum('ijef,abef->ijab', tau, Wvvvv)
    tmp = np.einsum('imae,mbej->ijab', t2, Wovvo)
    tmp -= -np.einsum('ie,ma,mbje->ijab', t1, t1, eris.ovov)
    tmp = tmp - tmp.transpose(1,0,2,3)
    tmp = tmp - tmp.transpose(0,1,3,2)
    t2new += tmp
    tmp = np.einsum('ie,jeba->ijab', t1, eris.ovvv.conj())
    t2new += (tmp - tmp.transpose(1,0,2,3))
    tmp = np.einsum('ma,ijmb->ijab', t1, eris.ooov.conj())
    t2new -= (tmp - tmp.transpose(0,1,3,2))

    eia = mo_e_o[:,None] - mo_e_v
    eijab = eia[:,None,:,None] + eia[None,:,None,:]
    t1new /= eia
    t2new /= eijab
    return t1new, t2new

def energy(t1, t2, eris):
    nocc, nvir = t1.shape
    fock = eris.fock
    e = np.einsum('ia,ia', fock[:nocc,nocc:], t1)
    eris_oovv = eris.oovv
    e += 0.25*np.einsum('ijab,ijab', t2, eris_oovv)
    e += 0.5 *np.einsum('ia,jb,ijab', t1, t1, eris_oovv)
    return e.real

_update_amps_jit = jit(update_amps)
_energy_jit = jit(energy)


class GCCSD(ccsd.CCSD):
    """Spin-orbital CCSD from alpha and beta MO Cholesky vectors.

    Parameters
    ----------
    mf : :class:`pyexachem.scf.uhf.UHF`
    cholVpr : (2, nmo, nmo, K) array
    fock : (2, nmo, nmo) array
    nocc : tuple
        Correlated ``(alpha, beta)`` occupied orbitals.
    """
    _keys = {'nocca', 'noccb'}

    def __init__(self, mf, cholVpr, fock, nocc, **kwargs):
        self.nocca, self.noccb = nocc
        nmo = fock[0].shape[0]
        ccsd.CCSD.__init__(self, mf, cholVpr, fock,
                           self.nocca + self.noccb, 2 * nmo, **kwargs)

    def ao2mo(self, mo_coeff=None):
        log = logger.new_logger(self)
        cput0 = log.get_t0()
        eris = make_eris(self.cholVpr, self.fock, self.nocca, self.noccb)
        log.timer('GCCSD integral assembly', *cput0)
        return eris

    def init_amps(self, eris=None):
        log = logger.new_logger(self)
        if eris is None:
            eris = self.ao2mo()
        e_hf = self.e_hf
        if e_hf is None:
            e_hf = float(self._scf.e_tot)
        mo_e = eris.mo_energy
        nocc = self.nocc
        eia = mo_e[:nocc,None] - mo_e[None,nocc:]
        eijab = eia[:,None,:,None] + eia[None,:,None,:]
        t1 = eris.fock[:nocc,nocc:] / eia
        t2 = eris.oovv.conj() / eijab
        self.emp2 = float(0.25*np.einsum('ijab,ijab', t2, eris.oovv.conj()).real)
        log.info('Init t2, MP2 energy = %.15g  E_corr(MP2) %.15g',
                 e_hf + self.emp2, self.emp2)
        log.timer('init mp2')
        return self.emp2, t1, t2

    def update_amps(self, t1, t2, eris):
        fn = self._jitted(update_amps, _update_amps_jit)
        return fn(t1, t2, eris, self.level_shift)

    def energy(self, t1=None, t2=None, eris=None):
        if t1 is None:
            t1 = self.t1
        if t2 is None:
            t2 = self.t2
        if eris is None:
            eris = self.ao2mo()
        return float(self._jitted(energy, _energy_jit)(t1, t2, eris))
