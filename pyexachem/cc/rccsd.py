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
Closed-shell CCSD on Cholesky-decomposed integrals.

The integral blocks in chemists' notation, e.g.
``ovov[i,a,j,b] = (ia|jb) = sum_K B[i,a,K] B[j,b,K]``,
are assembled from the MO Cholesky vectors ``B``.
"""
from typing import NamedTuple
from pyexachem import numpy as np
from pyexachem.ops import jit
from pyexachem.lib import logger
from pyexachem.cc import ccsd
from pyexachem.cc import rintermediates as imd

class _ChemistsERIs(NamedTuple):
    fock: object
    mo_energy: object
    oooo: object
    ovoo: object
    ovov: object
    oovv: object
    ovvo: object
    ovvv: object
    vvvv: object

def make_eris(cholVpr, fock, nocc):
    '''Integral blocks from ``(p, q, K)`` Cholesky vectors.'''
    o = slice(0, nocc)
    v = slice(nocc, None)

    def block(s1, s2, s3, s4):
        return np.einsum('pqK,rsK->pqrs', cholVpr[s1,s2], cholVpr[s3,s4])

    fock = np.asarray(fock)
    return _ChemistsERIs(fock=fock,
                         mo_energy=np.diagonal(fock).real,
                         oooo=block(o, o, o, o),
                         ovoo=block(o, v, o, o),
                         ovov=block(o, v, o, v),
                         oovv=block(o, o, v, v),
                         ovvo=block(o, v, v, o),
                         ovvv=block(o, v, v, v),
                         vvvv=block(v, v, v, v))

def update_amps(t1, t2, eris, level_shift=0.):
    nocc, nvir = t1.shape
    mo_e_o = eris.mo_energy[:nocc]
    mo_e_v = eris.mo_energy[nocc:] + level_shift
    mo_oo = np.diag(mo_e_o)
    mo_vv = np.diag(mo_e_v)

    t1new, t2new = amplitude_equation(t1, t2, eris)
    # Move energy terms to the other side
    t1new +=   np.einsum('ac,ic->ia', -mo_vv, t1)
    t1new +=  -np.einsum('ki,ka->ia', -mo_oo, t1)
    tmp = np.einsum('ac,ijcb->ijab', -mo_vv, t2)
    t2new += tmp + tmp.transpose(1,0,3,2)
    tmp = np.einsum('ki,kjab->ijab', -mo_oo, t2)
    t2new -= tmp + tmp.transpose(1,0,3,2)

    eia = mo_e_o[:,None] - mo_e_v
    eijab = eia[:,None,:,None] + eia[None,:,None,:]
    t1new /= eia
    t2new /= eijab
    return t1new, t2new

def amplitude_equation(t1, t2, eris):
    nocc, nvir = t1.shape
    fock = eris.fock
    fov = fock[:nocc,nocc:]

    Foo = imd.cc_Foo(t1,t2,eris)
    Fvv = imd.cc_Fvv(t1,t2,eris)
    Fov = imd.cc_Fov(t1,t2,eris)

    # T1 equation
    t1new  =-2*np.einsum('kc,ka,ic->ia', fov, t1, t1)
    t1new +=   np.einsum('ac,ic->ia', Fvv, t1)
    t1new +=  -np.einsum('ki,ka->ia', Foo, t1)
    t1new += 2*np.einsum('kc,kica->ia', Fov, t2)
    t1new +=  -np.einsum('kc,ikca->ia', Fov, t2)
    t1new +=   np.einsum('kc,ic,ka->ia', Fov, t1, t1)
    t1new += fov.conj()
    t1new += 2*np.einsum('kcai,kc->ia', eris.ovvo, t1)
    t1new +=  -np.einsum('kiac,kc->ia', eris.oovv, t1)
    eris_ovvv = eris.ovvv
    t1new += 2*np.einsum('kdac,ikcd->ia', eris_ovvv, t2)
    t1new +=  -np.einsum('kcad,ikcd->ia', eris_ovvv, t2)
    t1new += 2*np.einsum('kdac,kd,ic->ia', eris_ovvv, t1, t1)
    t1new +=  -np.einsum('kcad,kd,ic->ia', eris_ovvv, t1, t1)
    eris_ovoo = eris.ovoo
    t1new +=-2*np.einsum('lcki,klac->ia', eris_ovoo, t2)
    t1new +=   np.einsum('kcli,klac->ia', eris_ovoo, t2)
    t1new +=-2*np.einsum('lcki,lc,ka->ia', eris_ovoo, t1, t1)
    t1new +=   np.einsum('kcli,lc,ka->ia', eris_ovoo, t1, t1)

    # T2 equation
    tmp2  = np.einsum('kibc,ka->abic', eris.oovv, -t1)
    tmp2 += eris_ovvv.conj().transpose(1,3,0,2)
    tmp = np.einsum('abic,jc->ijab', tmp2, t1)
    t2new = tmp + tmp.transpose(1,0,3,2)
    tmp2  = np.einsum('kcai,jc->akij', eris.ovvo, t1)
    tmp2 += eris_ovoo.transpose(1,3,0,2).conj()
    tmp = np.einsum('akij,kb->ijab', tmp2, t1)
    t2new -= tmp + tmp.transpose(1,0,3,2)
    t2new += eris.ovov.conj().transpose(0,2,1,3)

    Loo = imd.Loo(t1, t2, eris)
    Lvv = imd.Lvv(t1, t2, eris)

    Woooo = imd.cc_Woooo(t1, t2, eris)
    Wvoov = imd.cc_Wvoov(t1, t2, eris)
    Wvovo = imd.cc_Wvovo(t1, t2, eris)
    Wvvvv = imd.cc_Wvvvv(t1, t2, eris)

    tau = t2 + np.einsum('ia,jb->ijab', t1, t1)
    t2new += np.einsum('klij,klab->ijab', Woooo, tau)
    t2new += np.einsum('abcd,ijcd->ijab', Wvvvv, tau)
    tmp = np.einsum('ac,ijcb->ijab', Lvv, t2)
    t2new += tmp + tmp.transpose(1,0,3,2)
    tmp = np.einsum('ki,kjab->ijab', Loo, t2)
    t2new -= tmp + tmp.transpose(1,0,3,2)
    tmp  = 2.*np.einsum('akic,kjcb->ijab', Wvoov, t2)
    tmp -=   np.einsum('akci,kjcb->ijab', Wvovo, t2)
    t2new += tmp + tmp.transpose(1,0,3,2)
    tmp = np.einsum('akic,kjbc->ijab', Wvoov, t2)
    t2new -= tmp + tmp.transpose(1,0,3,2)
    tmp = np.einsum('bkci,kjac->ijab', Wvovo, t2)
    t2new -= tmp + tmp.transpose(1,0,3,2)
    return t1new, t2new

def energy(t1, t2, eris):
    nocc, nvir = t1.shape
    fov = eris.fock[:nocc,nocc:]
    e = 2*np.einsum('ia,ia', fov, t1)
    tau  = np.einsum('ia,jb->ijab', t1, t1)
    tau += t2
    eris_ovov = eris.ovov
    e += 2*np.einsum('ijab,iajb', tau, eris_ovov)
    e +=  -np.einsum('ijab,ibja', tau, eris_ovov)
    return e.real

_update_amps_jit = jit(update_amps)
_energy_jit = jit(energy)


class RCCSD(ccsd.CCSD):
    """Closed-shell CCSD from MO Cholesky vectors.

    Parameters
    ----------
    mf : :class:`pyexachem.scf.hf.RHF`
    cholVpr : (nmo, nmo, K) array
        Cholesky vectors of the correlated orbitals.
    fock : (nmo, nmo) array
        Fock matrix of the correlated orbitals.
    nocc : int
        Number of correlated occupied orbitals.
    """
    def __init__(self, mf, cholVpr, fock, nocc, **kwargs):
        nmo = fock.shape[0]
        ccsd.CCSD.__init__(self, mf, cholVpr, fock, nocc, nmo, **kwargs)

    def ao2mo(self, mo_coeff=None):
        log = logger.new_logger(self)
        cput0 = log.get_t0()
        eris = make_eris(self.cholVpr, self.fock, self.nocc)
        log.timer('CCSD integral assembly', *cput0)
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

        t1 = eris.fock[:nocc,nocc:] / eia
        eris_ovov = eris.ovov
        t2 = (eris_ovov.transpose(0,2,1,3).conj()
              / (eia[:,None,:,None] + eia[None,:,None,:]))
        emp2  = 2 * np.einsum('ijab,iajb', t2, eris_ovov)
        emp2 -=     np.einsum('jiab,iajb', t2, eris_ovov)
        self.emp2 = float(emp2.real)

        log.info('Init t2, MP2 energy = %.15g  E_corr(MP2) %.15g',
                 e_hf + self.emp2, self.emp2)
        log.timer('init mp2')
        del log
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
