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

'''
Intermediates for spin-orbital CCSD.
'''
from pyexachem import numpy as np

# Ref: Stanton and Gauss, J. Chem. Phys. 94, 4334 (1991)

def make_tau(t2, t1a, t1b, fac=1):
    t1t1 = np.einsum('ia,jb->ijab', fac*0.5*t1a, t1b)
    t1t1 = t1t1 - t1t1.transpose(1,0,2,3)
    tau1 = t1t1 - t1t1.transpose(0,1,3,2)
    tau1 += t2
    return tau1

def cc_Fvv(t1, t2, eris):
    nocc, nvir = t1.shape
    fov = eris.fock[:nocc,nocc:]
    fvv = eris.fock[nocc:,nocc:]
    eris_vovv = eris.ovvv.transpose(1,0,3,2)
    tau_tilde = make_tau(t2, t1, t1,fac=0.5)
    Fae = fvv - 0.5*np.einsum('me,ma->ae',fov, t1)
    Fae += np.einsum('mf,amef->ae', t1, eris_vovv)
    Fae -= 0.5*np.einsum('mnaf,mnef->ae', tau_tilde, eris.oovv)
    return Fae

def cc_Foo(t1, t2, eris):
    nocc, nvir = t1.shape
    fov = eris.fock[:nocc,nocc:]
    foo = eris.fock[:nocc,:nocc]
    tau_tilde = make_tau(t2, t1, t1,fac=0.5)
    Fmi = ( foo + 0.5*np.einsum('me,ie->mi',fov, t1)
            + np.einsum('ne,mnie->mi', t1, eris.ooov)
            + 0.5*np.einsum('inef,mnef->mi', tau_tilde, eris.oovv) )
    return Fmi

def cc_Fov(t1, t2, eris):
    nocc, nvir = t1.shape
    fov = eris.fock[:nocc,nocc:]
    Fme = fov + np.einsum('nf,mnef->me', t1, eris.oovv)
    return Fme

def cc_Woooo(t1, t2, eris):
    tau = make_tau(t2, t1, t1)
    tmp = np.einsum('je,mnie->mnij', t1, eris.ooov)
    Wmnij = eris.oooo + tmp - tmp.transpose(0,1,3,2)
    Wmnij += 0.25*np.einsum('ijef,mnef->mnij', tau, eris.oovv)
    return Wmnij

def cc_Wvvvv(t1, t2, eris):
    tau = make_tau(t2, t1, t1)
    tmp = np.einsum('mb,mafe->bafe', t1, eris.ovvv)
    Wabef = eris.vvvv - tmp + tmp.transpose(1,0,2,3)
    Wabef += np.einsum('mnab,mnef->abef', tau, 0.25*eris.oovv)
    return Wabef

def cc_Wovvo(t1, t2, eris):
    eris_ovvo = -eris.ovov.transpose(0,1,3,2)
    eris_oovo = -eris.ooov.transpose(0,1,3,2)
    Wmbej  = np.einsum('jf,mbef->mbej', t1, eris.ovvv)
    Wmbej -= np.einsum('nb,mnej->mbej', t1, eris_oovo)
    Wmbej -= 0.5*np.einsum('jnfb,mnef->mbej', t2, eris.oovv)
    Wmbej -= np.einsum('jf,nb,mnef->mbej', t1, t1, eris.oovv)
    Wmbej += eris_ovvo
    return Wmbej
