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
Intermediates for restricted CCSD.
'''
from pyexachem import numpy as np

# This is restricted (R)CCSD
# Ref: Hirata et al., J. Chem. Phys. 120, 2581 (2004)

### Eqs. (37)-(39) "kappa"

def cc_Foo(t1, t2, eris):
    nocc, nvir = t1.shape
    foo = eris.fock[:nocc,:nocc]
    eris_ovov = eris.ovov
    Fki  = 2*np.einsum('kcld,ilcd->ki', eris_ovov, t2)
    Fki -=   np.einsum('kdlc,ilcd->ki', eris_ovov, t2)
    Fki += 2*np.einsum('kcld,ic,ld->ki', eris_ovov, t1, t1)
    Fki -=   np.einsum('kdlc,ic,ld->ki', eris_ovov, t1, t1)
    Fki += foo
    return Fki

def cc_Fvv(t1, t2, eris):
    nocc, nvir = t1.shape
    fvv = eris.fock[nocc:,nocc:]
    eris_ovov = eris.ovov
    Fac  =-2*np.einsum('kcld,klad->ac', eris_ovov, t2)
    Fac +=   np.einsum('kdlc,klad->ac', eris_ovov, t2)
    Fac -= 2*np.einsum('kcld,ka,ld->ac', eris_ovov, t1, t1)
    Fac +=   np.einsum('kdlc,ka,ld->ac', eris_ovov, t1, t1)
    Fac += fvv
    return Fac

def cc_Fov(t1, t2, eris):
    nocc, nvir = t1.shape
    fov = eris.fock[:nocc,nocc:]
    eris_ovov = eris.ovov
    Fkc  = 2*np.einsum('kcld,ld->kc', eris_ovov, t1)
    Fkc -=   np.einsum('kdlc,ld->kc', eris_ovov, t1)
    Fkc += fov
    return Fkc

### Eqs. (40)-(41) "lambda"

def Loo(t1, t2, eris):
    nocc, nvir = t1.shape
    fov = eris.fock[:nocc,nocc:]
    Lki = cc_Foo(t1, t2, eris) + np.einsum('kc,ic->ki',fov, t1)
    eris_ovoo = eris.ovoo
    Lki += 2*np.einsum('lcki,lc->ki', eris_ovoo, t1)
    Lki -=   np.einsum('kcli,lc->ki', eris_ovoo, t1)
    return Lki

def Lvv(t1, t2, eris):
    nocc, nvir = t1.shape
    fov = eris.fock[:nocc,nocc:]
    Lac = cc_Fvv(t1, t2, eris) - np.einsum('kc,ka->ac',fov, t1)
    eris_ovvv = eris.ovvv
    Lac += 2*np.einsum('kdac,kd->ac', eris_ovvv, t1)
    Lac -=   np.einsum('kcad,kd->ac', eris_ovvv, t1)
    return Lac

### Eqs. (42)-(45) "chi"

def cc_Woooo(t1, t2, eris):
    eris_ovoo = eris.ovoo
    Wklij  = np.einsum('lcki,jc->klij', eris_ovoo, t1)
    Wklij += np.einsum('kclj,ic->klij', eris_ovoo, t1)
    eris_ovov = eris.ovov
    Wklij += np.einsum('kcld,ijcd->klij', eris_ovov, t2)
    Wklij += np.einsum('kcld,ic,jd->klij', eris_ovov, t1, t1)
    Wklij += eris.oooo.transpose(0,2,1,3)
    return Wklij

def cc_Wvvvv(t1, t2, eris):
    eris_ovvv = eris.ovvv
    Wabcd  = np.einsum('kdac,kb->abcd', eris_ovvv,-t1)
    Wabcd -= np.einsum('kcbd,ka->abcd', eris_ovvv, t1)
    Wabcd += eris.vvvv.transpose(0,2,1,3)
    return Wabcd

def cc_Wvoov(t1, t2, eris):
    eris_ovvv = eris.ovvv
    eris_ovoo = eris.ovoo
    Wakic  = np.einsum('kcad,id->akic', eris_ovvv, t1)
    Wakic -= np.einsum('kcli,la->akic', eris_ovoo, t1)
    Wakic += eris.ovvo.transpose(2,0,3,1)
    eris_ovov = eris.ovov
    Wakic -= 0.5*np.einsum('ldkc,ilda->akic', eris_ovov, t2)
    Wakic -= 0.5*np.einsum('lckd,ilad->akic', eris_ovov, t2)
    Wakic -= np.einsum('ldkc,id,la->akic', eris_ovov, t1, t1)
    Wakic += np.einsum('ldkc,ilad->akic', eris_ovov, t2)
    return Wakic

def cc_Wvovo(t1, t2, eris):
    eris_ovvv = eris.ovvv
    eris_ovoo = eris.ovoo
    Wakci  = np.einsum('kdac,id->akci', eris_ovvv, t1)
    Wakci -= np.einsum('lcki,la->akci', eris_ovoo, t1)
    Wakci += eris.oovv.transpose(2,0,3,1)
    eris_ovov = eris.ovov
    Wakci -= 0.5*np.einsum('lckd,ilda->akci', eris_ovov, t2)
    Wakci -= np.einsum('lckd,id,la->akci', eris_ovov, t1, t1)
    return Wakci
