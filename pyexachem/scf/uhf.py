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

from functools import wraps
import numpy
from pyscf.lib import module_method
from pyscf.scf import uhf as pyscf_uhf
from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.lib import logger
from pyexachem.scf import hf


@wraps(pyscf_uhf.get_fock)
def get_fock(mf, h1e=None, s1e=None, vhf=None, dm=None, cycle=-1, diis=None,
             diis_start_cycle=None, level_shift_factor=None, damp_factor=None,
             fock_last=None):
    if h1e is None:
        h1e = mf.get_hcore()
    if vhf is None:
        vhf = mf.get_veff(mf.mol, dm)
    f = np.asarray(h1e) + vhf
    if f.ndim == 2:
        f = np.array((f, f))
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

    if isinstance(level_shift_factor, (tuple, list, numpy.ndarray)):
        shifta, shiftb = level_shift_factor
    else:
        shifta = shiftb = level_shift_factor

    if getattr(dm, 'ndim', None) == 2:
        dm = np.array((dm*.5, dm*.5))
    if diis and cycle >= diis_start_cycle:
        f = diis.update(s1e, dm, f, mf, h1e, vhf)
    if abs(shifta)+abs(shiftb) > 1e-4:
        f = (hf.level_shift(s1e, dm[0], f[0], shifta),
             hf.level_shift(s1e, dm[1], f[1], shiftb))
    return np.array(f)


@wraps(pyscf_uhf.energy_elec)
def energy_elec(mf, dm=None, h1e=None, vhf=None):
    if dm is None:
        dm = mf.make_rdm1()
    if h1e is None:
        h1e = mf.get_hcore()
    if getattr(dm, 'ndim', None) == 2:
        dm = np.array((dm*.5, dm*.5))
    if vhf is None:
        vhf = mf.get_veff(mf.mol, dm)
    if h1e[0].ndim < dm[0].ndim:  # get [0] because h1e and dm may not be ndarrays
        h1e = (h1e, h1e)
    e1 = np.einsum('ij,ji->', h1e[0], dm[0])
    e1+= np.einsum('ij,ji->', h1e[1], dm[1])
    e_coul =(np.einsum('ij,ji->', vhf[0], dm[0]) +
             np.einsum('ij,ji->', vhf[1], dm[1])) * .5
    e_elec = (e1 + e_coul).real
    mf.scf_summary['e1'] = e1.real
    mf.scf_summary['e2'] = e_coul.real
    logger.debug(mf, 'E1 = %s  Ecoul = %s', e1, e_coul.real)
    return e_elec, e_coul


@wraps(pyscf_uhf.make_rdm1)
def make_rdm1(mo_coeff, mo_occ, **kwargs):
    mo_occ = np.asarray(ops.to_numpy(mo_occ))
    mo_a = mo_coeff[0]
    mo_b = mo_coeff[1]

    dm_a = np.dot(mo_a*mo_occ[0], mo_a.conj().T)
    dm_b = np.dot(mo_b*mo_occ[1], mo_b.conj().T)
    return np.array((dm_a, dm_b))


class UHF(hf.SCF, pyscf_uhf.UHF):
    """Unrestricted Hartree-Fock. Orbitals and densities carry a leading
    spin axis of length 2."""
    def eig(self, h, s):
        x = self.get_orth(s)
        e_a, c_a = hf._eig_orth(h[0], x)
        e_b, c_b = hf._eig_orth(h[1], x)
        return np.array((e_a,e_b)), np.array((c_a,c_b))

    @wraps(pyscf_uhf.UHF.get_veff)
    def get_veff(self, mol=None, dm=None, dm_last=0, vhf_last=0, hermi=1):
        if mol is None:
            mol = self.mol
        if dm is None:
            dm = self.make_rdm1()
        if getattr(dm, 'ndim', None) == 2:
            dm = np.asarray((dm*.5,dm*.5))
        vj, vk = self.get_jk(mol, dm, hermi)
        vhf = vj[0] + vj[1] - vk
        return vhf

    def get_occ(self, mo_energy=None, mo_coeff=None):
        if mo_energy is None:
            mo_energy = self.mo_energy
        mo_energy = numpy.asarray(ops.to_numpy(mo_energy))
        if mo_coeff is not None:
            mo_coeff = numpy.asarray(ops.to_numpy(mo_coeff))
        return pyscf_uhf.UHF.get_occ(self, mo_energy, mo_coeff)

    def spin_square(self, mo_coeff=None, s=None):
        if mo_coeff is None:
            mo_occ = numpy.asarray(ops.to_numpy(self.mo_occ))
            mo_a, mo_b = numpy.asarray(ops.to_numpy(self.mo_coeff))
            mo_coeff = (mo_a[:,mo_occ[0]>0], mo_b[:,mo_occ[1]>0])
        if s is None:
            s = self.get_ovlp()
        return pyscf_uhf.spin_square(mo_coeff, s)

    def get_fock_mo(self, mo_coeff=None):
        if mo_coeff is None:
            mo_coeff = self.mo_coeff
        fock = self.get_fock(dm=self.make_rdm1())
        return np.array([mo_coeff[s].conj().T @ fock[s] @ mo_coeff[s] for s in range(2)])

    get_fock = get_fock
    make_rdm1 = module_method(make_rdm1, absences=['mo_coeff', 'mo_occ'])
    energy_elec = energy_elec
