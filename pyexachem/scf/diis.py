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

import numpy
from pyscf import lib
from pyscf.scf import diis as pyscf_cdiis
from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.ops import jit
from pyexachem.lib import logger

class CDIIS(pyscf_cdiis.CDIIS):
    """Commutator DIIS on backend Fock matrices.

    The error vector ``SDF - FDS`` is built with the tensor backend,
    the extrapolation itself is done by :class:`pyscf.lib.diis.DIIS`.
    """
    def __init__(self, mf=None, filename=None, Corth=None):
        pyscf_cdiis.CDIIS.__init__(self, mf=mf, filename=filename, Corth=Corth)
        self.incore = True

    def update(self, s, d, f, *args, **kwargs):
        errvec = ops.to_numpy(get_err_vec(s, d, f))
        logger.debug1(self, 'diis-norm(errvec)=%g', numpy.linalg.norm(errvec))
        xnew = lib.diis.DIIS.update(self, ops.to_numpy(f), xerr=errvec)
        return np.asarray(xnew)

@jit
def get_err_vec(s, d, f):
    def _get_errvec(d, f):
        sdf = s @ d @ f
        return (sdf.conj().T - sdf).ravel()

    if f.ndim == 2:
        errvec = _get_errvec(d, f)
    elif f.ndim == 3 and f.shape[0] == 2:  # for UHF
        errvec = np.hstack((_get_errvec(d[0], f[0]), _get_errvec(d[1], f[1])))
    else:
        raise RuntimeError('Unknown SCF DIIS type')
    return errvec

SCF_DIIS = DIIS = CDIIS
