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

import pytest
from pyscf import scf as pyscf_scf
from pyscf import mp as pyscf_mp
from pyexachem.mp import cd_mp2_driver
from pyexachem.gto import build_mol

@pytest.mark.parametrize('frozen', [0, 1])
def test_rmp2(make_options, frozen):
    options_map = make_options('H2O', basis='6-31g', cd={'diagtol': 1e-10},
                               cc={'freeze': {'core': frozen}})
    sys_data, e_corr = cd_mp2_driver(options_map)

    mf = pyscf_scf.RHF(build_mol(options_map, options_map.geometry))
    mf.conv_tol = 1e-11
    mf.kernel()
    e_ref = pyscf_mp.MP2(mf, frozen=frozen or None).kernel()[0]
    assert abs(e_corr - e_ref) < 1e-7
    assert sys_data.results['output']['MP2']['energy']['correlation'] == e_corr

def test_ump2(make_options):
    options_map = make_options('OH', cd={'diagtol': 1e-10},
                               scf={'scf_type': 'unrestricted', 'multiplicity': 2})
    _, e_corr = cd_mp2_driver(options_map)

    mf = pyscf_scf.UHF(build_mol(options_map, options_map.geometry))
    mf.conv_tol = 1e-11
    mf.kernel()
    e_ref = pyscf_mp.UMP2(mf).kernel()[0]
    assert abs(e_corr - e_ref) < 1e-6
