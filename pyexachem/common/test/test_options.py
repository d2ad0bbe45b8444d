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

import io
import pytest
from pyexachem.lib import logger
from pyexachem.common.options import (
    CCSDOptions,
    CommonOptions,
    CDOptions,
    SCFOptions,
    TaskOptions,
    OptionsMap,
)

def test_defaults():
    opts = OptionsMap()
    assert opts.scf_options.conve == 1e-8
    assert opts.scf_options.scf_type == 'restricted'
    assert opts.cd_options.max_cvecs == 12
    assert opts.ccsd_options.ndiis == 5
    assert opts.ccsd_options.basis == 'sto-3g'
    assert opts.task_options.task() == 'scf'

def test_unknown_key():
    with pytest.raises(KeyError):
        SCFOptions.from_dict({'convergence': 1e-6})

def test_wrong_type():
    with pytest.raises(ValueError):
        SCFOptions.from_dict({'charge': 'one'})
    with pytest.raises(ValueError):
        CDOptions.from_dict({'write_cv': 1})
    with pytest.raises(ValueError):
        SCFOptions.from_dict({'diis_hist': 1.5})
    opts = SCFOptions.from_dict({'conve': 1})
    assert opts.conve == 1

def test_scf_sanity():
    with pytest.raises(ValueError):
        SCFOptions.from_dict({'multiplicity': 3})
    opts = SCFOptions.from_dict({'multiplicity': 3, 'scf_type': 'Unrestricted'})
    assert opts.scf_type == 'unrestricted'
    with pytest.raises(ValueError):
        SCFOptions.from_dict({'noscf': True})

def test_ccsd_freeze():
    opts = CCSDOptions.from_dict({'ndiis': 8, 'freeze': {'core': 2, 'virtual': 1}})
    assert opts.freeze_core == 2
    assert opts.freeze_virtual == 1
    assert opts.writet_iter == 0
    assert opts.write_interval() == 8
    with pytest.raises(KeyError):
        CCSDOptions.from_dict({'freeze': {'inner': 1}})

def test_single_task():
    assert TaskOptions.from_dict({'ccsd': True}).task() == 'ccsd'
    with pytest.raises(ValueError):
        TaskOptions.from_dict({'ccsd': True, 'fci': True})

def test_write_interval_follows_ndiis():
    opts = CCSDOptions.from_dict({'ndiis': 4})
    assert opts.write_interval() == 4
    opts.ndiis = 7
    assert opts.write_interval() == 7
    opts = CCSDOptions.from_dict({'ndiis': 4, 'writet_iter': 2})
    opts.ndiis = 7
    assert opts.write_interval() == 2

def test_case_insensitive_choices():
    opts = CommonOptions.from_dict({'gaussian_type': 'Cartesian', 'geom_units': 'BOHR'})
    assert opts.gaussian_type == 'cartesian'
    assert opts.geom_units == 'bohr'
    with pytest.raises(ValueError):
        CommonOptions.from_dict({'gaussian_type': 'pure'})
    with pytest.raises(ValueError):
        SCFOptions.from_dict({'damp': 0})

def test_debug_raises_verbosity():
    opts = OptionsMap(common_options=CommonOptions.from_dict({'debug': True}),
                      scf_options=SCFOptions.from_dict({'verbose': 0}))
    assert opts.scf_options.verbose == logger.DEBUG
    opts = OptionsMap(scf_options=SCFOptions.from_dict({'verbose': 0}))
    assert opts.scf_options.verbose == 0

def test_print_all_sections():
    buf = io.StringIO()
    log = logger.Logger(buf, logger.INFO)
    OptionsMap().print(log)
    out = buf.getvalue()
    for section in ('common', 'SCF', 'CD', 'CC', 'FCI', 'TASK'):
        assert f'{section} options' in out
    assert 'write_cv' in out
