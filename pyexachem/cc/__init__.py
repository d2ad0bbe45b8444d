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
Coupled cluster
===============

CCSD with integrals assembled from MO Cholesky vectors:
:class:`RCCSD` for closed-shell references and the spin-orbital
:class:`GCCSD` for unrestricted ones.
'''
from pyexachem.cc import ccsd
from pyexachem.cc import rccsd
from pyexachem.cc import gccsd
from pyexachem.cc.rccsd import RCCSD
from pyexachem.cc.gccsd import GCCSD
from pyexachem.cc.driver import cd_ccsd_driver
