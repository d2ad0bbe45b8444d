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
Electronic-structure drivers (SCF, Cholesky, CCSD, FCI)
on top of a jax or numpy tensor backend
"""
import sys
from pyexachem.version import __version__

from pyexachem._src._config import (
    config,
    config_update
)

# export backend.numpy to pyexachem namespace
# pylint: disable=useless-import-alias
from pyexachem.backend import (
    numpy as numpy,
    ops as ops,
)
sys.modules['pyexachem.numpy'] = numpy
sys.modules['pyexachem.ops'] = ops

del sys
