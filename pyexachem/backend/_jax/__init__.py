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

from types import ModuleType
try:
    import jax
except ImportError as err:
    raise ImportError('Unable to import jax.') from err

from ..config import default_floatx
if default_floatx() == 'float64':
    jax.config.update('jax_enable_x64', True)

# pylint: disable=wrong-import-position
from jax import jit
from .._common import index
from .core import (
    to_numpy,
    index_update,
)

class JaxBackend:
    name = 'jax'

    def __init__(self, package):
        self._pkg = package
        self._cache = {}

    def __getattr__(self, name):
        if name in self._cache:
            return self._cache[name]

        try:
            attr = getattr(self._pkg, name)
        except AttributeError as err:
            raise AttributeError(f'{self._pkg.__name__} has no attribute {name}') from err
        if isinstance(attr, ModuleType):
            attr = self.__class__(attr)
        self._cache[name] = attr
        return attr

backend = JaxBackend(jax.numpy)

backend._cache['to_numpy'] = to_numpy
backend._cache['jit'] = jit
backend._cache['index'] = index
backend._cache['index_update'] = index_update
