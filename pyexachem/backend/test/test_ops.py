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

from functools import partial
import numpy
import jax
from pyexachem import numpy as np
from pyexachem import ops
from pyexachem.backend import get_backend, with_backend

@partial(ops.jit, static_argnums=(1,))
def _scaled_trace(a, scale):
    return np.einsum('ii->', a) * scale

def test_jit_follows_backend():
    a = numpy.eye(3)
    with with_backend('jax'):
        out = _scaled_trace(a, 2.)
        assert isinstance(out, jax.Array)
    with with_backend('numpy'):
        out = _scaled_trace(a, 2.)
        assert not isinstance(out, jax.Array)
    assert abs(float(out) - 6.) < 1e-12

def test_with_backend_restores():
    default = get_backend()
    with with_backend('numpy'):
        assert get_backend().name == 'numpy'
        with with_backend('jax'):
            assert get_backend().name == 'jax'
        assert get_backend().name == 'numpy'
    assert get_backend() is default

def test_index_update():
    with with_backend('numpy'):
        x = numpy.zeros((2, 2))
        y = ops.index_update(x, ops.index[0, 1], 3.)
        assert y is x
    with with_backend('jax'):
        x = np.zeros((2, 2))
        y = ops.index_update(x, ops.index[0, 1], 3.)
        assert float(x[0, 1]) == 0.
    assert float(y[0, 1]) == 3.
