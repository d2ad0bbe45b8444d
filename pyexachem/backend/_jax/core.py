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

import jax
from jax import numpy as jnp

def is_array(x):
    return isinstance(x, jax.Array)

def to_numpy(x):
    if is_array(x):
        x = jax.lax.stop_gradient(x)
        x = x.__array__()
    return x

def index_update(x, idx, y):
    x = jnp.asarray(x)
    return x.at[idx].set(y)
