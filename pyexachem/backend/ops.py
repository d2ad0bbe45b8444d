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
Backend operations resolved at call time.
"""
from functools import partial, wraps
from .config import get_backend

__all__ = [
    'to_numpy',
    'jit',
    'index',
    'index_update',
]

def __getattr__(name):
    return getattr(get_backend(), name)

def to_numpy(x):
    return get_backend().to_numpy(x)

def jit(fun=None, **kwargs):
    '''Compile ``fun`` with the jit of the backend active when it is called.

    One compiled function is kept per backend, so a function decorated at
    import time still follows :func:`with_backend`.
    '''
    if fun is None:
        return partial(jit, **kwargs)
    compiled = {}

    @wraps(fun)
    def wrapper(*args, **kw):
        backend = get_backend()
        fn = compiled.get(backend.name)
        if fn is None:
            fn = compiled[backend.name] = backend.jit(fun, **kwargs)
        return fn(*args, **kw)
    return wrapper

def index_update(x, idx, y):
    return get_backend().index_update(x, idx, y)
