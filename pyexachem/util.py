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

def is_tracer(a):
    """Test if the object is a tracer.

    Parameters
    ----------
    a : object
        The object to be tested.

    Notes
    -----
    Only meaningful for the jax backend.
    """
    return any(cls.__name__.endswith('Tracer') for cls in a.__class__.__mro__)
