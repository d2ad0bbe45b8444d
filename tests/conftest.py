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

import json
import pytest

@pytest.fixture
def write_input(tmp_path):
    '''Write a JSON input for water in STO-3G and return its path.'''
    def fn(name='water', **sections):
        dct = {
            'geometry': {'coordinates': ['O 0 0 0',
                                         'H 0 -0.757 0.587',
                                         'H 0 0.757 0.587'],
                         'units': 'angstrom'},
            'basis': {'basisset': 'sto-3g'},
            'SCF': {'conve': 1e-10, 'convd': 1e-8, 'verbose': 0},
            'CD': {'diagtol': 1e-10},
        }
        for key, val in sections.items():
            dct.setdefault(key, {}).update(val)
        path = tmp_path / f'{name}.json'
        path.write_text(json.dumps(dct))
        return str(path)
    return fn
