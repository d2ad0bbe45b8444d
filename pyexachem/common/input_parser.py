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
Reader of the JSON input file.

Example::

    {
      "geometry": {"coordinates": ["H 0 0 0", "H 0 0 0.74"], "units": "angstrom"},
      "basis": {"basisset": "sto-3g"},
      "SCF": {"conve": 1e-10},
      "TASK": {"fci": true}
    }
"""
import os
import json
from pyexachem.common.options import (
    CommonOptions,
    SCFOptions,
    CDOptions,
    CCSDOptions,
    FCIOptions,
    TaskOptions,
    OptionsMap,
)

SECTIONS = ('geometry', 'basis', 'common', 'SCF', 'CD', 'CC', 'FCI', 'TASK')

# keys of the "basis" section and their CommonOptions names
_BASIS_KEYS = {
    'basisset': 'basis',
    'basisfile': 'basisfile',
    'basis_dir': 'basis_dir',
    'df_basisset': 'df_basisset',
    'gaussian_type': 'gaussian_type',
    'atom_basis': 'atom_basis',
}

def parse_geometry(coordinates):
    '''Convert geometry entries to ``[(symbol, (x, y, z)), ...]``.

    An entry is either a string ``"O 0.0 0.0 0.0"`` or a list
    ``["O", 0.0, 0.0, 0.0]``.
    '''
    if not coordinates:
        raise ValueError('The input has no atoms.')
    geometry = []
    for entry in coordinates:
        if isinstance(entry, str):
            tokens = entry.replace(',', ' ').split()
        elif isinstance(entry, (list, tuple)):
            tokens = list(entry)
        else:
            raise ValueError(f'Cannot parse geometry entry {entry!r}.')
        if len(tokens) != 4:
            raise ValueError(f'Geometry entry {entry!r} needs a symbol and 3 coordinates.')
        try:
            xyz = tuple(float(x) for x in tokens[1:])
        except (TypeError, ValueError) as err:
            raise ValueError(f'Invalid coordinates in geometry entry {entry!r}.') from err
        geometry.append((str(tokens[0]), xyz))
    return geometry

def parse_input_dict(dct, filename=None):
    '''Build :class:`OptionsMap` and the geometry from a parsed input.'''
    for key in dct:
        if key not in SECTIONS:
            raise KeyError(f'Unknown input section "{key}".')
    if 'geometry' not in dct:
        raise KeyError('The input has no "geometry" section.')

    geom_section = dict(dct['geometry'])
    geometry = parse_geometry(geom_section.pop('coordinates', None))

    common = dict(dct.get('common', {}))
    if 'units' in geom_section:
        common['geom_units'] = geom_section.pop('units')
    if geom_section:
        raise KeyError(f'Unknown geometry options {sorted(geom_section)}.')
    for key, val in dct.get('basis', {}).items():
        if key not in _BASIS_KEYS:
            raise KeyError(f'Unknown option "{key}" in section basis.')
        common[_BASIS_KEYS[key]] = val

    if filename is not None:
        if not common.get('file_prefix'):
            common['file_prefix'] = os.path.splitext(os.path.basename(filename))[0]
        if not common.get('output_dir'):
            common['output_dir'] = os.path.dirname(os.path.abspath(filename))

    options_map = OptionsMap(
        common_options=CommonOptions.from_dict(common),
        scf_options=SCFOptions.from_dict(dct.get('SCF')),
        cd_options=CDOptions.from_dict(dct.get('CD')),
        ccsd_options=CCSDOptions.from_dict(dct.get('CC')),
        fci_options=FCIOptions.from_dict(dct.get('FCI')),
        task_options=TaskOptions.from_dict(dct.get('TASK')),
        geometry=geometry,
    )
    return options_map, geometry

def parse_input(filename):
    '''Read a JSON input file.

    Returns
    -------
    options_map : :class:`OptionsMap`
    geometry : list of ``(symbol, (x, y, z))``
    '''
    if not os.path.isfile(filename):
        raise FileNotFoundError(f'Input file {filename} does not exist.')
    with open(filename, 'r') as f:
        try:
            dct = json.load(f)
        except json.JSONDecodeError as err:
            raise ValueError(f'Input file {filename} is not valid JSON: {err}') from err
    if not isinstance(dct, dict):
        raise ValueError(f'Input file {filename} must hold a JSON object.')
    return parse_input_dict(dct, filename)
