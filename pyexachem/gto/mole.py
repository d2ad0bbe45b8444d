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
Molecule construction from the input options.

Basis sets are taken from an NWChem-format library directory when one
is given (``basis_dir`` or the ``PYEXACHEM_BASIS_DIR`` environment
variable) and from the PySCF basis library otherwise.
"""
import os
from pyscf import gto
from pyscf.gto.basis import parse_nwchem
from pyexachem.lib import logger

BASIS_FILE_EXTENSIONS = ('', '.nw', '.nwchem', '.g94', '.gbs')

def element_of(label):
    '''Element symbol of an atom label, e.g. ``"H1" -> "H"``.'''
    symb = ''.join(c for c in label if c.isalpha())
    if not symb:
        raise ValueError(f'Cannot find an element in atom label {label!r}.')
    return symb[0].upper() + symb[1:].lower()

def find_basis_file(name, basis_dir=None):
    '''Path of an NWChem-format file holding basis ``name``, or None.'''
    if os.path.isfile(name):
        return name
    if not basis_dir:
        basis_dir = os.environ.get('PYEXACHEM_BASIS_DIR', '')
    if not basis_dir:
        return None
    if not os.path.isdir(basis_dir):
        raise FileNotFoundError(f'Basis directory {basis_dir} does not exist.')
    stems = [name, name.lower(), name.lower().replace('*', 's')]
    for stem in stems:
        for ext in BASIS_FILE_EXTENSIONS:
            path = os.path.join(basis_dir, stem + ext)
            if os.path.isfile(path):
                return path
    return None

def load_basis(name, symb, basis_dir=None):
    '''Basis functions of element ``symb`` in PySCF's internal format.'''
    path = find_basis_file(name, basis_dir)
    source = path or name
    try:
        if path:
            bas = parse_nwchem.load(path, symb)
        else:
            bas = gto.basis.load(name, symb)
    except (RuntimeError, KeyError) as err:
        raise ValueError(f'Basis {name} has no functions for {symb} ({source}).') from err
    if not bas:
        raise ValueError(f'Basis {name} has no functions for {symb} ({source}).')
    return bas

def make_basis(common_options, symbols):
    '''Basis dictionary for all elements in ``symbols``.'''
    basis = {}
    for symb in symbols:
        name = common_options.atom_basis.get(symb, None)
        if name is None:
            name = common_options.basisfile or common_options.basis
        basis[symb] = load_basis(name, symb, common_options.basis_dir)
    return basis

def build_mol(options_map, geometry, verbose=None, stdout=None):
    '''Build a :class:`pyscf.gto.Mole` from the options and geometry.

    Parameters
    ----------
    options_map : :class:`pyexachem.common.options.OptionsMap`
    geometry : list
        ``[(symbol, (x, y, z)), ...]`` as returned by the input parser.
    '''
    common = options_map.common_options
    scf_options = options_map.scf_options
    symbols = sorted({element_of(label) for label, _ in geometry})

    mol = gto.Mole()
    mol.atom = [(element_of(label), xyz) for label, xyz in geometry]
    mol.unit = 'Angstrom' if common.geom_units == 'angstrom' else 'Bohr'
    mol.charge = scf_options.charge
    mol.spin = scf_options.multiplicity - 1
    mol.cart = common.gaussian_type == 'cartesian'
    mol.basis = make_basis(common, symbols)
    mol.verbose = scf_options.verbose if verbose is None else verbose
    if stdout is not None:
        mol.stdout = stdout
    try:
        mol.build(dump_input=False, parse_arg=False)
    except RuntimeError as err:
        raise ValueError(f'Invalid charge/multiplicity: {err}') from err
    logger.debug(mol, 'Molecule with %d atoms, %d electrons, %d basis functions',
                 mol.natm, mol.nelectron, mol.nao)
    return mol
