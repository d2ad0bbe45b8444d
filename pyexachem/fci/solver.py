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
Determinant FCI on an FCIDUMP file.
"""
import numpy
from pyscf.fci import direct_spin1
from pyscf.fci import direct_uhf
from pyexachem.common import fcidump
from pyexachem.lib import logger

def run_fci_solver(fcidump_file, fci_options, rec=None, verbose=None):
    '''Lowest ``nroots`` total energies of the Hamiltonian in ``fcidump_file``.

    Restricted files are solved with ``direct_spin1``, ``IUHF=1`` files
    with ``direct_uhf``.

    Returns
    -------
    energies : list of float
    '''
    if rec is None and verbose is None:
        verbose = logger.NOTE
    log = logger.new_logger(rec, verbose)
    cput0 = log.get_t0()
    data = fcidump.read(fcidump_file)
    norb = data['NORB']
    nelec = data['NELEC']
    ms2 = data['MS2']
    if (nelec + ms2) % 2:
        raise ValueError(f'NELEC = {nelec} and MS2 = {ms2} in {fcidump_file} are inconsistent.')
    nelec = ((nelec + ms2) // 2, (nelec - ms2) // 2)

    if data['IUHF']:
        solver = direct_uhf.FCISolver()
    else:
        solver = direct_spin1.FCI()
    solver.verbose = log.verbose
    solver.stdout = log.stdout
    solver.max_cycle = fci_options.max_cycle
    solver.conv_tol = fci_options.conv_tol
    solver.nroots = fci_options.nroots

    e, _ = solver.kernel(data['H1'], data['H2'], norb, nelec, ecore=data['ECORE'])
    energies = [float(x) for x in numpy.atleast_1d(e)]
    log.timer('FCI solver', *cput0)
    return energies
