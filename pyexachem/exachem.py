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
Task dispatcher and command-line entry point.

Usage::

    pyexachem input.json
    python -m pyexachem input.json
"""
import argparse
from pyexachem.version import __version__
from pyexachem.common.input_parser import parse_input
from pyexachem.scf import hartree_fock_driver
from pyexachem.cholesky import cd_2e_driver
from pyexachem.mp import cd_mp2_driver
from pyexachem.cc import cd_ccsd_driver
from pyexachem.fci import fci_driver

DRIVERS = {
    'scf': hartree_fock_driver,
    'cd_2e': cd_2e_driver,
    'mp2': cd_mp2_driver,
    'ccsd': cd_ccsd_driver,
    'fci': fci_driver,
    'fcidump': fci_driver,
}

def run(filename):
    '''Run the task requested in the input file.

    Returns the driver's return value; the first item is always the
    :class:`SystemData` of the run.
    '''
    options_map, _ = parse_input(filename)
    task = options_map.task_options.task()
    return DRIVERS[task](options_map)

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='pyexachem',
        description='Run the task of a pyexachem JSON input file.')
    parser.add_argument('input', help='JSON input file')
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {__version__}')
    args = parser.parse_args(argv)
    run(args.input)
    return 0
