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
Orbital bookkeeping and output paths of a calculation.
"""
import os
import json
from pyscf.data import elements
from pyexachem.lib import logger

class SystemData:
    '''Orbital counts, file layout and results of one molecular system.

    Attributes:
        nbf_orig : int
            Number of atomic basis functions.
        nbf : int
            Number of molecular orbitals left after removing linear
            dependencies.
        n_frozen_core, n_frozen_virtual : int
            Frozen spatial orbitals at the bottom and top of the spectrum.
        n_occ_alpha, n_occ_beta, n_vir_alpha, n_vir_beta : int
            Correlated occupied and virtual orbitals per spin.
        nocc, nvir, nmo : int
            Spin-orbital counts of the correlated space.
        results : dict
            Sections written by :meth:`write_json_data`.
    '''
    def __init__(self, options_map, mol):
        self.options_map = options_map
        self.stdout = mol.stdout
        self.verbose = options_map.scf_options.verbose
        self.scf_type = options_map.scf_options.scf_type
        self.is_restricted = self.scf_type == 'restricted'
        self.is_unrestricted = not self.is_restricted
        self.output_file_prefix = options_map.common_options.file_prefix or 'pyexachem'

        self.nbf_orig = self.nbf = mol.nao
        self.nelectrons = mol.nelectron
        self.nelectrons_alpha, self.nelectrons_beta = mol.nelec

        ccsd_options = options_map.ccsd_options
        if ccsd_options.freeze_atomic:
            self.n_frozen_core = elements.chemcore(mol)
        else:
            self.n_frozen_core = ccsd_options.freeze_core
        self.n_frozen_virtual = ccsd_options.freeze_virtual

        self.results = {'input': {'molecule': {'nbf': self.nbf_orig,
                                               'nelectrons': self.nelectrons,
                                               'charge': mol.charge,
                                               'spin': mol.spin}},
                        'output': {}}
        self.update()

    def update(self):
        '''Recompute the derived counts from ``nbf`` and the frozen orbitals.'''
        self.n_occ_alpha = self.nelectrons_alpha - self.n_frozen_core
        self.n_occ_beta = self.nelectrons_beta - self.n_frozen_core
        self.n_vir_alpha = self.nbf - self.nelectrons_alpha - self.n_frozen_virtual
        self.n_vir_beta = self.nbf - self.nelectrons_beta - self.n_frozen_virtual
        if self.n_occ_beta < 0:
            raise ValueError(f'Cannot freeze {self.n_frozen_core} core orbitals '
                             f'with {self.nelectrons_beta} beta electrons.')
        if self.n_vir_alpha < 0:
            raise ValueError(f'Cannot freeze {self.n_frozen_virtual} virtual orbitals '
                             f'with {self.nbf - self.nelectrons_alpha} alpha virtuals.')
        self.nocc = self.n_occ_alpha + self.n_occ_beta
        self.nvir = self.n_vir_alpha + self.n_vir_beta
        self.nmo = self.nocc + self.nvir
        self.nactv = self.nbf - self.n_frozen_core - self.n_frozen_virtual
        return self

    @property
    def nelec(self):
        return (self.nelectrons_alpha, self.nelectrons_beta)

    def out_fp(self):
        return '%s.%s' % (self.output_file_prefix, self.options_map.ccsd_options.basis)

    def files_dir(self, sub=None):
        path = os.path.join(self.options_map.common_options.output_dir,
                            self.out_fp() + '_files', self.scf_type)
        if sub:
            path = os.path.join(path, sub)
        return path

    def files_prefix(self, sub=None):
        return os.path.join(self.files_dir(sub), self.out_fp())

    def write_json_data(self, section):
        '''Merge ``results['output'][section]`` into the JSON results file.'''
        log = logger.new_logger(self)
        json_file = self.files_prefix('json') + '.json'
        try:
            os.makedirs(os.path.dirname(json_file), exist_ok=True)
            data = {}
            if os.path.isfile(json_file):
                with open(json_file, 'r') as f:
                    data = json.load(f)
            data.setdefault('input', {}).update(self.results['input'])
            data.setdefault('output', {})[section] = self.results['output'].get(section, {})
            with open(json_file, 'w') as f:
                json.dump(data, f, indent=2)
        except (OSError, ValueError) as err:
            log.error('Failed writing results to %s: %s', json_file, err)
            return None
        return json_file

    def print(self, log=None):
        if log is None:
            log = logger.new_logger(self)
        log.info('')
        log.info('----------------------------')
        log.info('scf_type = %s', self.scf_type)
        log.info('nbf = %d', self.nbf)
        log.info('nbf_orig = %d', self.nbf_orig)
        log.info('n_lindep = %d', self.nbf_orig - self.nbf)
        log.info('nmo = %d', self.nmo)
        log.info('nocc = %d', self.nocc)
        log.info('nvir = %d', self.nvir)
        log.info('n_occ_alpha = %d', self.n_occ_alpha)
        log.info('n_vir_alpha = %d', self.n_vir_alpha)
        log.info('n_occ_beta = %d', self.n_occ_beta)
        log.info('n_vir_beta = %d', self.n_vir_beta)
        log.info('nelectrons = %d', self.nelectrons)
        log.info('nelectrons_alpha = %d', self.nelectrons_alpha)
        log.info('nelectrons_beta = %d', self.nelectrons_beta)
        log.info('n_frozen_core = %d', self.n_frozen_core)
        log.info('n_frozen_virtual = %d', self.n_frozen_virtual)
        log.info('----------------------------')
