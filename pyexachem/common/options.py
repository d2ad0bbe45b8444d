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
Option groups of an input file.

Each group mirrors one section of the JSON input (``common``/``basis``,
``SCF``, ``CD``, ``CC``, ``FCI``, ``TASK``) and is validated by pydantic.
Unknown keys raise :class:`KeyError`; values of the wrong type raise
:class:`pydantic.ValidationError`, a :class:`ValueError`.
"""
from typing import ClassVar, Dict, List, Literal
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pyexachem.lib import logger

def _lower(val):
    if isinstance(val, str):
        return val.lower()
    return val


class _Options(BaseModel):
    model_config = ConfigDict(extra='forbid', strict=True)

    section_name: ClassVar[str] = ''

    @classmethod
    def from_dict(cls, dct=None, **kwargs):
        '''Validate one input section on top of the defaults.'''
        data = dict(kwargs)
        data.update(dct or {})
        try:
            return cls.model_validate(data)
        except ValidationError as err:
            unknown = [e['loc'][0] for e in err.errors()
                       if e['type'] == 'extra_forbidden']
            if unknown:
                raise KeyError(f'Unknown option "{unknown[0]}" in section '
                               f'{cls.section_name}.') from err
            raise

    def print(self, log):
        log.info('%s options', self.section_name)
        log.info('{')
        for name in type(self).model_fields:
            log.info('  %-16s = %s', name, getattr(self, name))
        log.info('}')


class CommonOptions(_Options):
    section_name: ClassVar[str] = 'common'

    maxiter: int = Field(100, ge=0)
    debug: bool = False
    file_prefix: str = ''
    output_dir: str = ''
    basis: str = 'sto-3g'
    basisfile: str = ''
    basis_dir: str = ''
    df_basisset: str = ''
    gaussian_type: Literal['spherical', 'cartesian'] = 'spherical'
    geom_units: Literal['angstrom', 'bohr'] = 'angstrom'
    atom_basis: Dict[str, str] = Field(default_factory=dict)

    @field_validator('gaussian_type', 'geom_units', mode='before')
    @classmethod
    def lower_case(cls, val):
        return _lower(val)


class SCFOptions(_Options):
    section_name: ClassVar[str] = 'SCF'

    charge: int = 0
    multiplicity: int = Field(1, ge=1)
    scf_type: Literal['restricted', 'unrestricted'] = 'restricted'
    conve: float = 1e-8
    convd: float = 1e-7
    diis_hist: int = 10
    damp: int = Field(100, gt=0, le=100)
    lshift: float = 0.
    tol_lindep: float = 1e-5
    restart: bool = False
    noscf: bool = False
    writem: int = 10
    guess: Literal['minao', 'atom', '1e', 'huckel'] = 'minao'
    verbose: int = logger.NOTE

    @field_validator('scf_type', 'guess', mode='before')
    @classmethod
    def lower_case(cls, val):
        return _lower(val)

    @model_validator(mode='after')
    def check_sanity(self):
        if self.scf_type == 'restricted' and self.multiplicity != 1:
            raise ValueError('Restricted SCF requires multiplicity 1. '
                             'Set "scf_type": "unrestricted" for open shells.')
        if self.noscf and not self.restart:
            raise ValueError('noscf requires restart orbitals ("restart": true).')
        return self


class CDOptions(_Options):
    section_name: ClassVar[str] = 'CD'

    diagtol: float = Field(1e-5, gt=0)
    # factor multiplied by the number of basis functions
    max_cvecs: int = Field(12, ge=1)
    write_cv: bool = False


class CCSDOptions(_Options):
    section_name: ClassVar[str] = 'CC'

    threshold: float = 1e-6
    ccsd_maxiter: int = 50
    ndiis: int = 5
    lshift: float = 0.
    readt: bool = False
    writet: bool = False
    # 0 means every ndiis iterations, see write_interval
    writet_iter: int = Field(0, ge=0)
    freeze_core: int = Field(0, ge=0)
    freeze_virtual: int = Field(0, ge=0)
    freeze_atomic: bool = False
    basis: str = ''

    @model_validator(mode='before')
    @classmethod
    def flatten_freeze(cls, data):
        if not isinstance(data, dict) or 'freeze' not in data:
            return data
        data = dict(data)
        freeze = data.pop('freeze')
        if not isinstance(freeze, dict):
            raise ValueError('CC.freeze expects an object.')
        for key, val in freeze.items():
            if key not in ('core', 'virtual', 'atomic'):
                raise KeyError(f'Unknown option "{key}" in section CC.freeze.')
            data['freeze_' + key] = val
        return data

    def write_interval(self):
        '''Number of iterations between two amplitude dumps.'''
        return self.writet_iter or self.ndiis


class FCIOptions(_Options):
    section_name: ClassVar[str] = 'FCI'

    # 0 keeps all correlated orbitals
    nactive: int = Field(0, ge=0)
    nroots: int = Field(1, ge=1)
    max_cycle: int = 100
    conv_tol: float = 1e-10
    tol: float = 1e-15


TASKS = ('scf', 'mp2', 'cd_2e', 'ccsd', 'fci', 'fcidump')

class TaskOptions(_Options):
    section_name: ClassVar[str] = 'TASK'

    scf: bool = False
    mp2: bool = False
    cd_2e: bool = False
    ccsd: bool = False
    fci: bool = False
    fcidump: bool = False

    @model_validator(mode='after')
    def check_sanity(self):
        self.task()
        return self

    def task(self):
        '''Name of the requested task. ``scf`` when nothing is set.'''
        selected = [name for name in TASKS if getattr(self, name)]
        if len(selected) > 1:
            raise ValueError(f'Only one task per input is allowed, got {selected}.')
        if not selected:
            return 'scf'
        return selected[0]


class OptionsMap(BaseModel):
    model_config = ConfigDict(extra='forbid')

    common_options: CommonOptions = Field(default_factory=CommonOptions)
    scf_options: SCFOptions = Field(default_factory=SCFOptions)
    cd_options: CDOptions = Field(default_factory=CDOptions)
    ccsd_options: CCSDOptions = Field(default_factory=CCSDOptions)
    fci_options: FCIOptions = Field(default_factory=FCIOptions)
    task_options: TaskOptions = Field(default_factory=TaskOptions)
    geometry: List = Field(default_factory=list)

    @model_validator(mode='after')
    def link_sections(self):
        if not self.ccsd_options.basis:
            self.ccsd_options.basis = self.common_options.basis
        if self.common_options.debug:
            self.scf_options.verbose = max(self.scf_options.verbose, logger.DEBUG)
        return self

    def print(self, log):
        for opts in (self.common_options, self.scf_options, self.cd_options,
                     self.ccsd_options, self.fci_options, self.task_options):
            opts.print(log)
