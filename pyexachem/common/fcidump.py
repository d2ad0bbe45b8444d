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
FCIDUMP writer and reader.

Restricted references produce the standard spatial-orbital file.
Unrestricted references produce the ``IUHF=1`` layout: the alpha-alpha,
beta-beta and alpha-beta integrals, then the alpha and beta one-electron
integrals, each block closed by a line of zero indices, then the constant.
"""
import re
import numpy
from pyscf import ao2mo
from pyscf.tools import fcidump as pyscf_fcidump
from pyexachem import config
from pyexachem import ops

def write_head(fout, nmo, nelec, ms=0, orbsym=None, iuhf=False):
    fout.write(' &FCI NORB=%4d,NELEC=%2d,MS2=%d,\n' % (nmo, nelec, ms))
    if orbsym is not None and len(orbsym) > 0:
        fout.write('  ORBSYM=%s,\n' % ','.join([str(x) for x in orbsym]))
    else:
        fout.write('  ORBSYM=%s\n' % ('1,' * nmo))
    fout.write('  ISYM=1,\n')
    if iuhf:
        fout.write('  IUHF=1,\n')
    fout.write(' &END\n')

def write_eri_ab(fout, eri, nmo, tol, float_format):
    '''Alpha-beta block ``(pq|rs)``, ``p>=q`` alpha and ``r>=s`` beta.'''
    output_format = float_format + ' %4d %4d %4d %4d\n'
    eri = eri.reshape(nmo, nmo, nmo, nmo)
    for i in range(nmo):
        for j in range(0, i+1):
            for k in range(nmo):
                for l in range(0, k+1):
                    if abs(eri[i,j,k,l]) > tol:
                        fout.write(output_format % (eri[i,j,k,l], i+1, j+1, k+1, l+1))

def _write_separator(fout, float_format, val=0.):
    fout.write((float_format + '  0  0  0  0\n') % val)

def _settings(tol, float_format):
    if tol is None:
        tol = config.fcidump_tol
    if float_format is None:
        float_format = config.fcidump_float_format
    return tol, float_format

def from_integrals(filename, h1e, h2e, nmo, nelec, nuc=0., ms=0, orbsym=None,
                   tol=None, float_format=None):
    '''Write the spatial-orbital FCIDUMP of a restricted Hamiltonian.

    Parameters
    ----------
    h1e : (nmo, nmo) array
    h2e : (nmo, nmo, nmo, nmo) array
        Chemists' notation ``(pq|rs)``.
    '''
    tol, float_format = _settings(tol, float_format)
    h1e = numpy.asarray(ops.to_numpy(h1e), dtype=numpy.float64)
    h2e = numpy.asarray(ops.to_numpy(h2e), dtype=numpy.float64)
    with open(filename, 'w') as fout:
        write_head(fout, nmo, nelec, ms, orbsym)
        pyscf_fcidump.write_eri(fout, ao2mo.restore(8, h2e, nmo), nmo,
                                tol=tol, float_format=float_format)
        pyscf_fcidump.write_hcore(fout, h1e, nmo, tol=tol, float_format=float_format)
        _write_separator(fout, float_format, nuc)
    return filename

def from_integrals_uhf(filename, h1e, h2e, nmo, nelec, nuc=0., ms=0, orbsym=None,
                       tol=None, float_format=None):
    '''Write the ``IUHF=1`` FCIDUMP of an unrestricted Hamiltonian.

    Parameters
    ----------
    h1e : tuple of arrays
        ``(h_a, h_b)``.
    h2e : tuple of arrays
        ``(eri_aa, eri_ab, eri_bb)`` in chemists' notation, the alpha-beta
        block ordered ``(alpha alpha|beta beta)``.
    '''
    tol, float_format = _settings(tol, float_format)
    h1a, h1b = [numpy.asarray(ops.to_numpy(h), dtype=numpy.float64) for h in h1e]
    eri_aa, eri_ab, eri_bb = [numpy.asarray(ops.to_numpy(g), dtype=numpy.float64) for g in h2e]
    with open(filename, 'w') as fout:
        write_head(fout, nmo, nelec, ms, orbsym, iuhf=True)
        pyscf_fcidump.write_eri(fout, ao2mo.restore(8, eri_aa, nmo), nmo,
                                tol=tol, float_format=float_format)
        _write_separator(fout, float_format)
        pyscf_fcidump.write_eri(fout, ao2mo.restore(8, eri_bb, nmo), nmo,
                                tol=tol, float_format=float_format)
        _write_separator(fout, float_format)
        write_eri_ab(fout, eri_ab, nmo, tol, float_format)
        _write_separator(fout, float_format)
        pyscf_fcidump.write_hcore(fout, h1a, nmo, tol=tol, float_format=float_format)
        _write_separator(fout, float_format)
        pyscf_fcidump.write_hcore(fout, h1b, nmo, tol=tol, float_format=float_format)
        _write_separator(fout, float_format)
        _write_separator(fout, float_format, nuc)
    return filename

def _read_head(finp):
    data = []
    for _ in range(20):
        line = finp.readline()
        if not line:
            break
        data.append(line.upper())
        if '&END' in data[-1] or data[-1].strip() == '/':
            break
    else:
        raise ValueError('Problematic FCIDUMP header')
    if not data or not ('&END' in data[-1] or data[-1].strip() == '/'):
        raise ValueError('Problematic FCIDUMP header')

    result = {'IUHF': 0, 'MS2': 0, 'ISYM': 1}
    tokens = ','.join(data).replace('&FCI', '').replace('&END', '').replace('/', '')
    tokens = tokens.replace(' ', '').replace('\n', '')
    tokens = re.sub(',+', ',', tokens).strip(',')
    for token in re.split(',(?=[A-Z])', tokens):
        key, val = token.split('=')
        if key in ('NORB', 'NELEC', 'MS2', 'ISYM', 'IUHF'):
            result[key] = int(val.replace(',', ''))
        elif key == 'ORBSYM':
            result[key] = [int(x) for x in val.replace(',', ' ').split()]
        else:
            result[key] = val
    if 'NORB' not in result or 'NELEC' not in result:
        raise ValueError('FCIDUMP header misses NORB or NELEC')
    return result

def _fill_eri(eri, val, i, j, k, l):
    eri[i,j,k,l] = eri[j,i,k,l] = eri[i,j,l,k] = eri[j,i,l,k] = val

def read(filename):
    '''Parse a restricted or ``IUHF=1`` FCIDUMP into dense integrals.

    Returns a dictionary with keys ``NORB``, ``NELEC``, ``MS2``, ``ORBSYM``,
    ``ISYM``, ``IUHF``, ``ECORE``, ``H1`` and ``H2``. For unrestricted files
    ``H1`` is ``(h_a, h_b)`` and ``H2`` is ``(eri_aa, eri_ab, eri_bb)``.
    '''
    with open(filename, 'r') as finp:
        result = _read_head(finp)
        norb = result['NORB']
        nblock = 2 if result['IUHF'] else 1
        h1 = numpy.zeros((nblock, norb, norb))
        h2 = numpy.zeros((nblock*2-1, norb, norb, norb, norb))
        ecore = 0.
        # section of an IUHF file: aa, bb, ab, h_a, h_b, constant
        section = 0
        for line in finp:
            dat = line.split()
            if not dat:
                continue
            if len(dat) != 5:
                raise ValueError(f'Cannot parse FCIDUMP line {line!r}')
            val = float(dat[0].replace('D', 'E').replace('d', 'e'))
            i, j, k, l = [int(x)-1 for x in dat[1:5]]
            if result['IUHF']:
                if i < 0 and j < 0 and k < 0 and l < 0:
                    if section < 5:
                        section += 1
                    else:
                        ecore = val
                elif section < 3:
                    # storage order aa, ab, bb
                    block = (0, 2, 1)[section]
                    _fill_eri(h2[block], val, i, j, k, l)
                    if block != 1:
                        _fill_eri(h2[block], val, k, l, i, j)
                elif section < 5:
                    h1[section-3,i,j] = h1[section-3,j,i] = val
                else:
                    raise ValueError(f'Unexpected FCIDUMP line {line!r}')
            else:
                if k >= 0:
                    _fill_eri(h2[0], val, i, j, k, l)
                    _fill_eri(h2[0], val, k, l, i, j)
                elif i >= 0:
                    h1[0,i,j] = h1[0,j,i] = val
                else:
                    ecore = val

    result['ECORE'] = ecore
    if result['IUHF']:
        result['H1'] = (h1[0], h1[1])
        result['H2'] = (h2[0], h2[1], h2[2])
    else:
        result['H1'] = h1[0]
        result['H2'] = h2[0]
    return result
