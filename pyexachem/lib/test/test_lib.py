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

import io
import os
import numpy
import jax
import pytest
from pyexachem.lib import logger
from pyexachem.lib.chkfile import write_to_disk, read_from_disk

class _Rec:
    def __init__(self):
        self.stdout = io.StringIO()
        self.verbose = logger.DEBUG

def test_flush():
    rec = _Rec()
    log = logger.new_logger(rec)
    log.info('E = %.3f  n = %d  100%%', 1.23456, 7)
    assert rec.stdout.getvalue() == 'E = 1.235  n = 7  100%\n'

def test_flush_tracer():
    rec = _Rec()

    @jax.jit
    def fn(x):
        logger.info(rec, 'step %d x = %.2f', 3, x)
        return x * 2

    fn(1.5).block_until_ready()
    jax.effects_barrier()
    assert rec.stdout.getvalue() == 'step 3 x = 1.50\n'

def test_banner_timer():
    rec = _Rec()
    log = logger.new_logger(rec)
    t0 = log.get_t0()
    log.banner('CCSD')
    t1 = log.timer('nothing', *t0)
    assert len(t1) == 2
    out = rec.stdout.getvalue()
    assert ' CCSD ' in out
    assert 'CPU time for nothing' in out

def test_tensor_files(tmp_path):
    fname = str(tmp_path / 'x.h5')
    a = numpy.arange(6.).reshape(2, 3)
    write_to_disk(a, fname)
    assert abs(numpy.asarray(read_from_disk(fname, (2, 3))) - a).max() == 0
    with pytest.raises(ValueError):
        read_from_disk(fname, (3, 2))
    with pytest.raises(FileNotFoundError):
        read_from_disk(os.path.join(str(tmp_path), 'none.h5'))
