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
Logging on top of :mod:`pyscf.lib.logger`.

The pyscf levels and helpers are re-exported. ``flush`` is replaced by a
version that accepts jax tracers as arguments: the formatted text is
emitted through ``jax.debug.callback`` once the values are known.
``Logger`` gains ``timer`` (CPU and wall time), ``get_t0`` and ``banner``.
"""
# pylint: skip-file
import re
from pyscf.lib import logger
from pyscf.lib.logger import *
from pyexachem import util

_FORMAT_SPEC = re.compile(r'%(?:\d+\$)?[#0\-+ ]?(?:\d+)?(?:\.\d+)?[hlL]?[a-zA-Z%]')

def _format_known(msg, args):
    '''Substitute the arguments that are not tracers.

    Returns the partially formatted message, still a format string, and
    the tracers whose specifiers are left in place.
    '''
    pieces = []
    deferred = []
    args = list(args)
    pos = 0
    for match in _FORMAT_SPEC.finditer(msg):
        spec = match.group(0)
        pieces.append(msg[pos:match.start()])
        pos = match.end()
        if spec == '%%' or not args:
            pieces.append(spec)
            continue
        arg = args.pop(0)
        if util.is_tracer(arg):
            pieces.append(spec)
            deferred.append(arg)
        else:
            pieces.append((spec % arg).replace('%', '%%'))
    pieces.append(msg[pos:])
    return ''.join(pieces), deferred

def _write(rec, msg):
    rec.stdout.write(msg)
    rec.stdout.write('\n')
    rec.stdout.flush()

def flush(rec, msg, *args):
    if not any(util.is_tracer(arg) for arg in args):
        if args:
            msg = msg % args
        _write(rec, msg)
        return

    import jax
    msg, deferred = _format_known(msg, args)
    jax.debug.callback(lambda *vals: _write(rec, msg % vals), *deferred)

def timer(rec, msg, cpu0=None, wall0=None):
    '''Report the time spent since ``(cpu0, wall0)`` and restart the clock.'''
    if cpu0 is None:
        cpu0 = rec._t0
    if wall0 is None:
        wall0 = rec._w0
    rec._t0 = process_clock()
    if wall0:
        rec._w0 = perf_counter()
        if rec.verbose >= TIMER_LEVEL:
            flush(rec, '    CPU time for %s %9.2f sec, wall time %9.2f sec'
                  % (msg, rec._t0-cpu0, rec._w0-wall0))
        return rec._t0, rec._w0
    if rec.verbose >= TIMER_LEVEL:
        flush(rec, '    CPU time for %s %9.2f sec' % (msg, rec._t0-cpu0))
    return rec._t0

def get_t0(rec):
    return (rec._t0, rec._w0)

def banner(rec, title, width=60):
    """Print a section header such as ``==== Hartree-Fock ====``."""
    if rec.verbose >= NOTE:
        pad = max(width - len(title) - 2, 0)
        left = pad // 2
        flush(rec, '\n%s %s %s', '=' * left, title, '=' * (pad - left))

logger.flush = flush
logger.timer = timer
logger.Logger.timer = timer
logger.Logger.get_t0 = get_t0
logger.Logger.banner = banner
