"""
Default configurations of the tensor backend.
"""
import os
import json
import importlib
import contextlib
import threading

# default
_FLOATX = 'float64'
_BACKEND = 'jax'

_allowed_floatx = ('float32', 'float64')
_allowed_backend = ('numpy', 'jax')
_floatx = _backend = None

if 'PYEXACHEM_HOME' in os.environ:
    _PYEXACHEM_DIR = os.path.expanduser(os.environ['PYEXACHEM_HOME'])
else:
    _base_dir = os.path.expanduser('~')
    if not os.access(_base_dir, os.W_OK):
        _base_dir = '/tmp'
    _PYEXACHEM_DIR = os.path.join(_base_dir, '.pyexachem')

_config_path = os.path.join(_PYEXACHEM_DIR, 'pyexachem.json')
if os.path.exists(_config_path):
    try:
        with open(_config_path) as f:
            _config = json.load(f)
    except ValueError:
        _config = {}

    _floatx = _config.get('floatx', None)
    _backend = _config.get('backend', None)

# NOTE environment variables overwrite the configure file
if 'PYEXACHEM_FLOATX' in os.environ:
    _floatx = os.environ['PYEXACHEM_FLOATX']
if 'PYEXACHEM_BACKEND' in os.environ:
    _backend = os.environ['PYEXACHEM_BACKEND']

if _floatx in _allowed_floatx:
    _FLOATX = _floatx
if _backend in _allowed_backend:
    _BACKEND = _backend

del (_floatx, _backend)

def default_backend():
    return _BACKEND

def default_floatx():
    return _FLOATX


#---------------- dynamic backend update ----------------#

_current_backend = None
_backend_cache = {}
_lock = threading.RLock()

def set_backend(backend_name):
    if backend_name not in _allowed_backend:
        raise KeyError(f'Required backend {backend_name} is not supported.')

    global _current_backend
    with _lock:
        if backend_name in _backend_cache:
            _current_backend = _backend_cache[backend_name]
        else:
            try:
                module = importlib.import_module(
                    f'pyexachem.backend._{backend_name}').backend
            except ImportError as err:
                raise RuntimeError(f'Failed setting backend {backend_name}.') from err
            _backend_cache[backend_name] = module
            _current_backend = module

def get_backend():
    return _current_backend

@contextlib.contextmanager
def with_backend(backend_name):
    global _current_backend
    with _lock:
        previous_backend = _current_backend
        set_backend(backend_name)
        try:
            yield
        finally:
            _current_backend = previous_backend
