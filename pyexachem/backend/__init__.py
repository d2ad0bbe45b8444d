"""
The module oversees the tensor backend.
"""
from pyexachem.backend.config import (
    default_backend,
    set_backend,
    get_backend,
    with_backend,
)

set_backend(default_backend())

# pylint: disable=wrong-import-position,useless-import-alias
from pyexachem.backend import numpy as numpy
from pyexachem.backend import ops as ops

__all__ = [
    'set_backend',
    'get_backend',
    'with_backend',
    'numpy',
    'ops',
]
