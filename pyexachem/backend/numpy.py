"""
Array namespace of the current backend.

Attribute access is forwarded to ``jax.numpy`` or ``numpy``,
whichever backend is active.
"""
from .config import get_backend

def __getattr__(name):
    return getattr(get_backend(), name)
