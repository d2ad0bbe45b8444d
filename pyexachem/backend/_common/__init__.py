from .core import (
    jit,
    index,
    index_update,
)
