"""csrkit Private Kernel Package (_kernel).

Numba kernel factories. Every factory returns a function compiled for one
explicit signature; selecting which one to call is the dispatcher's job
(``csrkit.dispatch``), never the kernel's.

Modules:
    - reduce: Row folds (sum, sum of squares, L1) and row mean/variance
    - normalize: Row scaling by a per-row norm

Usage (Internal only):
    >>> from csrkit._kernel import reduce
    >>> from csrkit._dtypes import ElementKind, IndexKind
    >>> kernel = reduce.make_fold_kernel(reduce.combine_sum, 0.0,
    ...                                  ElementKind.FLOAT32, IndexKind.INT32)
    >>> kernel(data, indptr, out)
"""

from . import reduce
from . import normalize

__all__ = [
    'reduce',
    'normalize',
]
