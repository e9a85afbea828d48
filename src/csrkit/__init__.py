"""
csrkit - Kind-Specialized CSR Row Kernels

Row reductions over compressed sparse row matrices, compiled separately for
each element kind so float32 data is never silently widened to float64:

- Kernel dispatch: one specialization per (element kind, index kind),
  selected once per call from the input buffer's dtype
- Row-reduction engine: sums, norms, means and variances per row
- Statistics: scipy-friendly helpers on top of the engine

Modules:
- dispatch: Operation identifiers, specializations, function-pointer table
- engine: reduce_rows / reduce_view entry points
- sparse: SparseMatrixView and CSR validation
- statistics: Row statistics and normalization

Example:
    >>> import numpy as np
    >>> import csrkit
    >>> data = np.array([3.0, 4.0], dtype=np.float32)
    >>> indices = np.array([0, 1], dtype=np.int32)
    >>> indptr = np.array([0, 2], dtype=np.int32)
    >>> csrkit.reduce_rows(data, indices, indptr, 1, "l2_norm")
    array([5.], dtype=float32)
"""

__version__ = '0.1.0'

from . import dispatch
from . import engine
from . import sparse
from . import statistics

from ._config import (
    get_config,
    get_options,
    options,
    set_options,
)
from ._dtypes import ElementKind, IndexKind
from .dispatch import (
    Operation,
    Specialization,
    SpecializationTable,
    select_kind,
)
from .engine import (
    normalize_data,
    reduce_rows,
    reduce_view,
    row_mean_variance,
)
from .errors import (
    CsrKitError,
    InvalidArgumentError,
    MonotonicityError,
    ShapeMismatchError,
    UnsupportedKindError,
)
from .sparse import SparseMatrixView

# Module-level alias for the dispatcher entry point
dispatch_op = dispatch.dispatch

__all__ = [
    # Version
    '__version__',

    # Modules
    'dispatch',
    'engine',
    'sparse',
    'statistics',

    # Kinds
    'ElementKind',
    'IndexKind',

    # Dispatch
    'Operation',
    'Specialization',
    'SpecializationTable',
    'select_kind',
    'dispatch_op',

    # Engine
    'reduce_rows',
    'reduce_view',
    'row_mean_variance',
    'normalize_data',

    # Views
    'SparseMatrixView',

    # Errors
    'CsrKitError',
    'UnsupportedKindError',
    'ShapeMismatchError',
    'MonotonicityError',
    'InvalidArgumentError',

    # Configuration
    'get_config',
    'set_options',
    'get_options',
    'options',
]
