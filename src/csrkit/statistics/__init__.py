"""
csrkit Statistics Module.

Row-wise descriptive statistics for CSR matrices:

    - Sums and norms (sum, L1, L2, squared L2)
    - Means and variances counting implicit zeros
    - Row normalization to unit norm

Functions accept a SparseMatrixView or a scipy CSR matrix and keep the
element kind of the input.

Example:
    >>> import numpy as np
    >>> import scipy.sparse as sp
    >>> import csrkit.statistics as stats
    >>>
    >>> mat = sp.random(100, 50, density=0.1, format="csr", dtype=np.float32)
    >>> norms = stats.row_norms(mat)
    >>> norms.dtype
    dtype('float32')
"""

from csrkit.statistics.descriptive import (
    row_sums,
    row_norms,
    row_l1_norms,
    row_means,
    row_vars,
    row_mean_variance,
    normalize_rows,
)

__all__ = [
    "row_sums",
    "row_norms",
    "row_l1_norms",
    "row_means",
    "row_vars",
    "row_mean_variance",
    "normalize_rows",
]
