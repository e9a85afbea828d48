"""
Descriptive Row Statistics for CSR Matrices.

Row-wise sums, norms and moments on top of the row-reduction engine. Every
function keeps the element kind of its input: a float32 matrix gives
float32 results, with no intermediate float64 copy of the data.

Supported Input Formats:
    - SparseMatrixView
    - scipy.sparse.csr_matrix / csr_array (buffers are borrowed, not copied)

Mathematical Background:
    For a CSR matrix X with shape (m, n), means and variances count the
    implicit zeros of each row:

        mean_i = (1/n) * sum(x_ik)
        var_i  = (1/(n-ddof)) * [sum((x_ik - mean_i)^2) + (n - nnz_i) * mean_i^2]
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Tuple, Union

from csrkit.dispatch import Operation
from csrkit.engine import normalize_data, reduce_view
from csrkit.engine import row_mean_variance as _row_mean_variance
from csrkit.sparse import SparseMatrixView, as_view

if TYPE_CHECKING:
    import numpy as np
    from scipy import sparse as sp

SparseInput = Union[SparseMatrixView, "sp.csr_matrix", "sp.csr_array"]


# =============================================================================
# Sums and Norms
# =============================================================================

def row_sums(mat: SparseInput) -> "np.ndarray":
    """Compute the sum of each row.

    Args:
        mat: CSR input.

    Returns:
        Array of row sums (length = rows), same dtype as the input data.

    Examples:
        >>> import scipy.sparse as sp
        >>> row_sums(sp.csr_matrix([[1.0, 2.0], [0.0, 3.0]]))
        array([3., 3.])
    """
    return reduce_view(as_view(mat), Operation.SUM)


def row_norms(mat: SparseInput, squared: bool = False) -> "np.ndarray":
    """Compute the Euclidean norm of each row.

    Args:
        mat: CSR input.
        squared: Return squared norms (skips the square root).

    Returns:
        Array of row norms (length = rows), same dtype as the input data.
    """
    op = Operation.SUM_SQUARES if squared else Operation.L2_NORM
    return reduce_view(as_view(mat), op)


def row_l1_norms(mat: SparseInput) -> "np.ndarray":
    """Compute the sum of absolute values of each row."""
    return reduce_view(as_view(mat), Operation.L1_NORM)


# =============================================================================
# Moments
# =============================================================================

def row_means(mat: SparseInput) -> "np.ndarray":
    """Compute row means, counting implicit zeros.

    A SparseMatrixView must carry ``n_cols``; scipy inputs supply it from
    their shape.

    Raises:
        InvalidArgumentError: If the column count is unknown.
    """
    return reduce_view(as_view(mat), Operation.MEAN)


def row_vars(mat: SparseInput, ddof: int = 0) -> "np.ndarray":
    """Compute row variances, counting implicit zeros.

    Uses the two-pass algorithm per row. The divisor is ``n_cols - ddof``.

    Raises:
        InvalidArgumentError: If the column count is unknown or
            ``ddof`` is not in ``[0, n_cols)``.
    """
    return reduce_view(as_view(mat), Operation.VARIANCE, ddof=ddof)


def row_mean_variance(mat: SparseInput, ddof: int = 0) -> Tuple["np.ndarray", "np.ndarray"]:
    """Compute row means and variances in one pass over the data.

    Returns:
        Tuple of (means, variances).
    """
    return _row_mean_variance(as_view(mat), ddof=ddof)


# =============================================================================
# Normalization
# =============================================================================

def normalize_rows(mat: SparseInput, norm: str = "l2") -> Any:
    """Scale each row to unit L1 or L2 norm.

    The input is not modified: the result owns a fresh data buffer of the
    same dtype. Rows whose norm is zero are left as they are.

    Args:
        mat: CSR input.
        norm: 'l1' or 'l2'.

    Returns:
        Same type as ``mat``. scipy inputs get a new matrix of the same
        class with copied index buffers; views get a new view sharing the
        input's (read-only) index buffers.
    """
    view = as_view(mat)
    data = normalize_data(view, norm=norm)
    if isinstance(mat, SparseMatrixView):
        return SparseMatrixView(data, view.indices, view.indptr, view.rows, view.n_cols)
    return type(mat)(
        (data, view.indices.copy(), view.indptr.copy()),
        shape=mat.shape,
    )
