"""csrkit Sparse Module

Read-only CSR views over caller-owned buffers.

Classes:
    SparseMatrixView: data/indices/indptr view with invariant checks

Functions:
    validate_csr: Check CSR layout invariants on raw buffers
    as_view: Coerce a view or scipy CSR matrix to a SparseMatrixView
"""

from typing import Any

from ._view import SparseMatrixView, validate_csr
from ..errors import InvalidArgumentError


def as_view(mat: Any) -> SparseMatrixView:
    """Return ``mat`` as a SparseMatrixView without copying buffers.

    Raises:
        InvalidArgumentError: If ``mat`` is neither a view nor a scipy CSR matrix.
    """
    if isinstance(mat, SparseMatrixView):
        return mat
    import scipy.sparse as sp

    if sp.issparse(mat):
        return SparseMatrixView.from_scipy(mat)
    raise InvalidArgumentError(
        f"Expected SparseMatrixView or scipy CSR matrix, got {type(mat).__name__}"
    )


__all__ = [
    'SparseMatrixView',
    'validate_csr',
    'as_view',
]
