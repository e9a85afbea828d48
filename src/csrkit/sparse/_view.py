"""Read-only CSR matrix view.

SparseMatrixView wraps three caller-owned buffers without copying them.
The view is borrowed for the duration of a call: nothing in csrkit writes
to ``data``, ``indices`` or ``indptr``.

Validation order (first failure wins):
    1. element kind of data           -> UnsupportedKindError
    2. index kind of indices/indptr   -> UnsupportedKindError
    3. 1-D buffers, integer rows >= 0 -> ShapeMismatchError
       integer n_cols                 -> InvalidArgumentError
    4. len(indptr) == rows + 1        -> ShapeMismatchError
    5. len(indices) == len(data)      -> ShapeMismatchError
    6. indptr non-decreasing          -> MonotonicityError
    7. indptr[0] == 0, indptr[-1] == nnz -> ShapeMismatchError
    8. 0 <= indices < n_cols          -> ShapeMismatchError (optional)

Example:
    >>> view = SparseMatrixView.from_arrays(
    ...     np.array([3.0, 4.0], dtype=np.float32),
    ...     np.array([0, 1], dtype=np.int32),
    ...     np.array([0, 2], dtype=np.int32),
    ... )
    >>> view.variant
    'f32_i32'
"""

import operator
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from .._config import get_config
from .._dtypes import ElementKind, IndexKind, variant
from ..errors import (
    CSRKIT_ERROR_INDEX_OUT_OF_BOUNDS,
    InvalidArgumentError,
    MonotonicityError,
    ShapeMismatchError,
    UnsupportedKindError,
)

__all__ = ['SparseMatrixView', 'validate_csr', 'as_integer']


def as_integer(value: Any, name: str, error_cls=InvalidArgumentError) -> int:
    """Return ``value`` as a Python int; floats and other non-integers raise.

    Accepts anything with ``__index__`` (Python and numpy integers).
    """
    try:
        return operator.index(value)
    except TypeError as e:
        raise error_cls(f"{name} must be an integer, got {value!r}") from e


def validate_csr(
    data: np.ndarray,
    indices: np.ndarray,
    indptr: np.ndarray,
    rows: int,
    n_cols: Optional[int] = None,
    check_indices: bool = True,
) -> Tuple[ElementKind, IndexKind]:
    """Check CSR layout invariants without touching the buffers.

    Args:
        data: Stored values.
        indices: Column index of each stored value.
        indptr: Row pointers, length ``rows + 1``.
        rows: Number of rows.
        n_cols: Number of columns, if known.
        check_indices: Range-check ``indices`` against ``n_cols``.

    Returns:
        ``(element kind, index kind)`` of the buffers.

    Raises:
        UnsupportedKindError: Element or index kind outside the supported set.
        ShapeMismatchError: Length or shape invariants violated.
        MonotonicityError: ``indptr`` decreases somewhere.
    """
    kind = ElementKind.from_dtype(data.dtype)
    index_kind = IndexKind.from_dtype(indptr.dtype)
    if indices.dtype != indptr.dtype:
        # Both buffers share one index kind; mixing them would need a copy
        IndexKind.from_dtype(indices.dtype)
        raise UnsupportedKindError(
            f"indices ({indices.dtype}) and indptr ({indptr.dtype}) must share one index kind"
        )

    for name, buf in (("data", data), ("indices", indices), ("indptr", indptr)):
        if buf.ndim != 1:
            raise ShapeMismatchError(f"{name} must be 1-D, got {buf.ndim}-D")
    rows = as_integer(rows, "rows", ShapeMismatchError)
    if n_cols is not None:
        n_cols = as_integer(n_cols, "n_cols")
    if rows < 0:
        raise ShapeMismatchError(f"rows must be non-negative, got {rows}")

    if indptr.shape[0] != rows + 1:
        raise ShapeMismatchError(
            f"indptr length {indptr.shape[0]} does not match rows + 1 = {rows + 1}"
        )
    if indices.shape[0] != data.shape[0]:
        raise ShapeMismatchError(
            f"indices length {indices.shape[0]} does not match data length {data.shape[0]}"
        )

    if rows > 0:
        drops = np.flatnonzero(indptr[1:] < indptr[:-1])
        if drops.size:
            pos = int(drops[0])
            raise MonotonicityError(
                f"indptr decreases at position {pos + 1}: "
                f"{int(indptr[pos])} -> {int(indptr[pos + 1])}",
                position=pos,
            )

    nnz = data.shape[0]
    if int(indptr[0]) != 0:
        raise ShapeMismatchError(f"indptr[0] must be 0, got {int(indptr[0])}")
    if int(indptr[-1]) != nnz:
        raise ShapeMismatchError(
            f"indptr[-1] = {int(indptr[-1])} does not match data length {nnz}"
        )

    if n_cols is not None and check_indices and nnz:
        lo = int(indices.min())
        hi = int(indices.max())
        if lo < 0 or hi >= n_cols:
            bad = lo if lo < 0 else hi
            raise ShapeMismatchError(
                f"column index {bad} out of range for {n_cols} columns",
                code=CSRKIT_ERROR_INDEX_OUT_OF_BOUNDS,
            )

    return kind, index_kind


@dataclass(frozen=True, eq=False)
class SparseMatrixView:
    """Read-only view over CSR buffers.

    Attributes:
        data: Stored values (float32 or float64).
        indices: Column indices (int32 or int64).
        indptr: Row pointers (same kind as indices).
        rows: Number of rows.
        n_cols: Number of columns, or None when unknown.
    """

    data: np.ndarray
    indices: np.ndarray
    indptr: np.ndarray
    rows: int
    n_cols: Optional[int] = None

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_arrays(
        cls,
        data: Any,
        indices: Any,
        indptr: Any,
        rows: Optional[int] = None,
        n_cols: Optional[int] = None,
    ) -> "SparseMatrixView":
        """Wrap buffers; ndarrays are used as-is, never copied.

        Args:
            data: Stored values.
            indices: Column indices.
            indptr: Row pointers.
            rows: Number of rows (default: ``len(indptr) - 1``).
            n_cols: Number of columns, if known.
        """
        data = np.asarray(data)
        indices = np.asarray(indices)
        indptr = np.asarray(indptr)
        if rows is None:
            rows = max(indptr.shape[0] - 1, 0) if indptr.ndim == 1 else 0
        rows = as_integer(rows, "rows", ShapeMismatchError)
        if n_cols is not None:
            n_cols = as_integer(n_cols, "n_cols")
        return cls(data, indices, indptr, rows, n_cols)

    @classmethod
    def from_scipy(cls, matrix: Any) -> "SparseMatrixView":
        """Borrow the buffers of a scipy CSR matrix or array.

        Raises:
            InvalidArgumentError: If ``matrix`` is not in CSR format.
        """
        import scipy.sparse as sp

        if not sp.issparse(matrix) or matrix.format != "csr":
            fmt = getattr(matrix, "format", type(matrix).__name__)
            raise InvalidArgumentError(f"Expected a scipy CSR matrix, got {fmt}")
        rows, cols = matrix.shape
        return cls(matrix.data, matrix.indices, matrix.indptr, int(rows), int(cols))

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def kind(self) -> ElementKind:
        return ElementKind.from_dtype(self.data.dtype)

    @property
    def index_kind(self) -> IndexKind:
        return IndexKind.from_dtype(self.indptr.dtype)

    @property
    def variant(self) -> str:
        return variant(self.kind, self.index_kind)

    @property
    def nnz(self) -> int:
        return int(self.data.shape[0])

    @property
    def shape(self) -> Tuple[int, int]:
        if self.n_cols is None:
            raise InvalidArgumentError("Column count unknown for this view")
        return (self.rows, self.n_cols)

    # =========================================================================
    # Operations
    # =========================================================================

    def validate(self, check_indices: Optional[bool] = None) -> "SparseMatrixView":
        """Run the CSR invariant checks and return self."""
        validate_csr(
            self.data, self.indices, self.indptr, self.rows, self.n_cols,
            get_config().resolve_check_indices(check_indices),
        )
        return self

    def row_lengths(self) -> np.ndarray:
        """Number of stored entries per row."""
        return np.diff(self.indptr)

    def to_scipy(self):
        """scipy ``csr_matrix`` sharing this view's buffers."""
        import scipy.sparse as sp

        if self.n_cols is None:
            raise InvalidArgumentError("Column count unknown; cannot build a scipy matrix")
        return sp.csr_matrix(
            (self.data, self.indices, self.indptr),
            shape=(self.rows, self.n_cols),
            copy=False,
        )

    def __repr__(self) -> str:
        cols = "?" if self.n_cols is None else self.n_cols
        return (
            f"SparseMatrixView(shape=({self.rows}, {cols}), nnz={self.nnz}, "
            f"dtype={self.data.dtype})"
        )
