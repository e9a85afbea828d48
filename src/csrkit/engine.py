"""
Row-Reduction Engine.

Computes one aggregate per CSR row with a kernel specialized for the
element kind of the input. The result buffer has the same dtype as
``data``; accumulation never widens to a larger float.

Per call the engine:
    1. validates the buffers (fail fast, nothing allocated yet)
    2. resolves one Specialization from the dispatch table
    3. allocates the result buffer and runs the kernel over all rows
    4. applies the operation's post-pass in place, if any

Example:
    >>> import numpy as np
    >>> import csrkit
    >>> csrkit.reduce_rows(
    ...     np.array([3.0, 4.0]), np.array([0, 1], dtype=np.int32),
    ...     np.array([0, 2], dtype=np.int32), 1, "l2_norm")
    array([5.])
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple, Union

import numpy as np

from .dispatch import Operation, Specialization, dispatch, dispatch_scale
from .errors import InvalidArgumentError
from ._config import get_config
from .sparse import SparseMatrixView, validate_csr
from .sparse._view import as_integer

logger = logging.getLogger("csrkit.engine")


# =============================================================================
# Argument Checks
# =============================================================================

def _check_op_args(op: Operation, n_cols: Optional[int], ddof: int) -> None:
    # numba would truncate a float ddof in the int64 slot
    as_integer(ddof, "ddof")
    if not op.needs_n_cols:
        return
    if n_cols is None:
        raise InvalidArgumentError(f"{op.value} needs n_cols (implicit zeros count)")
    if n_cols < 1:
        raise InvalidArgumentError(f"{op.value} needs n_cols >= 1, got {n_cols}")
    if op is Operation.VARIANCE and not 0 <= ddof < n_cols:
        raise InvalidArgumentError(f"ddof must be in [0, {n_cols}), got {ddof}")


def _prepare(
    view: SparseMatrixView,
    op: Union[Operation, str],
    ddof: int,
    parallel: Optional[bool],
    check_indices: Optional[bool],
) -> Specialization:
    op = Operation.coerce(op)
    kind, index_kind = validate_csr(
        view.data, view.indices, view.indptr, view.rows, view.n_cols,
        get_config().resolve_check_indices(check_indices),
    )
    _check_op_args(op, view.n_cols, ddof)
    spec = dispatch(kind, op, index_kind, parallel)
    logger.debug(
        "Bound %s for %s: rows=%d nnz=%d parallel=%s",
        op.value, spec.variant, view.rows, view.nnz, spec.parallel,
    )
    return spec


def _run_moments(
    spec: Specialization,
    view: SparseMatrixView,
    ddof: int,
) -> Tuple[np.ndarray, np.ndarray]:
    means = np.empty(view.rows, dtype=spec.kind.dtype)
    variances = np.empty(view.rows, dtype=spec.kind.dtype)
    spec.kernel(view.data, view.indptr, view.n_cols, as_integer(ddof, "ddof"), means, variances)
    return means, variances


# =============================================================================
# Public API
# =============================================================================

def reduce_view(
    view: SparseMatrixView,
    op: Union[Operation, str],
    *,
    ddof: int = 0,
    parallel: Optional[bool] = None,
    check_indices: Optional[bool] = None,
) -> np.ndarray:
    """Reduce every row of a view with one operation.

    Args:
        view: CSR view; its buffers are only read.
        op: Operation or operation name.
        ddof: Delta degrees of freedom for ``VARIANCE``.
        parallel: Override the global parallel option.
        check_indices: Override the global index-checking option.

    Returns:
        New array of length ``view.rows`` with ``view.data``'s dtype.

    Raises:
        UnsupportedKindError: Element or index kind outside the supported set.
        ShapeMismatchError: Buffer lengths violate the CSR layout.
        MonotonicityError: ``indptr`` decreases.
        InvalidArgumentError: Unknown operation or bad n_cols/ddof.
    """
    spec = _prepare(view, op, ddof, parallel, check_indices)

    if spec.op is Operation.MEAN:
        return _run_moments(spec, view, 0)[0]
    if spec.op is Operation.VARIANCE:
        return _run_moments(spec, view, ddof)[1]

    out = np.empty(view.rows, dtype=spec.kind.dtype)
    spec.kernel(view.data, view.indptr, out)
    if spec.post_pass is not None:
        spec.post_pass(out)
    return out


def reduce_rows(
    data: Any,
    indices: Any,
    indptr: Any,
    rows: int,
    op: Union[Operation, str],
    *,
    n_cols: Optional[int] = None,
    ddof: int = 0,
    parallel: Optional[bool] = None,
    check_indices: Optional[bool] = None,
) -> np.ndarray:
    """Reduce every row of a CSR matrix given as raw buffers.

    The element kind is taken from ``data``'s dtype: float32 in, float32
    out. Buffers are wrapped with ``np.asarray`` so ndarrays are never
    copied; plain Python lists become int64/float64 arrays first.

    Args:
        data: Stored values (float32 or float64).
        indices: Column indices (int32 or int64).
        indptr: Row pointers, length ``rows + 1``.
        rows: Number of rows.
        op: Operation or operation name ('sum', 'sum_squares', 'l1_norm',
            'l2_norm', 'mean', 'variance').
        n_cols: Number of columns; required for 'mean' and 'variance'.
        ddof: Delta degrees of freedom for 'variance'.
        parallel: Override the global parallel option.
        check_indices: Override the global index-checking option.

    Returns:
        New array of per-row results with ``data``'s dtype.
    """
    view = SparseMatrixView.from_arrays(data, indices, indptr, rows, n_cols)
    return reduce_view(view, op, ddof=ddof, parallel=parallel, check_indices=check_indices)


def row_mean_variance(
    view: SparseMatrixView,
    ddof: int = 0,
    parallel: Optional[bool] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Row means and variances (implicit zeros included) in one kernel pass.

    Returns:
        ``(means, variances)``, both with ``view.data``'s dtype.
    """
    spec = _prepare(view, Operation.VARIANCE, ddof, parallel, None)
    return _run_moments(spec, view, ddof)


def normalize_data(
    view: SparseMatrixView,
    norm: str = "l2",
    parallel: Optional[bool] = None,
) -> np.ndarray:
    """Scaled copy of ``view.data`` with unit-norm rows.

    Args:
        view: CSR view; ``view.data`` is not modified.
        norm: 'l1' or 'l2'.
        parallel: Override the global parallel option.

    Returns:
        New data buffer, same dtype and length as ``view.data``. Rows with
        zero norm are copied unchanged.
    """
    ops = {"l1": Operation.L1_NORM, "l2": Operation.L2_NORM}
    if norm not in ops:
        raise InvalidArgumentError(f"norm must be 'l1' or 'l2', got {norm!r}")
    spec = _prepare(view, ops[norm], 0, parallel, None)

    norms = np.empty(view.rows, dtype=spec.kind.dtype)
    spec.kernel(view.data, view.indptr, norms)
    if spec.post_pass is not None:
        spec.post_pass(norms)

    out = np.empty_like(view.data)
    scale = dispatch_scale(spec.kind, spec.index_kind, spec.parallel)
    scale(view.data, view.indptr, norms, out)
    return out


__all__ = [
    "reduce_rows",
    "reduce_view",
    "row_mean_variance",
    "normalize_data",
]
