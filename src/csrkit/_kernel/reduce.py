"""Row reduction kernels.

Kernel factories for CSR row reductions. Each factory compiles one numba
function for exactly one explicit signature, so the returned kernel is a
monomorphized specialization for a single (element kind, index kind)
pair. Arithmetic inside a kernel stays in the element kind: literals are
cast through the kind's scalar type so nothing is promoted to float64.
"""

import numba
from numba import types

from .._dtypes import ElementKind, IndexKind


__all__ = [
    'combine_sum',
    'combine_square',
    'combine_abs',
    'make_fold_kernel',
    'make_moments_kernel',
]


# =============================================================================
# Combine Steps
# =============================================================================

@numba.njit(nogil=True)
def combine_sum(acc, x):
    return acc + x


@numba.njit(nogil=True)
def combine_square(acc, x):
    return acc + x * x


@numba.njit(nogil=True)
def combine_abs(acc, x):
    return acc + abs(x)


# =============================================================================
# Signatures
# =============================================================================

def input_array(numba_type):
    """1-D read-only array type; writable arrays convert to it safely."""
    return types.Array(numba_type, 1, 'A', readonly=True)


def output_array(numba_type):
    return types.Array(numba_type, 1, 'A')


# =============================================================================
# Kernel Factories
# =============================================================================

def make_fold_kernel(
    combine,
    identity: float,
    kind: ElementKind,
    index_kind: IndexKind,
    parallel: bool = False,
):
    """Compile a fold-over-row kernel for one element/index kind.

    The kernel has signature ``(data, indptr, out) -> None`` and writes
    ``out[i] = fold(combine, identity, data[indptr[i]:indptr[i + 1]])``.

    Args:
        combine: Jitted ``(acc, x) -> acc`` step.
        identity: Starting value, cast to the element kind inside the kernel.
        kind: Element kind of ``data`` and ``out``.
        index_kind: Index kind of ``indptr``.
        parallel: Spread rows over numba's thread pool.

    Returns:
        Numba dispatcher compiled for the single signature.
    """
    value_t = kind.numba_type
    sig = types.void(input_array(value_t), input_array(index_kind.numba_type),
                     output_array(value_t))
    cast = kind.scalar_type

    @numba.njit(sig, parallel=parallel, nogil=True)
    def fold_rows(data, indptr, out):
        for i in numba.prange(out.shape[0]):
            acc = cast(identity)
            for k in range(indptr[i], indptr[i + 1]):
                acc = combine(acc, data[k])
            out[i] = acc

    return fold_rows


def make_moments_kernel(
    kind: ElementKind,
    index_kind: IndexKind,
    parallel: bool = False,
):
    """Compile a two-pass row mean/variance kernel.

    Signature: ``(data, indptr, n_cols, ddof, out_mean, out_var) -> None``.
    Implicit zeros count towards both moments:

        mean_i = sum(x) / n_cols
        var_i  = (sum((x - mean_i)^2) + (n_cols - nnz_i) * mean_i^2) / (n_cols - ddof)

    The caller guarantees ``0 <= ddof < n_cols``.
    """
    value_t = kind.numba_type
    sig = types.void(input_array(value_t), input_array(index_kind.numba_type),
                     types.int64, types.int64,
                     output_array(value_t), output_array(value_t))
    cast = kind.scalar_type

    @numba.njit(sig, parallel=parallel, nogil=True)
    def row_moments(data, indptr, n_cols, ddof, out_mean, out_var):
        n = cast(n_cols)
        denom = cast(n_cols - ddof)
        for i in numba.prange(out_mean.shape[0]):
            start = indptr[i]
            end = indptr[i + 1]

            total = cast(0)
            for k in range(start, end):
                total += data[k]
            mean = total / n

            sq = cast(0)
            for k in range(start, end):
                diff = data[k] - mean
                sq += diff * diff
            implicit = cast(n_cols - (end - start))
            sq += implicit * mean * mean

            out_mean[i] = mean
            out_var[i] = sq / denom

    return row_moments
