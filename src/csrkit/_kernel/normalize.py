"""Normalization kernels.

Row scaling for CSR matrices. The scaled values are written into a
separate output buffer; the caller's ``data`` is only read.
"""

import numba
from numba import types

from .._dtypes import ElementKind, IndexKind
from .reduce import input_array, output_array


__all__ = ['make_scale_kernel']


def make_scale_kernel(
    kind: ElementKind,
    index_kind: IndexKind,
    parallel: bool = False,
):
    """Compile a divide-rows-by-norm kernel.

    Signature: ``(data, indptr, norms, out) -> None`` where ``out`` has the
    length of ``data``. Rows whose norm is zero are copied unchanged.

    Args:
        kind: Element kind of ``data``, ``norms`` and ``out``.
        index_kind: Index kind of ``indptr``.
        parallel: Spread rows over numba's thread pool.
    """
    value_t = kind.numba_type
    sig = types.void(input_array(value_t), input_array(index_kind.numba_type),
                     input_array(value_t), output_array(value_t))
    cast = kind.scalar_type

    @numba.njit(sig, parallel=parallel, nogil=True)
    def scale_rows(data, indptr, norms, out):
        zero = cast(0)
        for i in numba.prange(norms.shape[0]):
            norm = norms[i]
            for k in range(indptr[i], indptr[i + 1]):
                if norm == zero:
                    out[k] = data[k]
                else:
                    out[k] = data[k] / norm

    return scale_rows
