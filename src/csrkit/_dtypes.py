"""
csrkit DTypes - Element and Index Kinds

Defines the closed set of numeric kinds kernels are specialized for, and
the mapping from numpy dtypes onto them. Nothing here converts data: a
dtype either maps onto a kind or is rejected.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

import numba
import numpy as np

from .errors import UnsupportedKindError


# =============================================================================
# Kind Enumerations
# =============================================================================

class ElementKind(Enum):
    """Element kind of a CSR ``data`` buffer."""
    FLOAT32 = "f32"
    FLOAT64 = "f64"

    @property
    def dtype(self) -> np.dtype:
        """Corresponding numpy dtype."""
        return _KIND_INFO[self]["dtype"]

    @property
    def scalar_type(self) -> type:
        """Numpy scalar constructor (``np.float32`` / ``np.float64``)."""
        return _KIND_INFO[self]["scalar"]

    @property
    def numba_type(self):
        """Numba scalar type used in kernel signatures."""
        return _KIND_INFO[self]["numba"]

    @property
    def itemsize(self) -> int:
        """Size in bytes of one element."""
        return self.dtype.itemsize

    @classmethod
    def from_dtype(cls, dtype: Any) -> "ElementKind":
        """Get ElementKind from a numpy dtype (or anything ``np.dtype`` accepts).

        Raises:
            UnsupportedKindError: If the dtype is not float32 or float64.
        """
        return _lookup(cls, dtype, "element")


class IndexKind(Enum):
    """Index kind of CSR ``indices`` / ``indptr`` buffers."""
    INT32 = "i32"
    INT64 = "i64"

    @property
    def dtype(self) -> np.dtype:
        return _KIND_INFO[self]["dtype"]

    @property
    def scalar_type(self) -> type:
        return _KIND_INFO[self]["scalar"]

    @property
    def numba_type(self):
        return _KIND_INFO[self]["numba"]

    @property
    def itemsize(self) -> int:
        return self.dtype.itemsize

    @classmethod
    def from_dtype(cls, dtype: Any) -> "IndexKind":
        """Get IndexKind from a numpy dtype.

        Raises:
            UnsupportedKindError: If the dtype is not int32 or int64.
        """
        return _lookup(cls, dtype, "index")

    @classmethod
    def from_name(cls, name: str) -> "IndexKind":
        """Get IndexKind from ``'i32'``/``'int32'``/``'i64'``/``'int64'``."""
        key = name.strip().lower()
        aliases = {
            "i32": cls.INT32,
            "int32": cls.INT32,
            "i64": cls.INT64,
            "int64": cls.INT64,
        }
        if key not in aliases:
            raise UnsupportedKindError(f"Unknown index kind name: {name!r}")
        return aliases[key]


# Kind information table
_KIND_INFO: Dict[Enum, Dict[str, Any]] = {
    ElementKind.FLOAT32: {
        "dtype": np.dtype(np.float32),
        "scalar": np.float32,
        "numba": numba.float32,
    },
    ElementKind.FLOAT64: {
        "dtype": np.dtype(np.float64),
        "scalar": np.float64,
        "numba": numba.float64,
    },
    IndexKind.INT32: {
        "dtype": np.dtype(np.int32),
        "scalar": np.int32,
        "numba": numba.int32,
    },
    IndexKind.INT64: {
        "dtype": np.dtype(np.int64),
        "scalar": np.int64,
        "numba": numba.int64,
    },
}


def _lookup(enum_cls, dtype: Any, label: str):
    # np.dtype(None) means float64
    if dtype is None:
        raise UnsupportedKindError(f"Missing {label} kind: got None")
    try:
        dt = np.dtype(dtype)
    except TypeError as e:
        raise UnsupportedKindError(f"Cannot interpret {dtype!r} as a dtype: {e}") from e
    for kind in enum_cls:
        # Exact match only: byte-swapped and wider/narrower dtypes are rejected
        if dt == _KIND_INFO[kind]["dtype"]:
            return kind
    supported = ", ".join(str(_KIND_INFO[k]["dtype"]) for k in enum_cls)
    raise UnsupportedKindError(
        f"Unsupported {label} kind {dt}; expected one of: {supported}"
    )


# =============================================================================
# Helpers
# =============================================================================

def variant(kind: ElementKind, index_kind: IndexKind) -> str:
    """Variant name of a specialization, e.g. ``'f32_i32'``."""
    return f"{kind.value}_{index_kind.value}"


__all__ = [
    "ElementKind",
    "IndexKind",
    "variant",
]
