"""
Numeric kernel dispatch.

Selects the kernel specialization for an operation from the element kind of
the caller's buffer. The kind is read once, at the entry point that receives
the typed buffer; the kernel that comes back is compiled for that kind only
and never inspects types itself.

Specializations live in a process-wide function-pointer table keyed by
``(family, element kind, index kind, parallel)``. Entries are compiled on
first use and never rebound, so dispatching the same arguments twice
returns the same object.

Example:
    >>> import numpy as np
    >>> from csrkit.dispatch import dispatch, select_kind, Operation
    >>> data = np.array([3.0, 4.0], dtype=np.float32)
    >>> spec = dispatch(select_kind(data), Operation.L2_NORM)
    >>> spec.variant
    'f32_i32'
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union

import numpy as np

from ._config import get_config
from ._dtypes import ElementKind, IndexKind, variant
from ._kernel import normalize as _normalize
from ._kernel import reduce as _reduce
from .errors import InvalidArgumentError

logger = logging.getLogger("csrkit.dispatch")


# =============================================================================
# Operations
# =============================================================================

FAMILY_FOLD_SUM = "fold:sum"
FAMILY_FOLD_SQUARE = "fold:square"
FAMILY_FOLD_ABS = "fold:abs"
FAMILY_MOMENTS = "moments"
FAMILY_SCALE = "scale"


def sqrt_inplace(out: np.ndarray) -> np.ndarray:
    """Square-root post-pass; writes into ``out`` and keeps its dtype."""
    return np.sqrt(out, out=out)


class Operation(Enum):
    """Row operations understood by the engine."""
    SUM = "sum"
    SUM_SQUARES = "sum_squares"
    L1_NORM = "l1_norm"
    L2_NORM = "l2_norm"
    MEAN = "mean"
    VARIANCE = "variance"

    @property
    def family(self) -> str:
        """Kernel family this operation runs on."""
        return _OP_INFO[self]["family"]

    @property
    def identity(self) -> float:
        """Value of an empty row."""
        return _OP_INFO[self]["identity"]

    @property
    def post_pass(self) -> Optional[Callable[[np.ndarray], np.ndarray]]:
        return _OP_INFO[self]["post"]

    @property
    def needs_n_cols(self) -> bool:
        """Whether implicit zeros (and so the column count) matter."""
        return self.family == FAMILY_MOMENTS

    @classmethod
    def coerce(cls, value: Union["Operation", str]) -> "Operation":
        """Accept an Operation or a case-insensitive name/alias."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            for op in cls:
                if op.value == key:
                    return op
            if key in _ALIASES:
                return _ALIASES[key]
        raise InvalidArgumentError(
            f"Unknown operation {value!r}; expected one of: "
            + ", ".join(op.value for op in cls)
        )


_OP_INFO: Dict[Operation, Dict[str, Any]] = {
    Operation.SUM: {"family": FAMILY_FOLD_SUM, "identity": 0.0, "post": None},
    Operation.SUM_SQUARES: {"family": FAMILY_FOLD_SQUARE, "identity": 0.0, "post": None},
    Operation.L1_NORM: {"family": FAMILY_FOLD_ABS, "identity": 0.0, "post": None},
    Operation.L2_NORM: {"family": FAMILY_FOLD_SQUARE, "identity": 0.0, "post": sqrt_inplace},
    Operation.MEAN: {"family": FAMILY_MOMENTS, "identity": 0.0, "post": None},
    Operation.VARIANCE: {"family": FAMILY_MOMENTS, "identity": 0.0, "post": None},
}

_ALIASES = {
    "l1": Operation.L1_NORM,
    "l2": Operation.L2_NORM,
    "norm": Operation.L2_NORM,
    "sum_of_squares": Operation.SUM_SQUARES,
    "var": Operation.VARIANCE,
}

_COMBINE = {
    FAMILY_FOLD_SUM: _reduce.combine_sum,
    FAMILY_FOLD_SQUARE: _reduce.combine_square,
    FAMILY_FOLD_ABS: _reduce.combine_abs,
}


# =============================================================================
# Specialization
# =============================================================================

@dataclass(frozen=True)
class Specialization:
    """An operation bound to one concrete element kind and index kind.

    Attributes:
        op: The operation.
        kind: Element kind of data and result.
        index_kind: Index kind of ``indptr``.
        parallel: Whether the kernel runs rows in parallel.
        kernel: Compiled kernel (see ``csrkit._kernel``).
        identity: Empty-row value, already cast to ``kind``.
        post_pass: Optional in-place elementwise pass over the result.
    """
    op: Operation
    kind: ElementKind
    index_kind: IndexKind
    parallel: bool
    kernel: Callable[..., None]
    identity: Any
    post_pass: Optional[Callable[[np.ndarray], np.ndarray]] = None

    @property
    def variant(self) -> str:
        return variant(self.kind, self.index_kind)

    @property
    def family(self) -> str:
        return self.op.family


# =============================================================================
# Function-Pointer Table
# =============================================================================

TableKey = Tuple[str, ElementKind, IndexKind, bool]


class SpecializationTable:
    """Lazily compiled map from kernel key to compiled kernel.

    Keys are ``(family, kind, index_kind, parallel)``. An entry, once
    stored, is never replaced; ``clear`` drops all of them at once.
    """

    def __init__(self):
        self._kernels: Dict[TableKey, Callable[..., None]] = {}
        self._specs: Dict[Tuple[Operation, ElementKind, IndexKind, bool], Specialization] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._kernels)

    def __contains__(self, key: TableKey) -> bool:
        return key in self._kernels

    def entries(self) -> Tuple[TableKey, ...]:
        """Snapshot of the compiled keys."""
        with self._lock:
            return tuple(self._kernels)

    def clear(self) -> None:
        """Drop every entry; the next lookup recompiles."""
        with self._lock:
            self._kernels.clear()
            self._specs.clear()

    def kernel(
        self,
        family: str,
        kind: ElementKind,
        index_kind: IndexKind,
        parallel: bool,
    ) -> Callable[..., None]:
        """Return the compiled kernel for a key, compiling it on first use."""
        key = (family, kind, index_kind, parallel)
        found = self._kernels.get(key)
        if found is not None:
            return found
        with self._lock:
            found = self._kernels.get(key)
            if found is None:
                logger.debug(
                    "Compiling %s kernel for %s (parallel=%s)",
                    family, variant(kind, index_kind), parallel,
                )
                found = _compile(family, kind, index_kind, parallel)
                self._kernels[key] = found
            return found

    def lookup(
        self,
        op: Operation,
        kind: ElementKind,
        index_kind: IndexKind,
        parallel: bool,
    ) -> Specialization:
        """Return the Specialization for an operation, building it on first use."""
        key = (op, kind, index_kind, parallel)
        found = self._specs.get(key)
        if found is not None:
            return found
        kernel = self.kernel(op.family, kind, index_kind, parallel)
        with self._lock:
            found = self._specs.get(key)
            if found is None:
                found = Specialization(
                    op=op,
                    kind=kind,
                    index_kind=index_kind,
                    parallel=parallel,
                    kernel=kernel,
                    identity=kind.scalar_type(op.identity),
                    post_pass=op.post_pass,
                )
                self._specs[key] = found
            return found


def _compile(family: str, kind: ElementKind, index_kind: IndexKind, parallel: bool):
    if family in _COMBINE:
        return _reduce.make_fold_kernel(_COMBINE[family], 0.0, kind, index_kind, parallel)
    if family == FAMILY_MOMENTS:
        return _reduce.make_moments_kernel(kind, index_kind, parallel)
    if family == FAMILY_SCALE:
        return _normalize.make_scale_kernel(kind, index_kind, parallel)
    raise InvalidArgumentError(f"Unknown kernel family: {family!r}")


# Global table instance
_table = SpecializationTable()


def get_table() -> SpecializationTable:
    """Get the process-wide specialization table."""
    return _table


# =============================================================================
# Public API
# =============================================================================

def select_kind(buffer: Any) -> ElementKind:
    """
    Derive the element kind from a buffer's declared dtype.

    The buffer is not converted; only its dtype is inspected.

    Raises:
        UnsupportedKindError: If the dtype is not float32 or float64.
    """
    dtype = getattr(buffer, "dtype", None)
    if dtype is None:
        dtype = np.asarray(buffer).dtype
    return ElementKind.from_dtype(dtype)


def dispatch(
    kind: Union[ElementKind, Any],
    op: Union[Operation, str],
    index_kind: Union[IndexKind, Any, None] = None,
    parallel: Optional[bool] = None,
) -> Specialization:
    """
    Select the specialization of ``op`` for an element kind.

    Args:
        kind: ElementKind, or a dtype to map onto one
        op: Operation or operation name
        index_kind: IndexKind or dtype of ``indptr``; defaults to the
            configured default index kind
        parallel: Override the global parallel option

    Returns:
        Specialization bound to (kind, index_kind)

    Raises:
        UnsupportedKindError: If kind or index_kind is outside the supported set
        InvalidArgumentError: If op is unknown
    """
    config = get_config()
    if not isinstance(kind, ElementKind):
        kind = ElementKind.from_dtype(kind)
    if index_kind is None:
        index_kind = config.default_index
    elif not isinstance(index_kind, IndexKind):
        index_kind = IndexKind.from_dtype(index_kind)
    return _table.lookup(
        Operation.coerce(op), kind, index_kind, config.resolve_parallel(parallel),
    )


def dispatch_scale(
    kind: ElementKind,
    index_kind: IndexKind,
    parallel: Optional[bool] = None,
) -> Callable[..., None]:
    """Select the row-scaling kernel used by ``normalize_rows``."""
    return _table.kernel(FAMILY_SCALE, kind, index_kind, get_config().resolve_parallel(parallel))


__all__ = [
    "Operation",
    "Specialization",
    "SpecializationTable",
    "get_table",
    "select_kind",
    "dispatch",
    "dispatch_scale",
    "sqrt_inplace",
]
