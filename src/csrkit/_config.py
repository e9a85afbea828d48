"""
Global configuration for csrkit.

Provides:
- Parallel execution switch for row kernels
- Column index range checking
- Default index kind assumed by the dispatcher

Defaults are read once from the environment:

    CSRKIT_PARALLEL        '1'/'true'/'yes' enables numba prange kernels
    CSRKIT_CHECK_INDICES   '0'/'false'/'no' disables column index checks
    CSRKIT_INDEX           'i32' or 'i64'
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Union

from ._dtypes import IndexKind
from .errors import InvalidArgumentError, UnsupportedKindError

logger = logging.getLogger("csrkit.config")


_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name, "").strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return default


def _env_index(name: str, default: IndexKind) -> IndexKind:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return IndexKind.from_name(value)
    except UnsupportedKindError:
        logger.warning("Ignoring %s=%r; using %s", name, value, default.value)
        return default


# =============================================================================
# Global Configuration State
# =============================================================================

class _Config:
    """
    Global configuration singleton.

    Per-call keyword arguments always take precedence over these values.
    """

    _OPTIONS = ("parallel", "check_indices", "default_index")

    def __init__(self):
        self._parallel = _env_flag("CSRKIT_PARALLEL", False)
        self._check_indices = _env_flag("CSRKIT_CHECK_INDICES", True)
        self._default_index = _env_index("CSRKIT_INDEX", IndexKind.INT32)

    @property
    def parallel(self) -> bool:
        """Whether kernels run rows on numba's thread pool."""
        return self._parallel

    @parallel.setter
    def parallel(self, value: bool):
        self._parallel = bool(value)

    @property
    def check_indices(self) -> bool:
        """Whether column indices are range-checked when the column count is known."""
        return self._check_indices

    @check_indices.setter
    def check_indices(self, value: bool):
        self._check_indices = bool(value)

    @property
    def default_index(self) -> IndexKind:
        """Index kind assumed by ``dispatch`` when none is given."""
        return self._default_index

    @default_index.setter
    def default_index(self, value: Union[IndexKind, str]):
        if isinstance(value, str):
            value = IndexKind.from_name(value)
        if not isinstance(value, IndexKind):
            raise InvalidArgumentError(f"default_index must be an IndexKind, got {value!r}")
        self._default_index = value

    def resolve_parallel(self, parallel: Optional[bool]) -> bool:
        return self._parallel if parallel is None else bool(parallel)

    def resolve_check_indices(self, check_indices: Optional[bool]) -> bool:
        return self._check_indices if check_indices is None else bool(check_indices)

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self._OPTIONS}

    def update(self, **kwargs: Any) -> None:
        unknown = sorted(set(kwargs) - set(self._OPTIONS))
        if unknown:
            raise InvalidArgumentError(f"Unknown option(s): {', '.join(unknown)}")
        for name, value in kwargs.items():
            if value is None:
                continue
            setattr(self, name, value)
            logger.info("csrkit option %s set to %r", name, getattr(self, name))


# Global config instance
_config = _Config()


# =============================================================================
# Public API
# =============================================================================

def get_config() -> _Config:
    """Get global configuration instance."""
    return _config


def set_options(**kwargs: Any) -> None:
    """
    Set global csrkit options.

    Args:
        parallel: Run row kernels in parallel (bool).
        check_indices: Range-check column indices (bool).
        default_index: Default index kind ('i32', 'i64' or IndexKind).

    Raises:
        InvalidArgumentError: If an option name is unknown.

    Example:
        >>> csrkit.set_options(parallel=True)
    """
    _config.update(**kwargs)


def get_options() -> Dict[str, Any]:
    """
    Get current options.

    Returns:
        Dict with keys 'parallel', 'check_indices' and 'default_index'
    """
    return _config.as_dict()


@contextmanager
def options(**kwargs: Any) -> Iterator[Dict[str, Any]]:
    """
    Temporarily override options, restoring the previous values on exit.

    Example:
        >>> with csrkit.options(parallel=True):
        ...     norms = csrkit.reduce_rows(data, indices, indptr, rows, "l2_norm")
    """
    previous = _config.as_dict()
    _config.update(**kwargs)
    try:
        yield _config.as_dict()
    finally:
        for name, value in previous.items():
            setattr(_config, name, value)
