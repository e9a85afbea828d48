"""
Pytest configuration and shared fixtures for csrkit tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import scipy.sparse as sp

import csrkit
from csrkit import SparseMatrixView


FLOAT_DTYPES = [np.float32, np.float64]
INDEX_DTYPES = [np.int32, np.int64]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def restore_options():
    """Put global options back after every test."""
    previous = csrkit.get_options()
    yield
    csrkit.set_options(**previous)


@pytest.fixture(params=FLOAT_DTYPES, ids=["f32", "f64"])
def float_dtype(request):
    return np.dtype(request.param)


@pytest.fixture(params=INDEX_DTYPES, ids=["i32", "i64"])
def index_dtype(request):
    return np.dtype(request.param)


@pytest.fixture
def dense_matrix_small():
    """Small dense matrix (3x4) the CSR fixtures are built from.

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    return np.array([
        [1, 0, 2, 0],
        [0, 3, 0, 4],
        [5, 0, 0, 6]
    ], dtype=np.float64)


@pytest.fixture
def small_csr_arrays(float_dtype):
    """Raw CSR buffers of ``dense_matrix_small`` as (data, indices, indptr)."""
    data = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], dtype=float_dtype)
    indices = np.array([0, 2, 1, 3, 0, 3], dtype=np.int32)
    indptr = np.array([0, 2, 4, 6], dtype=np.int32)
    return data, indices, indptr


@pytest.fixture
def small_view(small_csr_arrays):
    data, indices, indptr = small_csr_arrays
    return SparseMatrixView.from_arrays(data, indices, indptr, rows=3, n_cols=4)


@pytest.fixture
def scipy_csr_matrix(float_dtype, dense_matrix_small):
    """scipy CSR version of ``dense_matrix_small``."""
    return sp.csr_matrix(dense_matrix_small.astype(float_dtype))


@pytest.fixture
def random_csr_matrix(float_dtype):
    """Random 100x200 CSR matrix with a few empty rows."""
    rng = np.random.default_rng(42)
    dense = rng.standard_normal((100, 200))
    dense[rng.random((100, 200)) > 0.1] = 0.0
    dense[[0, 17, 99], :] = 0.0
    return sp.csr_matrix(dense.astype(float_dtype))


@pytest.fixture
def rtol(float_dtype):
    """Relative tolerance suited to the precision results are computed in."""
    return 1e-5 if float_dtype == np.float32 else 1e-12
