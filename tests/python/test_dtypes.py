"""
Tests for element and index kinds.
"""

import numpy as np
import numba
import pytest

from csrkit import ElementKind, IndexKind, UnsupportedKindError
from csrkit._dtypes import variant


class TestElementKind:
    """Test mapping numpy dtypes onto element kinds."""

    @pytest.mark.parametrize("dtype,expected", [
        (np.float32, ElementKind.FLOAT32),
        (np.float64, ElementKind.FLOAT64),
        ("float32", ElementKind.FLOAT32),
        ("f8", ElementKind.FLOAT64),
    ])
    def test_from_dtype(self, dtype, expected):
        """Supported float dtypes map onto their kind."""
        assert ElementKind.from_dtype(dtype) is expected

    @pytest.mark.parametrize("dtype", [
        np.float16, np.int32, np.int64, np.complex64, np.bool_, ">f4",
    ])
    def test_unsupported_dtype(self, dtype):
        """Anything outside {float32, float64} is rejected, never widened."""
        with pytest.raises(UnsupportedKindError):
            ElementKind.from_dtype(dtype)

    def test_uninterpretable_dtype(self):
        """Garbage dtype specs raise UnsupportedKindError, a TypeError."""
        with pytest.raises(TypeError):
            ElementKind.from_dtype("not-a-dtype")

    def test_none_rejected(self):
        """None is not read as numpy's default float64."""
        with pytest.raises(UnsupportedKindError):
            ElementKind.from_dtype(None)
        with pytest.raises(UnsupportedKindError):
            IndexKind.from_dtype(None)

    def test_attributes(self):
        """Each kind exposes matching numpy and numba types."""
        k = ElementKind.FLOAT32
        assert k.dtype == np.dtype(np.float32)
        assert k.scalar_type is np.float32
        assert k.numba_type == numba.float32
        assert k.itemsize == 4
        assert ElementKind.FLOAT64.itemsize == 8

    def test_scalar_type_keeps_kind(self):
        """Casting through scalar_type gives a scalar of the same kind."""
        assert ElementKind.FLOAT32.scalar_type(0).dtype == np.float32


class TestIndexKind:
    """Test index kinds."""

    def test_from_dtype(self):
        assert IndexKind.from_dtype(np.int32) is IndexKind.INT32
        assert IndexKind.from_dtype(np.int64) is IndexKind.INT64

    @pytest.mark.parametrize("dtype", [np.int16, np.uint32, np.float64])
    def test_unsupported_dtype(self, dtype):
        with pytest.raises(UnsupportedKindError):
            IndexKind.from_dtype(dtype)

    @pytest.mark.parametrize("name,expected", [
        ("i32", IndexKind.INT32),
        ("int32", IndexKind.INT32),
        ("I64", IndexKind.INT64),
        (" int64 ", IndexKind.INT64),
    ])
    def test_from_name(self, name, expected):
        assert IndexKind.from_name(name) is expected

    def test_from_name_unknown(self):
        with pytest.raises(UnsupportedKindError):
            IndexKind.from_name("i16")


def test_variant_names():
    """Variant names combine element and index codes."""
    assert variant(ElementKind.FLOAT32, IndexKind.INT32) == "f32_i32"
    assert variant(ElementKind.FLOAT64, IndexKind.INT64) == "f64_i64"
