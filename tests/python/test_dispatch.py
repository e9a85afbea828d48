"""
Tests for the kernel dispatcher and the specialization table.
"""

import numpy as np
import pytest

import csrkit
from csrkit import (
    ElementKind,
    IndexKind,
    InvalidArgumentError,
    Operation,
    UnsupportedKindError,
)
from csrkit.dispatch import (
    SpecializationTable,
    dispatch,
    dispatch_scale,
    get_table,
    select_kind,
    sqrt_inplace,
)


class TestOperation:
    """Test operation identifiers."""

    @pytest.mark.parametrize("name,expected", [
        ("sum", Operation.SUM),
        ("SUM_SQUARES", Operation.SUM_SQUARES),
        ("sum-of-squares", Operation.SUM_SQUARES),
        ("l1", Operation.L1_NORM),
        ("l2", Operation.L2_NORM),
        ("L2_norm", Operation.L2_NORM),
        ("mean", Operation.MEAN),
        ("var", Operation.VARIANCE),
    ])
    def test_coerce(self, name, expected):
        assert Operation.coerce(name) is expected

    def test_coerce_member(self):
        assert Operation.coerce(Operation.MEAN) is Operation.MEAN

    @pytest.mark.parametrize("value", ["median", "", 3, None])
    def test_coerce_unknown(self, value):
        with pytest.raises(InvalidArgumentError):
            Operation.coerce(value)

    def test_identity_and_post_pass(self):
        assert Operation.SUM.identity == 0.0
        assert Operation.SUM_SQUARES.post_pass is None
        assert Operation.L2_NORM.post_pass is sqrt_inplace

    def test_needs_n_cols(self):
        assert Operation.MEAN.needs_n_cols
        assert Operation.VARIANCE.needs_n_cols
        assert not Operation.L2_NORM.needs_n_cols


class TestSelectKind:
    """Test kind selection from buffers."""

    def test_from_ndarray(self, float_dtype):
        buf = np.zeros(3, dtype=float_dtype)
        assert select_kind(buf).dtype == float_dtype

    def test_from_list(self):
        assert select_kind([1.0, 2.0]) is ElementKind.FLOAT64

    def test_int_list_rejected(self):
        with pytest.raises(UnsupportedKindError):
            select_kind([1, 2])

    def test_does_not_convert(self):
        """Selection only reads the dtype."""
        buf = np.arange(4, dtype=np.float32)
        buf.setflags(write=False)
        assert select_kind(buf) is ElementKind.FLOAT32


class TestDispatch:
    """Test specialization selection."""

    def test_bound_to_kind(self, float_dtype, index_dtype):
        spec = dispatch(float_dtype, Operation.L2_NORM, index_dtype)
        assert spec.kind.dtype == float_dtype
        assert spec.index_kind.dtype == index_dtype
        assert spec.op is Operation.L2_NORM
        assert spec.post_pass is sqrt_inplace

    def test_identity_has_kind(self, float_dtype):
        spec = dispatch(float_dtype, "sum")
        assert spec.identity == 0
        assert spec.identity.dtype == float_dtype

    def test_deterministic(self):
        """Same arguments give the very same specialization."""
        a = dispatch(ElementKind.FLOAT32, "l2_norm", IndexKind.INT32, parallel=False)
        b = dispatch(np.float32, Operation.L2_NORM, np.int32, parallel=False)
        assert a is b

    def test_kinds_get_distinct_kernels(self):
        f32 = dispatch(ElementKind.FLOAT32, "sum", parallel=False)
        f64 = dispatch(ElementKind.FLOAT64, "sum", parallel=False)
        assert f32.kernel is not f64.kernel

    def test_one_signature_per_kernel(self, float_dtype):
        """Each kernel is compiled for exactly one concrete signature."""
        spec = dispatch(float_dtype, "sum_squares", parallel=False)
        assert len(spec.kernel.signatures) == 1

    def test_shared_family_kernel(self):
        """SUM_SQUARES and L2_NORM share one compiled kernel."""
        sq = dispatch(ElementKind.FLOAT64, "sum_squares", parallel=False)
        l2 = dispatch(ElementKind.FLOAT64, "l2_norm", parallel=False)
        assert sq.kernel is l2.kernel
        assert sq is not l2

    def test_unsupported_kind(self):
        with pytest.raises(UnsupportedKindError):
            dispatch(np.int64, "sum")
        with pytest.raises(UnsupportedKindError):
            dispatch(np.float16, "sum")

    def test_none_kind(self):
        with pytest.raises(UnsupportedKindError):
            dispatch(None, "sum")

    def test_unsupported_index_kind(self):
        with pytest.raises(UnsupportedKindError):
            dispatch(np.float32, "sum", np.uint8)

    def test_unknown_operation(self):
        with pytest.raises(InvalidArgumentError):
            dispatch(np.float32, "median")

    def test_default_index_from_config(self):
        csrkit.set_options(default_index="i64")
        assert dispatch(np.float64, "sum").index_kind is IndexKind.INT64

    def test_parallel_from_config(self):
        csrkit.set_options(parallel=True)
        assert dispatch(np.float64, "sum").parallel is True
        assert dispatch(np.float64, "sum", parallel=False).parallel is False

    def test_variant(self):
        spec = dispatch(np.float32, "sum", np.int64)
        assert spec.variant == "f32_i64"


class TestSpecializationTable:
    """Test the function-pointer table itself."""

    def test_lazy_fill(self):
        table = SpecializationTable()
        assert len(table) == 0
        table.kernel("fold:sum", ElementKind.FLOAT32, IndexKind.INT32, False)
        assert ("fold:sum", ElementKind.FLOAT32, IndexKind.INT32, False) in table
        assert len(table) == 1

    def test_entry_never_rebound(self):
        table = SpecializationTable()
        first = table.kernel("fold:abs", ElementKind.FLOAT64, IndexKind.INT32, False)
        second = table.kernel("fold:abs", ElementKind.FLOAT64, IndexKind.INT32, False)
        assert first is second
        assert table.entries() == (("fold:abs", ElementKind.FLOAT64, IndexKind.INT32, False),)

    def test_clear(self):
        table = SpecializationTable()
        spec = table.lookup(Operation.SUM, ElementKind.FLOAT32, IndexKind.INT32, False)
        table.clear()
        assert len(table) == 0
        assert table.lookup(Operation.SUM, ElementKind.FLOAT32, IndexKind.INT32, False) is not spec

    def test_unknown_family(self):
        with pytest.raises(InvalidArgumentError):
            SpecializationTable().kernel("fold:max", ElementKind.FLOAT32, IndexKind.INT32, False)

    def test_global_table_records_dispatch(self):
        dispatch(np.float32, "l1", np.int64, parallel=False)
        assert ("fold:abs", ElementKind.FLOAT32, IndexKind.INT64, False) in get_table()

    def test_scale_kernel(self):
        kernel = dispatch_scale(ElementKind.FLOAT32, IndexKind.INT32, parallel=False)
        assert kernel is dispatch_scale(ElementKind.FLOAT32, IndexKind.INT32, parallel=False)


def test_sqrt_inplace_keeps_dtype():
    out = np.array([9.0, 16.0], dtype=np.float32)
    result = sqrt_inplace(out)
    assert result is out
    assert out.dtype == np.float32
    np.testing.assert_array_equal(out, [3.0, 4.0])
