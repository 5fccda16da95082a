import numpy as np
import pytest
from loose_concat.benchmark.data_gen import DataGenerator
from loose_concat.ir.dtypes import DType


def test_inputs_share_rank():
    inputs = DataGenerator.loose_concat_inputs(5, 1, rank=3, max_extent=4, seed=3)
    assert len(inputs) == 5
    assert {t.num_axes for t in inputs} == {3}
    for t in inputs:
        assert all(1 <= d <= 4 for d in t.shape)
        assert t.dtype == DType.FP32


def test_seed_is_deterministic():
    a = DataGenerator.loose_concat_inputs(2, 0, seed=1)
    b = DataGenerator.loose_concat_inputs(2, 0, seed=1)
    for x, y in zip(a, b):
        np.testing.assert_array_equal(x.value, y.value)


def test_int_tensor():
    t = DataGenerator.random_tensor((2, 2), DType.INT32)
    assert t.value.dtype == np.int32


def test_axis_out_of_range():
    with pytest.raises(ValueError):
        DataGenerator.loose_concat_inputs(2, 4, rank=4)
