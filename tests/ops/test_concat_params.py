import numpy as np
import pytest
from loose_concat.ops.errors import ConfigError
from loose_concat.ops.params import ConcatParam


def test_from_attrs_empty():
    param = ConcatParam.from_attrs(None)
    assert not param.has_axis
    assert not param.has_concat_dim


def test_from_attrs_accepts_numpy_integers():
    param = ConcatParam.from_attrs({"axis": np.int64(-1)})
    assert param.axis == -1
    assert isinstance(param.axis, int)


@pytest.mark.parametrize(
    "attrs",
    [{"axis": 1.0}, {"axis": "1"}, {"concat_dim": True}, {"dim": 0}],
)
def test_from_attrs_rejects_bad_values(attrs):
    with pytest.raises(ConfigError):
        ConcatParam.from_attrs(attrs)


@pytest.mark.parametrize(
    "concat_dim, expected",
    [(0, 0), (3, 3), (2**31 - 1, 2**31 - 1), (2**31, -(2**31)), (2**32 - 1, -1), (-1, -1)],
)
def test_concat_dim_as_int32(concat_dim, expected):
    assert ConcatParam(concat_dim=concat_dim).concat_dim_as_int32() == expected


@pytest.mark.parametrize("concat_dim", [2**32, 2**32 + 1, 2**40])
def test_concat_dim_beyond_uint32_rejected(concat_dim):
    with pytest.raises(ConfigError):
        ConcatParam(concat_dim=concat_dim).concat_dim_as_int32()


def test_large_negative_concat_dim_stays_negative():
    assert ConcatParam(concat_dim=-(2**32) + 1).concat_dim_as_int32() < 0
