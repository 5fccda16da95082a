import pytest
from loose_concat.backend.registry import KernelRegistry, FORWARD, BACKWARD
from loose_concat.ir.dtypes import Backend, KernelUnavailableError
from loose_concat.ops.interface import Operator
from loose_concat.ops.loose_concat import LooseConcatOp, loose_concat_ref
from loose_concat.ops.op_types import OpType
from loose_concat.ops.registry import (
    create_op,
    get_op_class,
    get_reference_factory,
    list_ops,
    register_op,
)

# Ensure all kernels are loaded
import loose_concat.backend.kernels


class _Identity(Operator):
    def __init__(self, attrs=None):
        self.attrs = attrs

    def configure(self):
        pass

    def infer_shape(self, bottom, top):
        pass

    def forward(self, bottom, top):
        pass

    def backward(self, top, propagate_down, bottom):
        pass


def test_create_op_by_name():
    op = create_op(OpType.LOOSE_CONCAT, {"axis": 0})
    assert isinstance(op, LooseConcatOp)
    assert op.op_type == "LooseConcat"
    assert OpType.LOOSE_CONCAT in list_ops()
    assert get_op_class("LooseConcat") is LooseConcatOp


def test_create_op_forwards_backend():
    op = create_op(OpType.LOOSE_CONCAT, None, backend=Backend.CPU_NUMPY)
    assert op.backend == Backend.CPU_NUMPY


def test_unknown_op():
    with pytest.raises(KeyError):
        create_op("DoesNotExist")


def test_register_new_op():
    register_op("TestIdentity")(_Identity)
    assert isinstance(create_op("TestIdentity"), _Identity)
    # Re-registering the same class is harmless
    register_op("TestIdentity")(_Identity)


def test_duplicate_registration_rejected():
    with pytest.raises(ValueError):
        register_op(OpType.LOOSE_CONCAT)(_Identity)
    assert get_op_class(OpType.LOOSE_CONCAT) is LooseConcatOp


def test_register_requires_operator():
    with pytest.raises(ValueError):
        register_op("NotAnOp")(dict)


def test_reference_factory_registered():
    assert get_reference_factory(OpType.LOOSE_CONCAT) is loose_concat_ref


def test_numpy_kernels_registered():
    assert KernelRegistry.has_kernel(OpType.LOOSE_CONCAT, Backend.CPU_NUMPY, FORWARD)
    assert KernelRegistry.has_kernel(OpType.LOOSE_CONCAT, Backend.CPU_NUMPY, BACKWARD)


def test_missing_kernel():
    with pytest.raises(KernelUnavailableError):
        KernelRegistry.get_kernel("DoesNotExist", Backend.CPU_NUMPY, FORWARD)
    with pytest.raises(ValueError):
        KernelRegistry.register(OpType.LOOSE_CONCAT, "sideways")
