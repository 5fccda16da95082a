# loose_concat/backend/kernels/cpu_numpy/loose_concat.py
from ....backend.registry import KernelRegistry, FORWARD, BACKWARD
from ....ir.dtypes import Backend
from ....ops.op_types import OpType


def _block(x, axis, start):
    """Index of `x`'s own extents inside the output, shifted along `axis`."""
    n, c, h, w = x.shape
    if axis == 0:
        return (slice(start, start + n), slice(0, c), slice(0, h), slice(0, w))
    return (slice(0, n), slice(start, start + c), slice(0, h), slice(0, w))


@KernelRegistry.register(OpType.LOOSE_CONCAT, FORWARD, backend=Backend.CPU_NUMPY)
def loose_concat_forward(inputs, outputs, attrs):
    """
    inputs: (num, channels, height, width) arrays
    outputs[0]: padded (num, channels, height, width) output
    attrs["axis"]: 0 or 1
    """
    axis = attrs["axis"]
    out = outputs[0]
    out.fill(0)
    start = 0
    for x in inputs:
        out[_block(x, axis, start)] = x
        start += x.shape[axis]


@KernelRegistry.register(OpType.LOOSE_CONCAT, BACKWARD, backend=Backend.CPU_NUMPY)
def loose_concat_backward(inputs, outputs, attrs):
    """
    inputs[0]: output gradient
    outputs: input gradients, written only where attrs["propagate_down"] is set
    """
    axis = attrs["axis"]
    top_diff = inputs[0]
    start = 0
    for bottom_diff, propagate in zip(outputs, attrs["propagate_down"]):
        if propagate:
            bottom_diff.fill(0)
            bottom_diff[...] = top_diff[_block(bottom_diff, axis, start)]
        start += bottom_diff.shape[axis]
