"""
File: loose_concat/ops/loose_concat.py

Concatenation that pads instead of requiring equal extents: the output's
concat axis is the sum of the inputs' extents, every other axis is the
maximum extent among the inputs, and uncovered positions are zero.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple
import math
import numpy as np
from ..ir.tensor import Tensor, AliasOf
from ..ir.dtypes import Backend
from ..backend.registry import KernelRegistry, FORWARD, BACKWARD
from ..config import (
    DEBUG_EXECUTION,
    DEBUG_DETAILED,
    DEFAULT_CONCAT_AXIS,
    LEGACY_AXES,
    SUPPORTED_COPY_AXES,
)
from .errors import (
    ConfigError,
    ShapeMismatchError,
    UnsupportedConfigError,
    InternalConsistencyError,
)
from .interface import Operator
from .op_types import OpType
from .params import ConcatParam
from .registry import register_op, register_reference_factory


def loose_concat_shape(shapes: Sequence[Tuple[int, ...]], axis: int) -> Tuple[int, ...]:
    """Output shape: sum along `axis`, max along every other axis."""
    out_shape = list(shapes[0])
    for shape in shapes[1:]:
        for j in range(len(out_shape)):
            if j == axis:
                out_shape[j] += shape[j]
            else:
                out_shape[j] = max(out_shape[j], shape[j])
    return tuple(out_shape)


def loose_concat_ref(
    inputs: List[np.ndarray], attrs: Optional[Dict[str, Any]] = None
) -> np.ndarray:
    """
    Reference definition: zero-pad every input up to the max extent of each
    non-concat axis, then concatenate. Valid for any axis.
    inputs: arrays of equal rank
    attrs["axis"]: resolved, non-negative concat axis
    """
    if not inputs:
        raise ValueError("LooseConcat requires at least 1 input")
    axis = attrs.get("axis", DEFAULT_CONCAT_AXIS) if attrs else DEFAULT_CONCAT_AXIS
    rank = inputs[0].ndim
    if any(x.ndim != rank for x in inputs):
        raise ValueError("LooseConcat requires inputs of the same rank")

    target = loose_concat_shape([x.shape for x in inputs], axis)
    padded = []
    for x in inputs:
        pad_width = [
            (0, 0) if j == axis else (0, target[j] - x.shape[j]) for j in range(rank)
        ]
        padded.append(np.pad(x, pad_width))
    return np.concatenate(padded, axis=axis)


def _legacy_view(buffer: np.ndarray, tensor: Tensor) -> np.ndarray:
    return buffer.reshape(tensor.num, tensor.channels, tensor.height, tensor.width)


@register_op(OpType.LOOSE_CONCAT)
class LooseConcatOp(Operator):
    """
    Loose concatenation along batch (axis 0) or channel (axis 1).

    Shape inference accepts any axis in [0, rank); the copy loops only
    implement axes 0 and 1 and reject the rest at forward/backward time.
    With a single input the output aliases the input's buffers and both
    forward and backward are no-ops.
    """

    def __init__(
        self,
        attrs: Optional[Dict[str, Any]] = None,
        backend: Optional[Backend] = None,
    ):
        self.attrs = dict(attrs) if attrs else {}
        self.backend = backend
        self.param = ConcatParam.from_attrs(self.attrs)

        # Shape bookkeeping, recomputed by every infer_shape call.
        # num_concats and concat_input_size are informational; the copy loops
        # address tensors through offset() instead.
        self.concat_axis: Optional[int] = None
        self.num_concats: Optional[int] = None
        self.concat_input_size: Optional[int] = None
        self.output_shape: Optional[Tuple[int, ...]] = None
        self.padded_count: Optional[int] = None
        self._input_shapes: Optional[List[Tuple[int, ...]]] = None

        self.configure()

    def configure(self) -> None:
        if self.param.has_axis and self.param.has_concat_dim:
            raise ConfigError("Either axis or concat_dim should be specified; not both.")

    def _resolve_axis(self, num_axes: int) -> int:
        if self.param.has_concat_dim:
            axis = self.param.concat_dim_as_int32()
            if axis < 0:
                raise ConfigError(
                    f"casting concat_dim {self.param.concat_dim} from uint32 to int32 "
                    f"produced negative result; concat_dim must satisfy "
                    f"0 <= concat_dim < {num_axes}"
                )
        else:
            axis = self.param.axis if self.param.has_axis else DEFAULT_CONCAT_AXIS
            if axis < 0:
                axis += num_axes
        if not 0 <= axis < num_axes:
            raise ConfigError(
                f"concat axis out of range: resolved to {axis} for {num_axes}-D inputs"
            )
        return axis

    def infer_shape(self, bottom: Sequence[Tensor], top: Sequence[Tensor]) -> None:
        if not bottom:
            raise ShapeMismatchError("LooseConcat requires at least 1 input")
        if len(top) != 1:
            raise ShapeMismatchError(f"LooseConcat produces 1 output, got {len(top)}")

        num_axes = bottom[0].num_axes
        for i, b in enumerate(bottom[1:], start=1):
            if b.num_axes != num_axes:
                raise ShapeMismatchError(
                    f"All inputs must have the same #axes: input 0 has {num_axes}, "
                    f"input {i} ('{b.name}') has {b.num_axes}"
                )
            if b.dtype != bottom[0].dtype:
                raise ShapeMismatchError(
                    f"All inputs must share a dtype: input 0 is {bottom[0].dtype.value}, "
                    f"input {i} ('{b.name}') is {b.dtype.value}"
                )

        axis = self._resolve_axis(num_axes)
        input_shapes = [b.shape for b in bottom]
        out_shape = loose_concat_shape(input_shapes, axis)

        bottom_count_sum = sum(b.count() for b in bottom)
        top_count = math.prod(out_shape)
        if bottom_count_sum > top_count:
            raise InternalConsistencyError(
                f"Inputs hold {bottom_count_sum} elements but output shape "
                f"{out_shape} only holds {top_count}"
            )
        if len(bottom) == 1 and top_count != bottom[0].count():
            raise InternalConsistencyError(
                "Single-input output must hold exactly the input's elements"
            )

        # All checks passed; only now touch op state and the output
        self.concat_axis = axis
        self.num_concats = bottom[0].count(0, axis)
        self.concat_input_size = bottom[0].count(axis + 1)
        self.output_shape = out_shape
        self.padded_count = top_count - bottom_count_sum
        self._input_shapes = input_shapes

        top[0].reshape(out_shape)
        if top[0].dtype != bottom[0].dtype:
            top[0].dtype = bottom[0].dtype
            top[0].allocate()
        if len(bottom) == 1:
            top[0].share_buffers(bottom[0])
        elif isinstance(top[0].ownership, AliasOf):
            # Left over from a single-input shape; must not write into the input
            top[0].allocate()

        if DEBUG_EXECUTION:
            print(
                f"[LooseConcatOp.infer_shape] axis={axis} {input_shapes} -> {out_shape} "
                f"(padding {self.padded_count} elements)"
            )

    def _check_ready(self, bottom: Sequence[Tensor], top: Tensor):
        if self._input_shapes is None:
            raise ShapeMismatchError("infer_shape must run before forward/backward")
        shapes = [b.shape for b in bottom]
        if shapes != self._input_shapes or top.shape != self.output_shape:
            raise ShapeMismatchError(
                f"Shapes changed since infer_shape ({self._input_shapes} -> "
                f"{self.output_shape}); got {shapes} -> {top.shape}"
            )

    def _check_copy_axis(self):
        if self.concat_axis not in SUPPORTED_COPY_AXES:
            raise UnsupportedConfigError(
                f"LooseConcat only copies along the `num` or `channel` axis "
                f"{SUPPORTED_COPY_AXES}, got axis {self.concat_axis}"
            )
        if len(self.output_shape) > LEGACY_AXES:
            raise UnsupportedConfigError(
                f"LooseConcat copies tensors of at most {LEGACY_AXES} axes, "
                f"got {len(self.output_shape)}"
            )

    def forward(self, bottom: Sequence[Tensor], top: Sequence[Tensor]) -> None:
        self._check_ready(bottom, top[0])
        if len(bottom) == 1:
            return
        self._check_copy_axis()

        if self.backend is not None:
            kernel = KernelRegistry.get_kernel(self.op_type, self.backend, FORWARD)
            kernel(
                [_legacy_view(b.data, b) for b in bottom],
                [_legacy_view(top[0].data, top[0])],
                {"axis": self.concat_axis},
            )
            return

        out = top[0]
        top_data = out.data
        # Padding is never written by the copy loop below
        top_data.fill(0)

        n2 = 0
        c2 = 0
        for i, b in enumerate(bottom):
            copy_size = b.width
            bottom_data = b.data
            for n in range(b.num):
                for c in range(b.channels):
                    for h in range(b.height):
                        src = b.offset(n, c, h)
                        dst = out.offset(n + n2, c + c2, h)
                        top_data[dst : dst + copy_size] = bottom_data[src : src + copy_size]
            if DEBUG_EXECUTION and DEBUG_DETAILED:
                print(f"[LooseConcatOp.forward] input {i} '{b.name}' at n2={n2} c2={c2}")

            if self.concat_axis == 0:
                n2 += b.num
            else:
                c2 += b.channels

    def backward(
        self,
        top: Sequence[Tensor],
        propagate_down: Sequence[bool],
        bottom: Sequence[Tensor],
    ) -> None:
        if len(propagate_down) != len(bottom):
            raise ValueError(
                f"propagate_down has {len(propagate_down)} entries for {len(bottom)} inputs"
            )
        self._check_ready(bottom, top[0])
        if len(bottom) == 1:
            return
        self._check_copy_axis()

        if self.backend is not None:
            kernel = KernelRegistry.get_kernel(self.op_type, self.backend, BACKWARD)
            kernel(
                [_legacy_view(top[0].diff, top[0])],
                [_legacy_view(b.diff, b) for b in bottom],
                {"axis": self.concat_axis, "propagate_down": list(propagate_down)},
            )
            return

        out = top[0]
        top_diff = out.diff

        n2 = 0
        c2 = 0
        for i, b in enumerate(bottom):
            if propagate_down[i]:
                copy_size = b.width
                bottom_diff = b.diff
                # Reset every call, not only where padding exists
                bottom_diff.fill(0)
                for n in range(b.num):
                    for c in range(b.channels):
                        for h in range(b.height):
                            src = out.offset(n + n2, c + c2, h)
                            dst = b.offset(n, c, h)
                            bottom_diff[dst : dst + copy_size] = top_diff[src : src + copy_size]
            elif DEBUG_EXECUTION and DEBUG_DETAILED:
                print(f"[LooseConcatOp.backward] skipping input {i} '{b.name}'")

            # Offsets advance whether or not the input takes a gradient
            if self.concat_axis == 0:
                n2 += b.num
            else:
                c2 += b.channels

    def sample_inputs(self) -> List[Tuple[List[np.ndarray], Dict[str, Any]]]:
        rng = np.random.default_rng(0)

        def rand(*shape):
            return rng.standard_normal(shape).astype(np.float32)

        return [
            ([rand(1, 2, 3, 4), rand(1, 2, 5, 6)], {"axis": 0}),
            ([rand(2, 2, 4, 4), rand(2, 3, 4, 4)], {"axis": 1}),
            ([rand(1, 1, 2, 7), rand(3, 2, 1, 1), rand(2, 4, 3, 2)], {"axis": 0}),
            ([rand(2, 1, 3, 3), rand(1, 2, 5, 2), rand(3, 1, 1, 4)], {"axis": 1}),
            ([rand(2, 3), rand(4, 5)], {"axis": 1}),
            ([rand(3, 2, 2), rand(1, 4, 1)], {"axis": 0}),
        ]


register_reference_factory(OpType.LOOSE_CONCAT, loose_concat_ref)
