from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union
import math
import uuid
import numpy as np
from .dtypes import DType, get_size_bytes
from ..ops.errors import ShapeMismatchError
from ..config import MAX_TENSOR_AXES, LEGACY_AXES


@dataclass(frozen=True)
class Owned:
    """The tensor allocated its own value and gradient storage."""


@dataclass(frozen=True, eq=False)
class AliasOf:
    """The tensor lends its storage from `source`; lifetime is the source's."""

    source: "Tensor"


Ownership = Union[Owned, AliasOf]


class Tensor:
    """
    N-axis array with paired value (data) and gradient (diff) buffers.

    Both buffers are flat, contiguous, row-major numpy arrays of `count()`
    elements. `value` and `grad` are shaped views over them.
    """

    def __init__(
        self,
        shape: Sequence[int] = (),
        dtype: DType = DType.FP32,
        name: Optional[str] = None,
    ):
        self.dtype = dtype
        self.name = name if name is not None else str(uuid.uuid4())[:8]
        self._shape: Tuple[int, ...] = ()
        self._data = np.zeros(1, dtype=dtype.numpy_dtype)
        self._diff = np.zeros(1, dtype=dtype.numpy_dtype)
        self.ownership: Ownership = Owned()
        self.reshape(shape)

    @classmethod
    def from_array(cls, array, name: Optional[str] = None) -> "Tensor":
        array = np.asarray(array)
        tensor = cls(array.shape, DType.from_numpy(array.dtype), name)
        tensor.data[:] = array.reshape(-1)
        return tensor

    # --- Shape ---

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def num_axes(self) -> int:
        return len(self._shape)

    def canonical_axis(self, axis: int) -> int:
        if axis < -self.num_axes or axis >= self.num_axes:
            raise IndexError(
                f"axis {axis} out of range for {self.num_axes}-D tensor {self.shape}"
            )
        return axis + self.num_axes if axis < 0 else axis

    def shape_at(self, axis: int) -> int:
        return self._shape[self.canonical_axis(axis)]

    def count(self, start: int = 0, end: Optional[int] = None) -> int:
        """Product of extents over axes [start, end)."""
        if end is None:
            end = self.num_axes
        return math.prod(self._shape[start:end])

    @property
    def size_bytes(self) -> int:
        return get_size_bytes(self._shape, self.dtype)

    def _legacy_shape(self, index: int) -> int:
        if self.num_axes > LEGACY_AXES:
            raise ShapeMismatchError(
                f"Legacy (num, channels, height, width) accessors need at most "
                f"{LEGACY_AXES} axes; tensor '{self.name}' has shape {self.shape}"
            )
        if index >= self.num_axes:
            return 1
        return self._shape[index]

    @property
    def num(self) -> int:
        return self._legacy_shape(0)

    @property
    def channels(self) -> int:
        return self._legacy_shape(1)

    @property
    def height(self) -> int:
        return self._legacy_shape(2)

    @property
    def width(self) -> int:
        return self._legacy_shape(3)

    def offset(self, n: int, c: int = 0, h: int = 0, w: int = 0) -> int:
        """Row-major linear offset of element (n, c, h, w) in either buffer."""
        num, channels, height, width = self.num, self.channels, self.height, self.width
        for index, extent, label in (
            (n, num, "n"),
            (c, channels, "c"),
            (h, height, "h"),
            (w, width, "w"),
        ):
            # One-past-the-end is a valid position
            if index < 0 or index > extent:
                raise IndexError(
                    f"{label}={index} out of range [0, {extent}] for tensor '{self.name}'"
                )
        return ((n * channels + c) * height + h) * width + w

    def reshape(self, shape: Sequence[int]) -> None:
        """
        Sets a new shape. Storage is kept when the element count is unchanged
        (an alias stays an alias); otherwise fresh zeroed buffers are owned.
        """
        shape = tuple(int(d) for d in shape)
        if len(shape) > MAX_TENSOR_AXES:
            raise ShapeMismatchError(
                f"Tensor rank {len(shape)} exceeds the maximum of {MAX_TENSOR_AXES}"
            )
        if any(d < 0 for d in shape):
            raise ShapeMismatchError(f"Negative extent in shape {shape}")

        self._shape = shape
        if self.count() != self._data.size:
            self.allocate()

    def allocate(self) -> None:
        """Gives the tensor fresh zeroed buffers of its own, ending any alias."""
        self._data = np.zeros(self.count(), dtype=self.dtype.numpy_dtype)
        self._diff = np.zeros(self.count(), dtype=self.dtype.numpy_dtype)
        self.ownership = Owned()

    # --- Buffers ---

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def diff(self) -> np.ndarray:
        return self._diff

    @property
    def value(self) -> np.ndarray:
        return self._data.reshape(self._shape)

    @property
    def grad(self) -> np.ndarray:
        return self._diff.reshape(self._shape)

    def _check_shareable(self, other: "Tensor"):
        if self.count() != other.count():
            raise ShapeMismatchError(
                f"Cannot share buffers of '{other.name}' ({other.count()} elements) "
                f"with '{self.name}' ({self.count()} elements)"
            )

    def share_data(self, other: "Tensor") -> None:
        self._check_shareable(other)
        self._data = other._data
        self.ownership = AliasOf(other)

    def share_diff(self, other: "Tensor") -> None:
        self._check_shareable(other)
        self._diff = other._diff
        self.ownership = AliasOf(other)

    def share_buffers(self, other: "Tensor") -> None:
        self.share_data(other)
        self.share_diff(other)

    def is_alias_of(self, other: "Tensor") -> bool:
        return isinstance(self.ownership, AliasOf) and self.ownership.source is other

    def __repr__(self):
        alias = (
            f" -> {self.ownership.source.name}"
            if isinstance(self.ownership, AliasOf)
            else ""
        )
        return f"[{self.dtype.value}|{self.shape}] Tensor({self.name}{alias})"
