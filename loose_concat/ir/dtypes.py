import math
from enum import Enum
from typing import Tuple, Optional
import numpy as np


class KernelUnavailableError(RuntimeError):
    """Raised when a kernel is not available for the requested backend."""


class DType(Enum):
    FP32 = "float32"
    FP64 = "float64"
    INT32 = "int32"

    @property
    def itemsize(self) -> int:
        """Returns the number of bytes per element."""
        return {
            DType.FP32: 4,
            DType.FP64: 8,
            DType.INT32: 4,
        }[self]

    @property
    def numpy_dtype(self):
        return np.dtype(self.value)

    @classmethod
    def from_numpy(cls, dtype) -> "DType":
        dtype = np.dtype(dtype)
        for member in cls:
            if member.numpy_dtype == dtype:
                return member
        raise ValueError(f"Unsupported numpy dtype: {dtype}")


def get_size_bytes(shape: Optional[Tuple[int, ...]], dtype: DType) -> int:
    """
    Centralized logic for calculating total byte size.
    Raises ValueError for undefined shapes.
    """
    if shape is None:
        raise ValueError("Cannot calculate byte size for an undefined shape")

    # Handle scalar shapes ()
    if len(shape) == 0:
        return dtype.itemsize

    return math.prod(shape) * dtype.itemsize


class Backend(Enum):
    CPU_NUMPY = "cpu_numpy"
    CPU_TORCH = "cpu_torch"
    GPU_TORCH = "gpu_torch"
