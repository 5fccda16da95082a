import numpy as np
from typing import List, Optional, Sequence
from ..ir.dtypes import DType
from ..ir.tensor import Tensor


class DataGenerator:
    """Generates random input tensors for loose concatenation."""

    @staticmethod
    def random_tensor(
        shape: Sequence[int],
        dtype: DType = DType.FP32,
        name: Optional[str] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> Tensor:
        rng = rng if rng is not None else np.random.default_rng()
        if dtype == DType.INT32:
            data = rng.integers(-10, 10, size=tuple(shape)).astype(dtype.numpy_dtype)
        else:
            data = rng.standard_normal(tuple(shape)).astype(dtype.numpy_dtype)
        return Tensor.from_array(data, name=name)

    @staticmethod
    def loose_concat_inputs(
        n_inputs: int,
        axis: int,
        rank: int = 4,
        max_extent: int = 5,
        dtype: DType = DType.FP32,
        seed: Optional[int] = None,
    ) -> List[Tensor]:
        """
        Inputs of equal rank whose extents differ on every axis, so that the
        output is padded along all non-concat axes.
        """
        if not 0 <= axis < rank:
            raise ValueError(f"axis {axis} out of range for rank {rank}")
        rng = np.random.default_rng(seed)
        return [
            DataGenerator.random_tensor(
                rng.integers(1, max_extent + 1, size=rank),
                dtype,
                name=f"in_{i}",
                rng=rng,
            )
            for i in range(n_inputs)
        ]
