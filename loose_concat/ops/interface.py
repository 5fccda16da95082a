from abc import ABC, abstractmethod
from typing import List, Dict, Any, ClassVar, Sequence, Tuple
import numpy as np
from ..ir.tensor import Tensor


class Operator(ABC):
    """
    Abstract Base Class for operators driven by a host graph engine.

    The engine calls `infer_shape` whenever upstream shapes change, then any
    number of `forward` / `backward` steps. Operators hold no buffers of
    their own: they read and write the tensors they are handed.
    """

    op_type: ClassVar[str]

    @abstractmethod
    def configure(self) -> None:
        """Validates the op's attributes. Called once at construction."""

    @abstractmethod
    def infer_shape(self, bottom: Sequence[Tensor], top: Sequence[Tensor]) -> None:
        """Reshapes `top` from the shapes of `bottom`."""

    @abstractmethod
    def forward(self, bottom: Sequence[Tensor], top: Sequence[Tensor]) -> None:
        """Fills the value buffers of `top`."""

    @abstractmethod
    def backward(
        self,
        top: Sequence[Tensor],
        propagate_down: Sequence[bool],
        bottom: Sequence[Tensor],
    ) -> None:
        """Fills the gradient buffers of the `bottom` tensors flagged in `propagate_down`."""

    def sample_inputs(self) -> List[Tuple[List[np.ndarray], Dict[str, Any]]]:
        """
        Optional: Returns a list of (inputs_list, attrs_dict) tuples for verification.
        Used to verify that registered kernels produce results consistent
        with the operator's own implementation.
        """
        return []
