# loose_concat/backend/registry.py
from typing import Callable, Dict
from ..ir.dtypes import Backend, KernelUnavailableError
from ..config import DEBUG_EXECUTION

FORWARD = "forward"
BACKWARD = "backward"
PHASES = (FORWARD, BACKWARD)


class KernelRegistry:
    # OpType -> Backend -> Phase -> Kernel
    _kernels: Dict[str, Dict[Backend, Dict[str, Callable]]] = {}

    @classmethod
    def get_all_kernels(cls):
        """Returns the entire kernel registry."""
        return cls._kernels

    @classmethod
    def has_kernel(cls, op_type: str, backend: Backend, phase: str = FORWARD) -> bool:
        return phase in cls._kernels.get(op_type, {}).get(backend, {})

    @classmethod
    def register(cls, op_type: str, phase: str, backend: Backend = Backend.CPU_NUMPY):
        """
        Registers `kernel(inputs, outputs, attrs)` for one phase of an op.
        Forward kernels write into `outputs[0]`; backward kernels receive the
        output gradient as `inputs[0]` and write the input gradients.
        """
        if phase not in PHASES:
            raise ValueError(f"Unknown kernel phase '{phase}', expected one of {PHASES}")

        def decorator(func):
            cls._kernels.setdefault(op_type, {}).setdefault(backend, {})[phase] = func
            if DEBUG_EXECUTION:
                print(
                    f"[KernelRegistry.register] {op_type}::{backend.value}::{phase} -> {func.__name__}"
                )
            return func

        return decorator

    @classmethod
    def get_kernel(cls, op_type: str, backend: Backend, phase: str = FORWARD) -> Callable:
        kernel = cls._kernels.get(op_type, {}).get(backend, {}).get(phase)
        if kernel is None:
            raise KernelUnavailableError(
                f"No {phase} kernel for '{op_type}' on backend '{backend.value}'"
            )
        return kernel
