from typing import Any, Dict, List, Sequence, Tuple
import numpy as np
from tqdm import tqdm
from ..ir.dtypes import Backend
from ..ir.tensor import Tensor
from ..ops.registry import create_op, get_reference_factory
from ..config import DEBUG_EXECUTION, VERIFY_RTOL, VERIFY_ATOL
from .registry import KernelRegistry


class VerificationError(Exception):
    pass


def _run(op, arrays: Sequence[np.ndarray], top_grad: np.ndarray, propagate_down):
    bottom = [Tensor.from_array(a, name=f"in_{i}") for i, a in enumerate(arrays)]
    top = Tensor(dtype=bottom[0].dtype, name="out")
    op.infer_shape(bottom, [top])
    op.forward(bottom, [top])
    value = top.value.copy()

    # Sentinel so that skipped inputs can be checked for being untouched
    for b in bottom:
        b.diff.fill(-1)
    top.grad[...] = top_grad
    op.backward([top], propagate_down, bottom)
    return value, [b.grad.copy() for b in bottom]


class KernelVerifier:
    @staticmethod
    def verify_all() -> Dict[str, List[Any]]:
        """
        Runs every registered kernel on its op's sample inputs. Forward values
        are checked against the op's reference factory, backward gradients
        against the op's own copy loops.
        """
        kernels = KernelRegistry.get_all_kernels()

        results = {
            "passed": [],
            "failed": [],
            "skipped": [],
        }

        entries = [
            (op_type, backend)
            for op_type, backends in kernels.items()
            for backend in backends
        ]
        for op_type, backend in tqdm(
            entries, desc="Verifying kernels", disable=not DEBUG_EXECUTION
        ):
            label = f"{op_type}::{backend.value}"
            if get_reference_factory(op_type) is None:
                print(f"[WARN] Op '{op_type}' has kernels but no reference factory.")
                results["skipped"].append(f"{label} (No Reference)")
                continue

            samples = create_op(op_type).sample_inputs()
            if not samples:
                print(f"[WARN] Op '{op_type}' has no test samples defined in sample_inputs().")
                results["skipped"].append(f"{label} (No Samples)")
                continue

            try:
                KernelVerifier.verify_kernel(op_type, backend, samples)
                results["passed"].append(label)
            except VerificationError as e:
                print(f"[FAIL] {label} - {e}")
                results["failed"].append((label, str(e)))

        return results

    @staticmethod
    def verify_kernel(
        op_type: str,
        backend: Backend,
        samples: List[Tuple[List[np.ndarray], Dict[str, Any]]],
    ):
        reference = get_reference_factory(op_type)
        rng = np.random.default_rng(0)

        for arrays, attrs in samples:
            loop_op = create_op(op_type, attrs)
            kernel_op = create_op(op_type, attrs, backend=backend)
            propagate_down = [i % 2 == 0 for i in range(len(arrays))]

            # 1. Loop implementation (ground truth for gradients)
            try:
                probe = [Tensor.from_array(a) for a in arrays]
                loop_op.infer_shape(probe, [Tensor(dtype=probe[0].dtype)])
                top_grad = rng.standard_normal(loop_op.output_shape).astype(
                    arrays[0].dtype
                )
                loop_value, loop_grads = _run(loop_op, arrays, top_grad, propagate_down)
            except Exception as e:
                raise VerificationError(f"Loop implementation failed: {e}")

            # 2. Candidate kernel
            try:
                value, grads = _run(kernel_op, arrays, top_grad, propagate_down)
            except Exception as e:
                raise VerificationError(f"Kernel execution failed: {e}")

            # 3. Compare
            try:
                ref_value = reference(arrays, {"axis": loop_op.concat_axis})
                np.testing.assert_allclose(
                    loop_value, ref_value, rtol=VERIFY_RTOL, atol=VERIFY_ATOL,
                    err_msg="Loop output differs from reference",
                )
                np.testing.assert_allclose(
                    value, ref_value, rtol=VERIFY_RTOL, atol=VERIFY_ATOL,
                    err_msg="Kernel output differs from reference",
                )
                for i, (grad, loop_grad) in enumerate(zip(grads, loop_grads)):
                    np.testing.assert_allclose(
                        grad, loop_grad, rtol=VERIFY_RTOL, atol=VERIFY_ATOL,
                        err_msg=f"Gradient mismatch for input {i}",
                    )
            except AssertionError as e:
                raise VerificationError(str(e))
