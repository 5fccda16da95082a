import torch
from ...registry import KernelRegistry, FORWARD, BACKWARD
from ....ir.dtypes import Backend
from ....ops.op_types import OpType

_TORCH_BACKENDS = [Backend.CPU_TORCH]
if torch.cuda.is_available():
    _TORCH_BACKENDS.append(Backend.GPU_TORCH)


def _device(backend: Backend) -> torch.device:
    return torch.device("cuda" if backend == Backend.GPU_TORCH else "cpu")


def _make_forward(backend: Backend):
    device = _device(backend)

    def loose_concat_forward_torch(inputs, outputs, attrs):
        axis = attrs["axis"]
        out_host = torch.from_numpy(outputs[0])
        out = torch.zeros(out_host.shape, dtype=out_host.dtype, device=device)
        start = 0
        for x in inputs:
            x_t = torch.from_numpy(x).to(device)
            n, c, h, w = x_t.shape
            if axis == 0:
                out[start : start + n, :c, :h, :w] = x_t
            else:
                out[:n, start : start + c, :h, :w] = x_t
            start += x_t.shape[axis]
        # Kernels write into the host buffers they are handed
        out_host.copy_(out.cpu())

    return loose_concat_forward_torch


def _make_backward(backend: Backend):
    device = _device(backend)

    def loose_concat_backward_torch(inputs, outputs, attrs):
        axis = attrs["axis"]
        top_diff = torch.from_numpy(inputs[0]).to(device)
        start = 0
        for bottom_diff, propagate in zip(outputs, attrs["propagate_down"]):
            n, c, h, w = bottom_diff.shape
            if propagate:
                if axis == 0:
                    block = top_diff[start : start + n, :c, :h, :w]
                else:
                    block = top_diff[:n, start : start + c, :h, :w]
                bottom_t = torch.from_numpy(bottom_diff)
                bottom_t.zero_()
                bottom_t.copy_(block.cpu())
            start += bottom_diff.shape[axis]

    return loose_concat_backward_torch


for _backend in _TORCH_BACKENDS:
    KernelRegistry.register(OpType.LOOSE_CONCAT, FORWARD, backend=_backend)(
        _make_forward(_backend)
    )
    KernelRegistry.register(OpType.LOOSE_CONCAT, BACKWARD, backend=_backend)(
        _make_backward(_backend)
    )
