# Import kernels
from .cpu_numpy import *

# Torch kernels register CPU_TORCH always and GPU_TORCH when CUDA is present
try:
    from .gpu_torch import *
except ImportError as e:
    print(f"Warning: Could not load torch kernels: {e}")
