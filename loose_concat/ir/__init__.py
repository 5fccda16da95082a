from .dtypes import DType, Backend, KernelUnavailableError
from .tensor import Tensor, Owned, AliasOf
