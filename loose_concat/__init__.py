# Expose main components for easy access
from .ir.dtypes import DType, Backend
from .ir.tensor import Tensor, Owned, AliasOf
from .ops.errors import (
    ConfigError,
    ShapeMismatchError,
    UnsupportedConfigError,
    InternalConsistencyError,
)
from .ops.op_types import OpType
from .ops.registry import create_op, list_ops
from .ops.loose_concat import LooseConcatOp, loose_concat_ref

# Ensure all kernels are registered
from .backend import kernels
