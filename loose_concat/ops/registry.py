"""
File: loose_concat/ops/registry.py
"""

from typing import Any, Callable, Dict, List, Optional, Type
from .interface import Operator

_OP_REGISTRY: Dict[str, Type[Operator]] = {}
_REFERENCE_REGISTRY: Dict[str, Callable] = {}


def register_op(name: str):
    """Decorator to register an Operator class under a type name."""

    def decorator(cls):
        if not issubclass(cls, Operator):
            raise ValueError("Must inherit from Operator")
        existing = _OP_REGISTRY.get(name)
        if existing is not None and existing is not cls:
            raise ValueError(
                f"Op type '{name}' is already registered to {existing.__name__}"
            )
        cls.op_type = name
        _OP_REGISTRY[name] = cls
        return cls

    return decorator


def get_op_class(name: str) -> Type[Operator]:
    if name not in _OP_REGISTRY:
        raise KeyError(
            f"Unknown op type: '{name}' (registered: {', '.join(list_ops()) or 'none'})"
        )
    return _OP_REGISTRY[name]


def create_op(name: str, attrs: Optional[Dict[str, Any]] = None, **kwargs) -> Operator:
    """Returns a fresh, configured instance of the op registered as `name`."""
    return get_op_class(name)(attrs, **kwargs)


def list_ops() -> List[str]:
    return sorted(_OP_REGISTRY)


def register_reference_factory(name: str, factory: Callable):
    """Registers the pure numpy definition of an op, used as ground truth."""
    _REFERENCE_REGISTRY[name] = factory


def get_reference_factory(name: str) -> Optional[Callable]:
    return _REFERENCE_REGISTRY.get(name, None)
