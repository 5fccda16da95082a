from dataclasses import dataclass
import numbers
from typing import Any, Dict, Optional
from .errors import ConfigError

_UINT32_RANGE = 1 << 32
_INT32_MAX = (1 << 31) - 1


@dataclass(frozen=True)
class ConcatParam:
    """
    Axis configuration of a concatenation op.

    `axis` is the regular (possibly negative) axis index. `concat_dim` is the
    deprecated form: an unsigned 32-bit dimension index that never wraps.
    """

    axis: Optional[int] = None
    concat_dim: Optional[int] = None

    @property
    def has_axis(self) -> bool:
        return self.axis is not None

    @property
    def has_concat_dim(self) -> bool:
        return self.concat_dim is not None

    @classmethod
    def from_attrs(cls, attrs: Optional[Dict[str, Any]] = None) -> "ConcatParam":
        attrs = attrs or {}
        unknown = set(attrs) - {"axis", "concat_dim"}
        if unknown:
            raise ConfigError(f"Unknown concat attributes: {sorted(unknown)}")

        values = {}
        for key in ("axis", "concat_dim"):
            value = attrs.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigError(f"'{key}' must be an integer, got {value!r}")
            values[key] = int(value)
        return cls(**values)

    def concat_dim_as_int32(self) -> int:
        """
        Reinterprets `concat_dim` as uint32 -> int32, like a C cast would.
        Negative values stay negative; values past the uint32 range are rejected.
        """
        value = self.concat_dim
        if value >= _UINT32_RANGE:
            raise ConfigError(
                f"concat_dim {value} does not fit in an unsigned 32-bit integer"
            )
        if value > _INT32_MAX:
            value -= _UINT32_RANGE
        return value
