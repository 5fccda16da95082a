class ConfigError(ValueError):
    """Axis configuration is contradictory or resolves outside [0, rank)."""


class ShapeMismatchError(ValueError):
    """Input shapes cannot be combined, or changed since shape inference."""


class UnsupportedConfigError(NotImplementedError):
    """A valid configuration the data-movement loops do not implement."""


class InternalConsistencyError(RuntimeError):
    """A post-condition that the shape rules should guarantee was violated."""
