from . import loose_concat

__all__ = ["loose_concat"]
