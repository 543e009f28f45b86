from .normalize import coerce_1d, coerce_2d, coerce_optional_1d

__all__ = ["coerce_1d", "coerce_2d", "coerce_optional_1d"]
