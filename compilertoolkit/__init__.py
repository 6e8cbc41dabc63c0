"""Expression calculator, matrix tools and register-allocation algorithms."""

__version__ = "0.1.0"
__all__ = ["ast", "graphics", "matrix", "dcmat", "linearscan", "regalloc"]