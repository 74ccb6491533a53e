from .adapter import DeepBookMarginAdapter

__all__ = ["DeepBookMarginAdapter"]
