from .diff import DiffParams, DiffApi, GetDiffBuilder

__all__ = ["DiffParams", "DiffApi", "GetDiffBuilder"]
