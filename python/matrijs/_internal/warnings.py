"""Matrijs warning categories.

These exist so users can filter/suppress matrijs warnings without
catching all UserWarning.

Keep this module lightweight and dependency-free to avoid import cycles.
"""


class MatrijsWarning(UserWarning):
    """Base warning category for all matrijs user-facing warnings."""


class MatrijsDTypeWarning(MatrijsWarning):
    """Warnings about input values being narrowed to float32 storage."""


class MatrijsPerformanceWarning(MatrijsWarning):
    """Warnings about likely performance pitfalls (e.g., full re-layouts)."""
