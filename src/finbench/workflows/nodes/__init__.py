"""Convenience re-exports for workflow nodes."""
from __future__ import annotations

from . import aggregate, compute, resolve, validate

__all__ = [
    "aggregate",
    "compute",
    "resolve",
    "validate",
]
