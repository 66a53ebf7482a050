"""Public interface for the Intigriti adapter."""

from __future__ import annotations

from .schema import IntigritiProgram, IntigritiTarget
from .translator import CANONICALIZER, extract_records, translate_program

__all__ = [
    "CANONICALIZER",
    "IntigritiProgram",
    "IntigritiTarget",
    "extract_records",
    "translate_program",
]
