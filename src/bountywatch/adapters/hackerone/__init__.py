"""Public interface for the HackerOne adapter."""

from __future__ import annotations

from .schema import HackerOneProgram, HackerOneTarget
from .translator import CANONICALIZER, extract_records, translate_program

__all__ = [
    "CANONICALIZER",
    "HackerOneProgram",
    "HackerOneTarget",
    "extract_records",
    "translate_program",
]
