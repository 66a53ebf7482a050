"""Public interface for the Bugcrowd adapter."""

from __future__ import annotations

from .schema import BugcrowdProgram, BugcrowdTarget
from .translator import CANONICALIZER, extract_records, translate_program

__all__ = [
    "CANONICALIZER",
    "BugcrowdProgram",
    "BugcrowdTarget",
    "extract_records",
    "translate_program",
]
