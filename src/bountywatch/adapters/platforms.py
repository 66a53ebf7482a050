"""Registry of platform canonicalizers in monitoring order."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bountywatch.adapters.bugcrowd import CANONICALIZER as BUGCROWD
from bountywatch.adapters.hackerone import CANONICALIZER as HACKERONE
from bountywatch.adapters.intigriti import CANONICALIZER as INTIGRITI

if TYPE_CHECKING:
    from bountywatch.domain.canonicalization import PlatformCanonicalizer

DEFAULT_CANONICALIZERS: tuple[PlatformCanonicalizer, ...] = (HACKERONE, BUGCROWD, INTIGRITI)
