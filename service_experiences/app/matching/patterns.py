"""
Route pattern matching.

Allow patterns are glob-like strings in which ``*`` matches zero or more
characters and every other character is literal. A pattern must match the
whole path; ``/admin/users`` does not authorize ``/admin/users/5``. The bare
pattern ``*`` is the full-access sentinel.
"""

import re
from functools import lru_cache
from typing import Iterable, Optional, Pattern

WILDCARD = "*"


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> Pattern[str]:
    """Convert an allow pattern into an anchored regular expression."""
    body = ".*".join(re.escape(part) for part in pattern.split(WILDCARD))
    return re.compile(rf"\A{body}\Z", re.DOTALL)


def match_pattern(path: str, patterns: Iterable[str]) -> Optional[str]:
    """Return the first pattern authorizing ``path``, or None."""
    patterns = tuple(patterns)
    if WILDCARD in patterns:
        return WILDCARD

    for pattern in patterns:
        if compile_pattern(pattern).match(path):
            return pattern

    return None


def path_allowed(path: str, patterns: Iterable[str]) -> bool:
    """Check whether any pattern fully matches ``path``."""
    return match_pattern(path, patterns) is not None
