"""
Matching primitives shared by the authorization engine.

- patterns: glob allow-pattern to anchored matcher conversion.
- permissions: exact, resource-wildcard and global permission grants.

Both are pure functions with no I/O and never raise on odd input.
"""

from .patterns import compile_pattern, match_pattern, path_allowed
from .permissions import has_permission

__all__ = ["compile_pattern", "match_pattern", "path_allowed", "has_permission"]
