"""
Permission string matching.

Held permissions take one of three forms: ``*`` (global grant),
``resource.*`` (every action on a resource) or ``resource.action``.
"""

from typing import Iterable

GLOBAL_GRANT = "*"
SEPARATOR = "."


def has_permission(held: Iterable[str], requested: str) -> bool:
    """Check whether ``held`` grants the ``requested`` permission."""
    held = frozenset(held)

    if GLOBAL_GRANT in held:
        return True

    if requested in held:
        return True

    # Without a separator there is no resource to wildcard against
    resource, separator, _ = requested.partition(SEPARATOR)
    if not separator:
        return False

    return f"{resource}{SEPARATOR}{GLOBAL_GRANT}" in held
