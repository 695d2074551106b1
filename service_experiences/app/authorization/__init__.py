"""
Authorization package.

- engine: AuthorizationEngine facade (resolve config, routes, permissions).
- override: Per-session experience overrides gated by availability.
"""

from .engine import AuthorizationEngine, experience_permitted, navigation_path
from .override import OverrideStore, experiences_available_to
