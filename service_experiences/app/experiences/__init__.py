"""
Experiences package.

Defines the closed set of experiences, their static configuration and the
role classifier that picks one experience for an actor.

Modules of interest:
- models: Experience enum, ExperienceConfig and supporting value types.
- registry: Exhaustive, read-only table of experience configurations.
- classifier: Priority table, fallback rules and role classification.
- errors: ConfigurationMissing and OverrideRejected.
"""

from .models import (
    ActorProfile, DEFAULT_EXPERIENCE, Experience, ExperienceConfig, HeaderOptions,
    NavigationBadge, NavigationItem, OverrideState, RouteDecision, UserType
)
from .errors import ConfigurationMissing, OverrideRejected
from .registry import DEFAULT_EXPERIENCE_CONFIGS, ExperienceRegistry
from .classifier import (
    FALLBACK_RULES, ROLE_PRIORITY_TABLE, RoleClassifier, normalize_roles,
    resolve_actor_experience, resolve_experience
)
