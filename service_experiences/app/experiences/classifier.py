"""
Role classification.

Maps an actor's role set to exactly one experience. The priority table is
authoritative for multi-role actors: the first table entry whose role is
held wins, whatever order the roles arrive in. Substring fallback rules
only apply when no role matches the table exactly, and anything left
over resolves to the default experience. Classification never raises.
"""

from typing import FrozenSet, Iterable, Optional, Tuple

from shared.logging import get_logger
from .models import ActorProfile, DEFAULT_EXPERIENCE, Experience, UserType

RolePriorityTable = Tuple[Tuple[str, Experience], ...]
FallbackRuleSet = Tuple[Tuple[str, Experience], ...]


ROLE_PRIORITY_TABLE: RolePriorityTable = (
    ("SUPER_ADMIN", Experience.ADMIN),
    ("ADMIN", Experience.ADMIN),
    ("PSM", Experience.PSM),
    ("PROVIDER_SUCCESS_MANAGER", Experience.PSM),
    ("OFFER_MANAGER", Experience.OFFER_MANAGER),
    ("CATALOG_MANAGER", Experience.OFFER_MANAGER),
    ("SELLER", Experience.SELLER),
    ("SALES_STAFF", Experience.SELLER),
    ("STORE_SELLER", Experience.SELLER),
    ("OPERATOR", Experience.OPERATOR),
    ("SERVICE_OPERATOR", Experience.OPERATOR),
    ("CONTROL_TOWER", Experience.OPERATOR),
    ("PROVIDER_MANAGER", Experience.PROVIDER),
    ("PROVIDER_ADMIN", Experience.PROVIDER),
)

FALLBACK_RULES: FallbackRuleSet = (
    ("ADMIN", Experience.ADMIN),
    ("SUPER", Experience.ADMIN),
    ("PSM", Experience.PSM),
    ("PROVIDER_SUCCESS", Experience.PSM),
    ("RECRUITMENT", Experience.PSM),
    ("OPERATOR", Experience.OPERATOR),
    ("DISPATCHER", Experience.OPERATOR),
    ("CONTROL_TOWER", Experience.OPERATOR),
    ("SELLER", Experience.SELLER),
    ("SALES", Experience.SELLER),
    ("COMMERCIAL", Experience.SELLER),
    ("OFFER", Experience.OFFER_MANAGER),
    ("CATALOG", Experience.OFFER_MANAGER),
    ("PRODUCT_MANAGER", Experience.OFFER_MANAGER),
    ("PROVIDER", Experience.PROVIDER),
    ("CONTRACTOR", Experience.PROVIDER),
    ("TECHNICIAN", Experience.WORK_TEAM),
    ("FIELD", Experience.WORK_TEAM),
    ("WORK_TEAM", Experience.WORK_TEAM),
    ("CUSTOMER", Experience.CUSTOMER),
    ("CLIENT", Experience.CUSTOMER),
)


def normalize_roles(roles: Optional[Iterable[object]]) -> FrozenSet[str]:
    """Uppercase and strip roles, dropping empty and missing entries."""
    if roles is None:
        return frozenset()
    if isinstance(roles, str):
        roles = (roles,)

    normalized = set()
    for role in roles:
        if role is None:
            continue
        name = str(role).strip().upper()
        if name:
            normalized.add(name)
    return frozenset(normalized)


class RoleClassifier:
    """Resolves role sets to experiences using static tables."""

    def __init__(
        self,
        priority_table: RolePriorityTable = ROLE_PRIORITY_TABLE,
        fallback_rules: FallbackRuleSet = FALLBACK_RULES,
        default: Experience = DEFAULT_EXPERIENCE
    ):
        self.logger = get_logger("experiences.classifier")
        self.priority_table: RolePriorityTable = tuple(priority_table)
        self.fallback_rules: FallbackRuleSet = tuple(fallback_rules)
        self.default = default

    def match_priority(self, roles: FrozenSet[str]) -> Optional[Experience]:
        """Return the experience of the first priority entry held, if any."""
        for role_name, experience in self.priority_table:
            if role_name in roles:
                return experience
        return None

    def match_fallback(self, roles: FrozenSet[str]) -> Optional[Experience]:
        """Return the experience of the first fallback substring found, if any."""
        for substring, experience in self.fallback_rules:
            if any(substring in role for role in roles):
                return experience
        return None

    def resolve(self, roles: Optional[Iterable[object]]) -> Experience:
        """Resolve a role set to a single experience."""
        normalized = normalize_roles(roles)

        experience = self.match_priority(normalized)
        if experience is not None:
            return experience

        experience = self.match_fallback(normalized)
        if experience is not None:
            self.logger.debug(
                "Experience resolved by fallback rule",
                roles=sorted(normalized),
                experience=experience.value
            )
            return experience

        if normalized:
            self.logger.debug(
                "No role recognized, using default experience",
                roles=sorted(normalized),
                experience=self.default.value
            )
        return self.default

    def resolve_actor(self, profile: ActorProfile) -> Experience:
        """Resolve an actor profile, honouring onboarding and account type."""
        if profile.is_provider_onboarding:
            return Experience.PROVIDER_ONBOARDING

        normalized = normalize_roles(profile.roles)
        experience = self.match_priority(normalized)
        if experience is not None:
            return experience

        if profile.user_type == UserType.EXTERNAL_PROVIDER and profile.provider_id:
            return Experience.PROVIDER

        if profile.user_type == UserType.EXTERNAL_TECHNICIAN:
            return Experience.WORK_TEAM

        return self.resolve(normalized)


_default_classifier = RoleClassifier()


def resolve_experience(roles: Optional[Iterable[object]]) -> Experience:
    """Resolve roles against the built-in tables."""
    return _default_classifier.resolve(roles)


def resolve_actor_experience(profile: ActorProfile) -> Experience:
    """Resolve an actor profile against the built-in tables."""
    return _default_classifier.resolve_actor(profile)
