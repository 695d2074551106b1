"""
Authorization facade.

Composes the role classifier, experience registry and matchers into the
operations the host application consumes. Every query is synchronous and
pure with respect to its arguments; the only mutable state lives in the
session override store.
"""

from typing import Any, FrozenSet, Iterable, Optional, Sequence

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..experiences.classifier import RoleClassifier, normalize_roles
from ..experiences.models import (
    ActorProfile, Experience, ExperienceConfig, NavigationItem, RouteDecision
)
from ..experiences.registry import ExperienceRegistry
from ..matching.patterns import match_pattern
from ..matching.permissions import has_permission
from .override import OverrideStore, experiences_available_to

ROOT_PATHS = ("", "/")


def experience_permitted(experience: Experience, allowed: Iterable[Any]) -> bool:
    """Check an experience against an allow list that may contain ``*``."""
    allowed = set(allowed)
    return "*" in allowed or experience in allowed or experience.value in allowed


def navigation_path(config: ExperienceConfig, item_id: str) -> Optional[str]:
    """Get the path of a navigation item, or None if the id is unknown."""
    item: Optional[NavigationItem] = config.find_navigation_item(item_id)
    return item.path if item else None


class AuthorizationEngine:
    """Experience resolution and route/permission authorization."""

    def __init__(
        self,
        registry: Optional[ExperienceRegistry] = None,
        classifier: Optional[RoleClassifier] = None,
        metrics: Optional[MetricsCollector] = None,
        log_decisions: bool = False
    ):
        self.logger = get_logger("experiences.engine")
        self.registry = registry or ExperienceRegistry()
        self.classifier = classifier or RoleClassifier()
        self.metrics = metrics
        self.log_decisions = log_decisions
        self.overrides = OverrideStore(self.classifier, metrics)

    def _increment(self, metric_name: str, **labels):
        if self.metrics:
            self.metrics.increment_counter(metric_name, **labels)

    # Classification

    def resolve_experience(self, roles: Iterable[str]) -> Experience:
        """Resolve the base experience for a role set."""
        experience = self.classifier.resolve(roles)
        self._increment("experience_resolutions_total", experience=experience.value)
        return experience

    def resolve_actor(self, profile: ActorProfile) -> Experience:
        """Resolve the base experience for a full actor profile."""
        experience = self.classifier.resolve_actor(profile)
        self._increment("experience_resolutions_total", experience=experience.value)
        return experience

    def available_experiences(self, roles: Iterable[str]) -> FrozenSet[Experience]:
        """Get every experience the role set may operate."""
        return experiences_available_to(self.classifier.resolve(roles))

    def effective_experience(self, roles: Iterable[str], override: Optional[Experience] = None) -> Experience:
        """Get the base experience, replaced by ``override`` when it is available."""
        roles = normalize_roles(roles)
        base = self.resolve_experience(roles)
        if override is None or override == base:
            return base

        if override in experiences_available_to(base):
            return Experience(override)

        self.logger.debug(
            "Ignoring unavailable override",
            base=base.value,
            override=getattr(override, "value", str(override))
        )
        return base

    def resolve_config(self, roles: Iterable[str], override: Optional[Experience] = None) -> ExperienceConfig:
        """Get the configuration the actor operates under."""
        return self.registry.config_for(self.effective_experience(roles, override))

    # Routes

    def evaluate_route(self, path: str, roles: Iterable[str],
                       override: Optional[Experience] = None) -> RouteDecision:
        """Decide whether ``path`` is allowed, with the reason and a redirect target."""
        config = self.resolve_config(roles, override)

        if path in ROOT_PATHS:
            decision = RouteDecision(
                allowed=True,
                experience=config.experience,
                reason="Root path redirects to default route",
                redirect_to=config.default_route
            )
        else:
            matched = match_pattern(path, config.allowed_patterns)
            if matched is None:
                decision = RouteDecision(
                    allowed=False,
                    experience=config.experience,
                    reason=f"Route not allowed for experience {config.experience.value}",
                    redirect_to=config.default_route
                )
            else:
                decision = RouteDecision(
                    allowed=True,
                    experience=config.experience,
                    reason=f"Pattern '{matched}' matched",
                    matched_pattern=matched
                )

        self._increment(
            "route_checks_total",
            experience=decision.experience.value,
            decision="allow" if decision.allowed else "deny"
        )
        if self.log_decisions:
            self.logger.debug(
                "Route decision",
                path=path,
                experience=decision.experience.value,
                allowed=decision.allowed,
                reason=decision.reason
            )
        return decision

    def is_route_allowed(self, path: str, roles: Iterable[str],
                         override: Optional[Experience] = None) -> bool:
        """Check whether ``path`` is allowed for the actor."""
        config = self.resolve_config(roles, override)
        allowed = match_pattern(path, config.allowed_patterns) is not None
        self._increment(
            "route_checks_total",
            experience=config.experience.value,
            decision="allow" if allowed else "deny"
        )
        if self.log_decisions:
            self.logger.debug(
                "Route decision",
                path=path,
                experience=config.experience.value,
                allowed=allowed
            )
        return allowed

    def landing_route(self, roles: Iterable[str], override: Optional[Experience] = None) -> str:
        """Get the default route the actor lands on."""
        return self.resolve_config(roles, override).default_route

    def navigation_items(self, roles: Iterable[str],
                         override: Optional[Experience] = None) -> Sequence[NavigationItem]:
        """Get the navigation items to display for the actor."""
        return self.resolve_config(roles, override).navigation_items

    # Permissions

    def check_permission(self, permissions: Iterable[str], requested: str) -> bool:
        """Check a permission string against the actor's held permissions."""
        allowed = has_permission(permissions or (), requested)
        self._increment("permission_checks_total", decision="allow" if allowed else "deny")
        if self.log_decisions:
            self.logger.debug("Permission decision", permission=requested, allowed=allowed)
        return allowed

    # Session overrides

    def set_override(self, session_id: str, roles: Iterable[str], desired: Experience) -> Experience:
        """Switch the session's experience. Raises OverrideRejected when unavailable."""
        return self.overrides.set_override(session_id, roles, desired)

    def clear_override(self, session_id: str) -> bool:
        """Clear the session's override."""
        return self.overrides.clear(session_id)

    def logout(self, session_id: str) -> None:
        """Drop all session state."""
        self.overrides.logout(session_id)

    def session_config(self, session_id: str, roles: Iterable[str]) -> ExperienceConfig:
        """Resolve configuration using the session's override, if still valid."""
        roles = normalize_roles(roles)
        return self.resolve_config(roles, self.overrides.active_override(session_id, roles))

    def session_route_allowed(self, session_id: str, path: str, roles: Iterable[str]) -> bool:
        """Check a route using the session's override, if still valid."""
        roles = normalize_roles(roles)
        return self.is_route_allowed(path, roles, self.overrides.active_override(session_id, roles))
