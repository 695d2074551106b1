"""
Experience data models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Experience(str, Enum):
    """Canonical portal an actor operates under."""
    OPERATOR = "OPERATOR"
    PROVIDER = "PROVIDER"
    PROVIDER_ONBOARDING = "PROVIDER_ONBOARDING"
    WORK_TEAM = "WORK_TEAM"
    CUSTOMER = "CUSTOMER"
    PSM = "PSM"
    SELLER = "SELLER"
    OFFER_MANAGER = "OFFER_MANAGER"
    ADMIN = "ADMIN"


DEFAULT_EXPERIENCE = Experience.OPERATOR


class UserType(str, Enum):
    """Account category supplied by the authentication layer."""
    INTERNAL = "INTERNAL"
    EXTERNAL_PROVIDER = "EXTERNAL_PROVIDER"
    EXTERNAL_TECHNICIAN = "EXTERNAL_TECHNICIAN"


class NavigationBadge(BaseModel):
    """Badge shown next to a navigation entry."""
    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="'count' or 'dot'")
    data_key: Optional[str] = Field(None, description="Dashboard data key feeding the badge")


class NavigationItem(BaseModel):
    """Navigation entry. Opaque to the engine, passed through for display."""
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    icon: str
    path: str
    badge: Optional[NavigationBadge] = None
    children: Tuple["NavigationItem", ...] = ()


NavigationItem.model_rebuild()


class HeaderOptions(BaseModel):
    """Header behaviour options, passed through unchanged."""
    model_config = ConfigDict(frozen=True)

    show_search: bool = True
    show_notifications: bool = True
    show_ai_chat: bool = False
    show_quick_actions: bool = False
    logo_variant: str = "full"


class ExperienceConfig(BaseModel):
    """Configuration bundle for one experience."""
    model_config = ConfigDict(frozen=True)

    experience: Experience
    label: str
    description: str = ""
    layout: str
    default_route: str
    allowed_patterns: Tuple[str, ...]
    navigation_items: Tuple[NavigationItem, ...] = ()
    header_options: HeaderOptions = Field(default_factory=HeaderOptions)

    def find_navigation_item(self, item_id: str) -> Optional[NavigationItem]:
        """Find a navigation item by id, searching nested children."""
        pending = list(self.navigation_items)
        while pending:
            item = pending.pop(0)
            if item.id == item_id:
                return item
            pending.extend(item.children)
        return None


@dataclass(frozen=True)
class ActorProfile:
    """Authenticated actor as seen by the engine."""
    roles: FrozenSet[str]
    user_type: UserType = UserType.INTERNAL
    provider_id: Optional[str] = None
    is_provider_onboarding: bool = False


@dataclass(frozen=True)
class RouteDecision:
    """Explained outcome of a route authorization check."""
    allowed: bool
    experience: Experience
    reason: str
    matched_pattern: Optional[str] = None
    redirect_to: Optional[str] = None


@dataclass(frozen=True)
class OverrideState:
    """Per-session override. ``experience`` is None while unset."""
    experience: Optional[Experience] = None
    roles: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_set(self) -> bool:
        return self.experience is not None
