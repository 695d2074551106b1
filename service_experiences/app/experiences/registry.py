"""
Static experience registry.

The registry is built once at process start and must cover every
``Experience`` member; an incomplete table is a fatal configuration error.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional

from shared.errors import ConfigurationError
from shared.logging import get_logger
from ..matching.patterns import path_allowed
from .errors import ConfigurationMissing
from .models import (
    Experience, ExperienceConfig, HeaderOptions, NavigationBadge, NavigationItem
)


def _nav(id: str, label: str, icon: str, path: str, badge_key: Optional[str] = None) -> NavigationItem:
    badge = NavigationBadge(type="count", data_key=badge_key) if badge_key else None
    return NavigationItem(id=id, label=label, icon=icon, path=path, badge=badge)


DEFAULT_EXPERIENCE_CONFIGS: Mapping[Experience, ExperienceConfig] = MappingProxyType({
    Experience.ADMIN: ExperienceConfig(
        experience=Experience.ADMIN,
        label="Admin Portal",
        description="Platform Admin - Users, roles, and system config",
        layout="AdminLayout",
        default_route="/admin/dashboard",
        allowed_patterns=("*",),
        navigation_items=(
            _nav("dashboard", "Dashboard", "LayoutDashboard", "/admin/dashboard"),
            _nav("users", "Users", "Users", "/admin/users"),
            _nav("roles", "Roles & Permissions", "Shield", "/admin/roles"),
            _nav("config", "Configuration", "Settings", "/admin/config"),
            _nav("audit", "Audit Logs", "FileText", "/admin/audit"),
            _nav("analytics", "Platform Analytics", "BarChart3", "/admin/analytics"),
        ),
        header_options=HeaderOptions(show_ai_chat=True, show_quick_actions=True),
    ),
    Experience.OPERATOR: ExperienceConfig(
        experience=Experience.OPERATOR,
        label="Service Operator",
        description="Control Tower - Manage service orders and operations",
        layout="OperatorLayout",
        default_route="/dashboard",
        allowed_patterns=(
            "/dashboard",
            "/operations-grid",
            "/service-orders",
            "/service-orders/*",
            "/providers",
            "/providers/*",
            "/assignments",
            "/assignments/*",
            "/calendar",
            "/tasks",
            "/analytics",
            "/performance",
        ),
        navigation_items=(
            _nav("dashboard", "Control Tower", "LayoutDashboard", "/dashboard", "criticalActions"),
            _nav("operations", "Operations Grid", "Grid3X3", "/operations-grid"),
            _nav("service-orders", "Service Orders", "ClipboardList", "/service-orders", "pendingOrders"),
            _nav("assignments", "Assignments", "UserCheck", "/assignments"),
            _nav("providers", "Providers", "Building2", "/providers"),
            _nav("calendar", "Calendar", "Calendar", "/calendar"),
            _nav("tasks", "Tasks", "CheckSquare", "/tasks", "pendingTasks"),
            _nav("analytics", "Analytics", "BarChart3", "/analytics"),
            _nav("performance", "Performance", "TrendingUp", "/performance"),
        ),
        header_options=HeaderOptions(show_ai_chat=True, show_quick_actions=True),
    ),
    Experience.PROVIDER: ExperienceConfig(
        experience=Experience.PROVIDER,
        label="Provider Portal",
        description="Provider Cockpit - Manage jobs, teams, and finances",
        layout="ProviderLayout",
        default_route="/provider/dashboard",
        allowed_patterns=(
            "/provider/dashboard",
            "/provider/jobs",
            "/provider/jobs/*",
            "/provider/financial",
            "/provider/teams",
            "/provider/teams/*",
            "/provider/calendar",
            "/provider/performance",
            "/provider/settings",
        ),
        navigation_items=(
            _nav("dashboard", "Dashboard", "LayoutDashboard", "/provider/dashboard"),
            _nav("jobs", "Jobs", "Briefcase", "/provider/jobs", "newOffers"),
            _nav("calendar", "Calendar", "Calendar", "/provider/calendar"),
            _nav("teams", "Work Teams", "Users", "/provider/teams"),
            _nav("financial", "Financial", "Wallet", "/provider/financial", "pendingWCF"),
            _nav("performance", "Performance", "TrendingUp", "/provider/performance"),
            _nav("settings", "Settings", "Settings", "/provider/settings"),
        ),
    ),
    Experience.PROVIDER_ONBOARDING: ExperienceConfig(
        experience=Experience.PROVIDER_ONBOARDING,
        label="Provider Onboarding",
        description="Onboarding Wizard - Complete provider registration",
        layout="OnboardingLayout",
        default_route="/provider/onboarding",
        allowed_patterns=("/provider/onboarding", "/provider/onboarding/*"),
        header_options=HeaderOptions(show_search=False, show_notifications=False),
    ),
    Experience.WORK_TEAM: ExperienceConfig(
        experience=Experience.WORK_TEAM,
        label="Work Team",
        description="Field technicians - Mobile application only",
        layout="MobileRedirectLayout",
        default_route="/team",
        allowed_patterns=("/team", "/team/*"),
        header_options=HeaderOptions(show_search=False, show_notifications=False, logo_variant="compact"),
    ),
    Experience.CUSTOMER: ExperienceConfig(
        experience=Experience.CUSTOMER,
        label="Customer Portal",
        description="Customer - Follow a service order through a deep link",
        layout="CustomerLayout",
        default_route="/customer",
        allowed_patterns=("/customer", "/customer/*"),
        header_options=HeaderOptions(show_search=False, logo_variant="compact"),
    ),
    Experience.PSM: ExperienceConfig(
        experience=Experience.PSM,
        label="PSM Portal",
        description="Provider Success - Recruitment and onboarding pipeline",
        layout="PSMLayout",
        default_route="/psm/dashboard",
        allowed_patterns=(
            "/psm/dashboard",
            "/psm/pipeline",
            "/psm/providers",
            "/psm/providers/*",
            "/psm/coverage",
            "/psm/verification",
            "/psm/analytics",
        ),
        navigation_items=(
            _nav("dashboard", "Dashboard", "LayoutDashboard", "/psm/dashboard"),
            _nav("pipeline", "Pipeline", "GitBranch", "/psm/pipeline", "pendingVerification"),
            _nav("providers", "Providers", "Building2", "/psm/providers"),
            _nav("coverage", "Coverage Map", "Map", "/psm/coverage"),
            _nav("verification", "Verification", "FileCheck", "/psm/verification", "docsToReview"),
            _nav("analytics", "Analytics", "BarChart3", "/psm/analytics"),
        ),
        header_options=HeaderOptions(show_quick_actions=True),
    ),
    Experience.SELLER: ExperienceConfig(
        experience=Experience.SELLER,
        label="Seller Portal",
        description="Retail Sales - Check availability, create quotations",
        layout="SellerLayout",
        default_route="/seller/dashboard",
        allowed_patterns=(
            "/seller/dashboard",
            "/seller/availability",
            "/seller/projects",
            "/seller/projects/*",
            "/seller/quotations",
            "/seller/quotations/*",
            "/seller/reports",
            "/seller/reports/*",
        ),
        navigation_items=(
            _nav("dashboard", "Dashboard", "LayoutDashboard", "/seller/dashboard"),
            _nav("availability", "Check Availability", "CalendarSearch", "/seller/availability"),
            _nav("projects", "Customer Projects", "FolderOpen", "/seller/projects"),
            _nav("reports", "TV Reports", "FileText", "/seller/reports", "pendingReports"),
            _nav("quotations", "Quotations", "Receipt", "/seller/quotations", "pendingQuotes"),
        ),
        header_options=HeaderOptions(logo_variant="compact"),
    ),
    Experience.OFFER_MANAGER: ExperienceConfig(
        experience=Experience.OFFER_MANAGER,
        label="Offer Manager",
        description="Service Catalog - Manage services and pricing",
        layout="CatalogLayout",
        default_route="/catalog/services",
        allowed_patterns=(
            "/catalog/services",
            "/catalog/services/*",
            "/catalog/pricing",
            "/catalog/checklists",
            "/catalog/analytics",
        ),
        navigation_items=(
            _nav("services", "Services", "Package", "/catalog/services"),
            _nav("pricing", "Pricing", "DollarSign", "/catalog/pricing"),
            _nav("checklists", "Checklists", "ListChecks", "/catalog/checklists"),
            _nav("analytics", "Analytics", "BarChart3", "/catalog/analytics"),
        ),
    ),
})


class ExperienceRegistry:
    """Read-only lookup of experience configurations."""

    def __init__(self, configs: Optional[Mapping[Experience, ExperienceConfig]] = None):
        self.logger = get_logger("experiences.registry")
        source = DEFAULT_EXPERIENCE_CONFIGS if configs is None else configs
        self._configs: Mapping[Experience, ExperienceConfig] = MappingProxyType(
            {Experience(key): config for key, config in source.items()}
        )
        self.validate()

    def validate(self) -> None:
        """Verify the table is exhaustive and internally consistent."""
        missing = [experience for experience in Experience if experience not in self._configs]
        if missing:
            self.logger.error(
                "Experience registry incomplete",
                missing=[experience.value for experience in missing]
            )
            raise ConfigurationMissing(missing)

        mismatched = [
            experience for experience, config in self._configs.items()
            if config.experience is not experience
        ]
        if mismatched:
            self.logger.error(
                "Experience registry entries keyed under the wrong experience",
                mismatched=[experience.value for experience in mismatched]
            )
            raise ConfigurationMissing(
                mismatched,
                "Experience configuration keyed under a different experience"
            )

        for experience, config in self._configs.items():
            if not path_allowed(config.default_route, config.allowed_patterns):
                raise ConfigurationError(
                    "UNREACHABLE_DEFAULT_ROUTE",
                    f"Default route {config.default_route} is not allowed for {experience.value}",
                    {"experience": experience.value, "default_route": config.default_route}
                )

            for item in config.navigation_items:
                if not path_allowed(item.path, config.allowed_patterns):
                    self.logger.warning(
                        "Navigation item points outside allowed routes",
                        experience=experience.value,
                        item_id=item.id,
                        path=item.path
                    )

    def config_for(self, experience: Experience) -> ExperienceConfig:
        """Get the configuration for an experience."""
        try:
            return self._configs[experience]
        except KeyError:
            raise ConfigurationMissing([experience]) from None

    def experiences(self) -> Dict[Experience, ExperienceConfig]:
        """Get a copy of the full table."""
        return dict(self._configs)

    def __contains__(self, experience: object) -> bool:
        return experience in self._configs

    def __len__(self) -> int:
        return len(self._configs)
