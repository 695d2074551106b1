"""
Unit tests for role classification.
"""

import itertools

import pytest

from service_experiences.app.experiences.classifier import (
    FALLBACK_RULES, ROLE_PRIORITY_TABLE, RoleClassifier, normalize_roles,
    resolve_actor_experience, resolve_experience
)
from service_experiences.app.experiences.models import ActorProfile, Experience, UserType


class TestNormalizeRoles:
    """Test cases for normalize_roles."""

    def test_uppercases_and_strips(self):
        """Test roles are uppercased and trimmed."""
        assert normalize_roles([" admin ", "Psm"]) == frozenset({"ADMIN", "PSM"})

    def test_drops_empty_and_missing(self):
        """Test empty strings and None are dropped."""
        assert normalize_roles(["", "  ", None, "seller"]) == frozenset({"SELLER"})

    def test_none_and_single_string(self):
        """Test None yields nothing and a bare string is one role."""
        assert normalize_roles(None) == frozenset()
        assert normalize_roles("operator") == frozenset({"OPERATOR"})


class TestRoleClassifier:
    """Test cases for RoleClassifier."""

    @pytest.fixture
    def classifier(self):
        """Create RoleClassifier instance."""
        return RoleClassifier()

    def test_empty_role_set_defaults_to_operator(self, classifier):
        """Test empty input resolves to the default."""
        assert classifier.resolve(set()) is Experience.OPERATOR
        assert classifier.resolve(None) is Experience.OPERATOR

    @pytest.mark.parametrize("role,expected", [
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
    ])
    def test_priority_table_roles(self, classifier, role, expected):
        """Test every priority table role resolves to its experience."""
        assert classifier.resolve({role}) is expected

    def test_case_insensitive(self, classifier):
        """Test roles are matched regardless of case."""
        assert classifier.resolve({"seller"}) is Experience.SELLER

    def test_priority_order_wins(self, classifier):
        """Test ADMIN beats OPERATOR regardless of input order."""
        assert classifier.resolve({"OPERATOR", "ADMIN"}) is Experience.ADMIN
        assert classifier.resolve(["ADMIN", "OPERATOR"]) is Experience.ADMIN
        assert classifier.resolve(["OPERATOR", "ADMIN"]) is Experience.ADMIN

    def test_priority_independent_of_permutation(self, classifier):
        """Test every permutation of a multi-role set resolves identically."""
        roles = ["SELLER", "PROVIDER_ADMIN", "CATALOG_MANAGER", "CONTROL_TOWER"]
        results = {classifier.resolve(list(p)) for p in itertools.permutations(roles)}
        assert results == {Experience.OFFER_MANAGER}

    def test_exact_match_beats_fallback(self, classifier):
        """Test a priority role wins over a fallback substring in another role."""
        # RANDOM_ADMIN_THING would fall back to ADMIN, but SELLER is exact
        assert classifier.resolve({"RANDOM_ADMIN_THING", "SELLER"}) is Experience.SELLER

    def test_fallback_substring(self, classifier):
        """Test substring fallback applies when nothing matches exactly."""
        assert classifier.resolve({"RANDOM_CONTROL_TOWER_LEAD"}) is Experience.OPERATOR
        assert classifier.resolve({"REGIONAL_DISPATCHER"}) is Experience.OPERATOR
        assert classifier.resolve({"FIELD_TECHNICIAN"}) is Experience.WORK_TEAM
        assert classifier.resolve({"B2B_CLIENT"}) is Experience.CUSTOMER
        assert classifier.resolve({"RECRUITMENT_LEAD"}) is Experience.PSM
        assert classifier.resolve({"COMMERCIAL_DIRECTOR"}) is Experience.SELLER
        assert classifier.resolve({"SUBCONTRACTOR"}) is Experience.PROVIDER

    def test_fallback_rule_order(self, classifier):
        """Test the first fallback rule wins across roles."""
        # ADMIN precedes CUSTOMER in the fallback rules
        assert classifier.resolve({"CUSTOMER_ADMINISTRATOR"}) is Experience.ADMIN
        assert classifier.resolve({"KEY_CUSTOMER", "TENANT_ADMINISTRATOR"}) is Experience.ADMIN

    def test_unknown_role_defaults(self, classifier):
        """Test unknown roles resolve to the hard default."""
        assert classifier.resolve({"UNKNOWN_ROLE_XYZ"}) is Experience.OPERATOR

    @pytest.mark.parametrize("roles", [
        {"\x00"}, {"🙂"}, {"a" * 10000}, {"admin\n"}, {123}, ["", None],
    ])
    def test_total_over_garbage(self, classifier, roles):
        """Test classification never raises and always returns an Experience."""
        assert isinstance(classifier.resolve(roles), Experience)

    def test_deterministic(self, classifier):
        """Test repeated calls give the same answer."""
        roles = {"PSM", "SALES_STAFF", "SOMETHING_ELSE"}
        first = classifier.resolve(roles)
        assert all(classifier.resolve(set(roles)) is first for _ in range(50))

    def test_custom_tables(self):
        """Test tables are injectable."""
        classifier = RoleClassifier(
            priority_table=(("VIP", Experience.CUSTOMER),),
            fallback_rules=(),
            default=Experience.SELLER
        )
        assert classifier.resolve({"vip"}) is Experience.CUSTOMER
        assert classifier.resolve({"ADMIN"}) is Experience.SELLER

    def test_tables_are_immutable(self):
        """Test the built-in tables are tuples."""
        assert isinstance(ROLE_PRIORITY_TABLE, tuple)
        assert isinstance(FALLBACK_RULES, tuple)
        assert ROLE_PRIORITY_TABLE.index(("ADMIN", Experience.ADMIN)) < \
            ROLE_PRIORITY_TABLE.index(("OPERATOR", Experience.OPERATOR))


class TestActorClassification:
    """Test cases for resolve_actor."""

    def test_onboarding_overrides_roles(self):
        """Test onboarding providers always land in onboarding."""
        profile = ActorProfile(roles=frozenset({"ADMIN"}), is_provider_onboarding=True)
        assert resolve_actor_experience(profile) is Experience.PROVIDER_ONBOARDING

    def test_priority_role_beats_user_type(self):
        """Test a recognized role wins over the account type."""
        profile = ActorProfile(
            roles=frozenset({"PSM"}),
            user_type=UserType.EXTERNAL_PROVIDER,
            provider_id="prov-1"
        )
        assert resolve_actor_experience(profile) is Experience.PSM

    def test_external_provider_with_provider_id(self):
        """Test external provider accounts resolve to the provider portal."""
        profile = ActorProfile(
            roles=frozenset({"UNKNOWN"}),
            user_type=UserType.EXTERNAL_PROVIDER,
            provider_id="prov-1"
        )
        assert resolve_actor_experience(profile) is Experience.PROVIDER

    def test_external_provider_without_provider_id(self):
        """Test the provider hint needs a provider id."""
        profile = ActorProfile(roles=frozenset(), user_type=UserType.EXTERNAL_PROVIDER)
        assert resolve_actor_experience(profile) is Experience.OPERATOR

    def test_external_technician(self):
        """Test technicians resolve to the work team experience."""
        profile = ActorProfile(roles=frozenset(), user_type=UserType.EXTERNAL_TECHNICIAN)
        assert resolve_actor_experience(profile) is Experience.WORK_TEAM

    def test_internal_falls_back_to_role_rules(self):
        """Test internal actors use the substring fallback."""
        profile = ActorProfile(roles=frozenset({"CATALOG_EDITOR"}))
        assert resolve_actor_experience(profile) is Experience.OFFER_MANAGER


def test_module_level_resolve_experience():
    """Test the module-level helper uses the built-in tables."""
    assert resolve_experience(["provider_success_manager"]) is Experience.PSM
