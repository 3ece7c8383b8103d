# tests/test_permission_engine.py

"""
Tests for role / department driven permission derivation.
"""

import pytest

from core.permission_engine import PermissionDerivationEngine
from core.permissions import ALL_PERMISSION_FIELDS, is_permission_relevant, permissions_by_category
from core.roles import ROLE_DEFINITIONS, available_roles, parse_role
from core.steps import TEAM_WIZARD_STEPS
from core.wizard import WizardController
from models.enums import PermissionCategory, PermissionFlag, RoleKey


def enabled(controller):
    return {name for name in ALL_PERMISSION_FIELDS if controller.get_field(name)}


def test_role_applies_preset_and_access_level(team_controller):
    team_controller.update_field("role", "PROPERTY_MANAGER")

    assert enabled(team_controller) == {
        "canManageProperties", "canManageTenants", "canManageMaintenance",
        "canViewReports", "canViewAnalytics", "canManageVendors",
        "canManageLeases", "canExportData",
    }
    assert team_controller.get_field("accessLevel") == "Standard"


@pytest.mark.parametrize("first", list(RoleKey))
def test_role_change_is_full_reset(team_controller, submit_handler, first):
    """Selecting A then B matches selecting B from defaults."""
    second = RoleKey.leasing_agent if first != RoleKey.leasing_agent else RoleKey.legal_advisor

    team_controller.update_field("role", first.value)
    team_controller.update_field("role", second.value)

    direct = WizardController(TEAM_WIZARD_STEPS, submit_handler, derivation=PermissionDerivationEngine())
    direct.update_field("role", second.value)

    engine = PermissionDerivationEngine()
    assert engine.permissions(team_controller.values()) == engine.permissions(direct.values())
    assert team_controller.get_field("accessLevel") == direct.get_field("accessLevel")


def test_manual_flags_survive_until_next_role_change(team_controller):
    team_controller.update_field("role", "LEASING_AGENT")
    team_controller.update_field("canManageSettings", True)
    team_controller.update_field("canManageTenants", False)

    assert team_controller.get_field("canManageSettings") is True
    assert team_controller.get_field("canManageTenants") is False

    team_controller.update_field("role", "LEASING_AGENT")
    assert team_controller.get_field("canManageSettings") is False
    assert team_controller.get_field("canManageTenants") is True


def test_single_role_department_auto_selects(team_controller):
    team_controller.update_field("department", "Maintenance")

    assert team_controller.get_field("role") == "MAINTENANCE_STAFF"
    assert enabled(team_controller) == {
        "canManageMaintenance", "canManageVendors", "canViewReports",
        "canExportData", "canViewAuditLogs",
    }
    assert team_controller.get_field("accessLevel") == "Basic"


def test_department_change_clears_disallowed_role(team_controller):
    team_controller.update_field("role", "PROPERTY_MANAGER")
    team_controller.update_field("department", "Accounting")

    assert team_controller.get_field("role") == ""
    assert enabled(team_controller) == set()
    assert team_controller.get_field("accessLevel") == "Basic"


def test_disallowed_role_cleared_then_single_role_department_does_not_auto_select(team_controller):
    team_controller.update_field("role", "PROPERTY_MANAGER")
    team_controller.update_field("department", "Maintenance")

    assert team_controller.get_field("role") == ""
    assert enabled(team_controller) == set()


def test_multi_role_department_does_not_auto_select(team_controller):
    team_controller.update_field("department", "Property Management")

    assert team_controller.get_field("role") == ""
    assert enabled(team_controller) == set()
    assert team_controller.get_field("accessLevel") == "Basic"


def test_department_change_keeps_allowed_role_and_manual_flags(team_controller):
    team_controller.update_field("role", "FINANCIAL_CONTROLLER")
    team_controller.update_field("canManageSettings", True)
    team_controller.update_field("department", "Accounting")

    assert team_controller.get_field("role") == "FINANCIAL_CONTROLLER"
    assert team_controller.get_field("canManageSettings") is True


def test_role_outside_department_is_rejected(team_controller):
    team_controller.update_field("department", "Leasing")
    team_controller.update_field("role", "SYSTEM_ADMINISTRATOR")

    assert team_controller.get_field("role") == ""
    assert enabled(team_controller) == set()


def test_unknown_role_clears_everything(team_controller):
    team_controller.update_field("role", "SENIOR_MANAGER")
    team_controller.update_field("role", "CHIEF_WIZARD")

    assert team_controller.get_field("role") == ""
    assert enabled(team_controller) == set()
    assert team_controller.get_field("accessLevel") == "Basic"


def test_clear_all_keeps_role_and_access_level(team_controller):
    team_controller.update_field("role", "SYSTEM_ADMINISTRATOR")
    assert enabled(team_controller) == set(ALL_PERMISSION_FIELDS)

    team_controller.clear_permissions()

    assert enabled(team_controller) == set()
    assert team_controller.get_field("role") == "SYSTEM_ADMINISTRATOR"
    assert team_controller.get_field("accessLevel") == "Admin"
    assert team_controller.is_dirty


def test_every_role_has_department_and_preset():
    for key, definition in ROLE_DEFINITIONS.items():
        assert key in available_roles(definition.department.value)
        assert set(definition.permission_preset) == set(ALL_PERMISSION_FIELDS)


def test_available_roles():
    assert available_roles(None) == list(RoleKey)
    assert available_roles("Maintenance") == [RoleKey.maintenance_staff]
    assert available_roles("Catering") == []


def test_parse_role():
    assert parse_role("LEGAL_ADVISOR") == RoleKey.legal_advisor
    assert parse_role("") is None
    assert parse_role("nope") is None


def test_permission_relevance():
    assert is_permission_relevant("LEASING_AGENT", "canManageLeases")
    assert not is_permission_relevant("LEASING_AGENT", "canManageSettings")
    assert all(is_permission_relevant("SYSTEM_ADMINISTRATOR", f) for f in ALL_PERMISSION_FIELDS)


def test_permissions_grouped_by_category():
    grouped = permissions_by_category()
    assert sum(len(flags) for flags in grouped.values()) == len(PermissionFlag)
    assert PermissionFlag.can_import_data in grouped[PermissionCategory.data_management]
