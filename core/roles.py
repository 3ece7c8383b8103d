# core/roles.py

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from core.permissions import PermissionFlag, ALL_PERMISSION_FIELDS
from models.enums import AccessLevel, Department, RoleKey


@dataclass(frozen=True)
class RoleDefinition:
    key: RoleKey
    display_name: str
    description: str
    department: Department
    permission_preset: Mapping[str, bool] = field(repr=False)
    default_access_level: AccessLevel

    def enabled_permissions(self) -> List[str]:
        return [name for name, enabled in self.permission_preset.items() if enabled]

    def to_dict(self) -> dict:
        return {
            "key": self.key.value,
            "name": self.display_name,
            "description": self.description,
            "department": self.department.value,
            "permissions": dict(self.permission_preset),
            "defaultAccessLevel": self.default_access_level.value,
        }


def _preset(*enabled: PermissionFlag) -> Mapping[str, bool]:
    """Full flag map: listed flags on, everything else off."""
    on = {flag.value for flag in enabled}
    return MappingProxyType({name: name in on for name in ALL_PERMISSION_FIELDS})


_F = PermissionFlag


# ============================================
# CENTRALIZED ROLE DEFINITIONS
# ============================================
ROLE_DEFINITIONS: Dict[RoleKey, RoleDefinition] = {

    # =====================================================
    # PROPERTY MANAGEMENT
    # =====================================================
    RoleKey.property_manager: RoleDefinition(
        key=RoleKey.property_manager,
        display_name="Property Manager",
        description="Full property management access with tenant and maintenance oversight",
        department=Department.property_management,
        permission_preset=_preset(
            _F.can_manage_properties, _F.can_manage_tenants, _F.can_manage_maintenance,
            _F.can_view_reports, _F.can_view_analytics, _F.can_manage_vendors,
            _F.can_manage_leases, _F.can_export_data,
        ),
        default_access_level=AccessLevel.standard,
    ),
    RoleKey.assistant_manager: RoleDefinition(
        key=RoleKey.assistant_manager,
        display_name="Assistant Manager",
        description="Limited property access with no financial data access",
        department=Department.property_management,
        permission_preset=_preset(
            _F.can_manage_properties, _F.can_manage_tenants, _F.can_manage_maintenance,
            _F.can_view_reports, _F.can_manage_vendors,
        ),
        default_access_level=AccessLevel.basic,
    ),
    RoleKey.regional_manager: RoleDefinition(
        key=RoleKey.regional_manager,
        display_name="Regional Manager",
        description="Multi-property oversight with team management capabilities",
        department=Department.property_management,
        permission_preset=_preset(
            _F.can_manage_properties, _F.can_manage_tenants, _F.can_manage_maintenance,
            _F.can_view_reports, _F.can_manage_financials, _F.can_manage_team,
            _F.can_assign_properties, _F.can_view_analytics, _F.can_manage_vendors,
            _F.can_manage_leases, _F.can_export_data, _F.can_import_data,
            _F.can_view_audit_logs,
        ),
        default_access_level=AccessLevel.advanced,
    ),
    RoleKey.senior_manager: RoleDefinition(
        key=RoleKey.senior_manager,
        display_name="Senior Manager",
        description="Advanced permissions and comprehensive system access",
        department=Department.property_management,
        permission_preset=_preset(
            _F.can_manage_properties, _F.can_manage_tenants, _F.can_manage_maintenance,
            _F.can_view_reports, _F.can_manage_financials, _F.can_manage_team,
            _F.can_assign_properties, _F.can_view_analytics, _F.can_manage_vendors,
            _F.can_manage_leases, _F.can_manage_marketing, _F.can_export_data,
            _F.can_import_data, _F.can_manage_templates, _F.can_view_audit_logs,
        ),
        default_access_level=AccessLevel.advanced,
    ),

    # =====================================================
    # MAINTENANCE
    # =====================================================
    RoleKey.maintenance_staff: RoleDefinition(
        key=RoleKey.maintenance_staff,
        display_name="Maintenance Staff",
        description="Maintenance and vendor management with limited property access",
        department=Department.maintenance,
        permission_preset=_preset(
            _F.can_manage_maintenance, _F.can_view_reports, _F.can_manage_vendors,
            _F.can_export_data, _F.can_view_audit_logs,
        ),
        default_access_level=AccessLevel.basic,
    ),

    # =====================================================
    # ACCOUNTING
    # =====================================================
    RoleKey.accounting_staff: RoleDefinition(
        key=RoleKey.accounting_staff,
        display_name="Accounting Staff",
        description="Financial data and reporting access with limited property management",
        department=Department.accounting,
        permission_preset=_preset(
            _F.can_view_reports, _F.can_manage_financials, _F.can_view_analytics,
            _F.can_export_data,
        ),
        default_access_level=AccessLevel.standard,
    ),
    RoleKey.financial_controller: RoleDefinition(
        key=RoleKey.financial_controller,
        display_name="Financial Controller",
        description="Complete financial oversight and reporting capabilities",
        department=Department.accounting,
        permission_preset=_preset(
            _F.can_view_reports, _F.can_manage_financials, _F.can_view_analytics,
            _F.can_export_data, _F.can_import_data, _F.can_view_audit_logs,
        ),
        default_access_level=AccessLevel.advanced,
    ),

    # =====================================================
    # LEASING
    # =====================================================
    RoleKey.leasing_agent: RoleDefinition(
        key=RoleKey.leasing_agent,
        display_name="Leasing Agent",
        description="Tenant management and leasing operations only",
        department=Department.leasing,
        permission_preset=_preset(
            _F.can_manage_tenants, _F.can_view_reports, _F.can_manage_leases,
        ),
        default_access_level=AccessLevel.basic,
    ),
    RoleKey.marketing_specialist: RoleDefinition(
        key=RoleKey.marketing_specialist,
        display_name="Marketing Specialist",
        description="Marketing and tenant acquisition focused role",
        department=Department.leasing,
        permission_preset=_preset(
            _F.can_view_reports, _F.can_view_analytics, _F.can_manage_marketing,
            _F.can_export_data, _F.can_manage_templates,
        ),
        default_access_level=AccessLevel.standard,
    ),

    # =====================================================
    # ADMINISTRATION
    # =====================================================
    RoleKey.legal_advisor: RoleDefinition(
        key=RoleKey.legal_advisor,
        display_name="Legal Advisor",
        description="Legal document management and compliance oversight",
        department=Department.administration,
        permission_preset=_preset(
            _F.can_view_reports, _F.can_manage_leases, _F.can_manage_legal,
            _F.can_export_data, _F.can_manage_templates, _F.can_view_audit_logs,
        ),
        default_access_level=AccessLevel.standard,
    ),
    RoleKey.system_administrator: RoleDefinition(
        key=RoleKey.system_administrator,
        display_name="System Administrator",
        description="Complete system access and configuration management",
        department=Department.administration,
        permission_preset=_preset(*PermissionFlag),
        default_access_level=AccessLevel.admin,
    ),
}


# ============================================
# DEPARTMENT → ALLOWED ROLES
# ============================================
DEPARTMENT_ROLES: Dict[str, List[RoleKey]] = {
    Department.property_management.value: [
        RoleKey.property_manager,
        RoleKey.assistant_manager,
        RoleKey.regional_manager,
        RoleKey.senior_manager,
    ],
    Department.maintenance.value: [RoleKey.maintenance_staff],
    Department.accounting.value: [RoleKey.accounting_staff, RoleKey.financial_controller],
    Department.leasing.value: [RoleKey.leasing_agent, RoleKey.marketing_specialist],
    Department.administration.value: [RoleKey.legal_advisor, RoleKey.system_administrator],
}


# Adding a RoleKey without a definition (or a department slot) fails at import.
_missing = set(RoleKey) - set(ROLE_DEFINITIONS)
if _missing:
    raise RuntimeError(f"Roles without definitions: {sorted(str(r) for r in _missing)}")

_unindexed = set(RoleKey) - {r for roles in DEPARTMENT_ROLES.values() for r in roles}
if _unindexed:
    raise RuntimeError(f"Roles missing from DEPARTMENT_ROLES: {sorted(str(r) for r in _unindexed)}")


def parse_role(value) -> Optional[RoleKey]:
    """Return the RoleKey for a form value, or None when unset/unknown."""
    if not value:
        return None
    try:
        return RoleKey(str(value))
    except ValueError:
        return None


def get_role(role: RoleKey) -> RoleDefinition:
    return ROLE_DEFINITIONS[RoleKey(role)]


def available_roles(department: Optional[str]) -> List[RoleKey]:
    """
    Roles selectable for a department.
    No department → every role; unknown department → none.
    """
    if not department:
        return list(RoleKey)
    return list(DEPARTMENT_ROLES.get(str(department), []))
