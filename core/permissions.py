# core/permissions.py

from typing import Dict, List

from models.enums import PermissionCategory, PermissionFlag


ALL_PERMISSION_FIELDS: List[str] = PermissionFlag.list()


# ============================================
# FLAG → CATEGORY
# ============================================
PERMISSION_CATEGORIES: Dict[PermissionFlag, PermissionCategory] = {

    # =====================================================
    # CORE MANAGEMENT
    # =====================================================
    PermissionFlag.can_manage_properties: PermissionCategory.core_management,
    PermissionFlag.can_manage_tenants: PermissionCategory.core_management,
    PermissionFlag.can_manage_maintenance: PermissionCategory.core_management,
    PermissionFlag.can_manage_vendors: PermissionCategory.core_management,

    # =====================================================
    # FINANCIAL & REPORTING
    # =====================================================
    PermissionFlag.can_manage_financials: PermissionCategory.financial_reporting,
    PermissionFlag.can_view_reports: PermissionCategory.financial_reporting,
    PermissionFlag.can_view_analytics: PermissionCategory.financial_reporting,
    PermissionFlag.can_view_audit_logs: PermissionCategory.financial_reporting,

    # =====================================================
    # ADMINISTRATIVE
    # =====================================================
    PermissionFlag.can_manage_team: PermissionCategory.administrative,
    PermissionFlag.can_assign_properties: PermissionCategory.administrative,
    PermissionFlag.can_manage_settings: PermissionCategory.administrative,
    PermissionFlag.can_manage_integrations: PermissionCategory.administrative,

    # =====================================================
    # SPECIALIZED OPERATIONS
    # =====================================================
    PermissionFlag.can_manage_leases: PermissionCategory.specialized_operations,
    PermissionFlag.can_manage_marketing: PermissionCategory.specialized_operations,
    PermissionFlag.can_manage_legal: PermissionCategory.specialized_operations,
    PermissionFlag.can_manage_templates: PermissionCategory.specialized_operations,

    # =====================================================
    # DATA MANAGEMENT
    # =====================================================
    PermissionFlag.can_export_data: PermissionCategory.data_management,
    PermissionFlag.can_import_data: PermissionCategory.data_management,
}


# ============================================
# ROLE → RELEVANT FLAGS
# (shown as suggestions even when the preset leaves them off)
# ============================================
_F = PermissionFlag

ROLE_PERMISSION_RELEVANCE: Dict[str, List[PermissionFlag]] = {

    # Property Management roles
    "PROPERTY_MANAGER": [
        _F.can_manage_properties, _F.can_manage_tenants, _F.can_manage_maintenance,
        _F.can_manage_vendors, _F.can_manage_leases, _F.can_view_reports,
        _F.can_view_analytics, _F.can_export_data,
    ],
    "ASSISTANT_MANAGER": [
        _F.can_manage_properties, _F.can_manage_tenants, _F.can_manage_maintenance,
        _F.can_manage_vendors, _F.can_view_reports,
    ],
    "REGIONAL_MANAGER": [
        _F.can_manage_properties, _F.can_manage_tenants, _F.can_manage_maintenance,
        _F.can_manage_vendors, _F.can_manage_leases, _F.can_manage_financials,
        _F.can_manage_team, _F.can_assign_properties, _F.can_view_reports,
        _F.can_view_analytics, _F.can_export_data, _F.can_import_data,
        _F.can_view_audit_logs,
    ],
    "SENIOR_MANAGER": [
        _F.can_manage_properties, _F.can_manage_tenants, _F.can_manage_maintenance,
        _F.can_manage_vendors, _F.can_manage_leases, _F.can_manage_financials,
        _F.can_manage_team, _F.can_assign_properties, _F.can_view_reports,
        _F.can_view_analytics, _F.can_manage_marketing, _F.can_export_data,
        _F.can_import_data, _F.can_manage_templates, _F.can_view_audit_logs,
    ],

    # Maintenance
    "MAINTENANCE_STAFF": [
        _F.can_manage_maintenance, _F.can_manage_vendors, _F.can_view_reports,
        _F.can_export_data, _F.can_view_audit_logs,
    ],

    # Accounting
    "ACCOUNTING_STAFF": [
        _F.can_view_reports, _F.can_manage_financials, _F.can_view_analytics,
        _F.can_export_data,
    ],
    "FINANCIAL_CONTROLLER": [
        _F.can_view_reports, _F.can_manage_financials, _F.can_view_analytics,
        _F.can_export_data, _F.can_import_data, _F.can_view_audit_logs,
    ],

    # Leasing
    "LEASING_AGENT": [
        _F.can_manage_tenants, _F.can_manage_leases, _F.can_view_reports,
    ],
    "MARKETING_SPECIALIST": [
        _F.can_view_reports, _F.can_view_analytics, _F.can_manage_marketing,
        _F.can_export_data, _F.can_manage_templates,
    ],

    # Administration
    "LEGAL_ADVISOR": [
        _F.can_view_reports, _F.can_manage_leases, _F.can_manage_legal,
        _F.can_export_data, _F.can_manage_templates, _F.can_view_audit_logs,
    ],
    "SYSTEM_ADMINISTRATOR": list(PermissionFlag),
}


def cleared_permissions() -> Dict[str, bool]:
    """Every known flag set to False."""
    return {field: False for field in ALL_PERMISSION_FIELDS}


def permission_category(flag: str) -> PermissionCategory:
    return PERMISSION_CATEGORIES[PermissionFlag(flag)]


def permissions_by_category() -> Dict[PermissionCategory, List[PermissionFlag]]:
    """Flags grouped by category, in catalogue order."""
    grouped: Dict[PermissionCategory, List[PermissionFlag]] = {c: [] for c in PermissionCategory}
    for flag in PermissionFlag:
        grouped[PERMISSION_CATEGORIES[flag]].append(flag)
    return grouped


def is_permission_relevant(role: str, flag: str) -> bool:
    relevant = ROLE_PERMISSION_RELEVANCE.get(str(role), [])
    return PermissionFlag(flag) in relevant
