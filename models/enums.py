from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ACCESS LEVEL
# -----------------------------------------------------
class AccessLevel(BaseStrEnum):
    """Coarse access tier, ordered from least to most privileged."""

    basic = "Basic"
    standard = "Standard"
    advanced = "Advanced"
    admin = "Admin"

    @property
    def rank(self) -> int:
        return list(AccessLevel).index(self)


# -----------------------------------------------------
# DEPARTMENT
# -----------------------------------------------------
class Department(BaseStrEnum):
    property_management = "Property Management"
    maintenance = "Maintenance"
    accounting = "Accounting"
    leasing = "Leasing"
    administration = "Administration"


# -----------------------------------------------------
# PERMISSION CATEGORY
# -----------------------------------------------------
class PermissionCategory(BaseStrEnum):
    """Grouping used when presenting permission checkboxes."""

    core_management = "Core Management"
    financial_reporting = "Financial & Reporting"
    administrative = "Administrative"
    specialized_operations = "Specialized Operations"
    data_management = "Data Management"


# -----------------------------------------------------
# EMPLOYMENT STATUS
# -----------------------------------------------------
class EmploymentStatus(BaseStrEnum):
    full_time = "Full-time"
    part_time = "Part-time"
    contract = "Contract"
    intern = "Intern"


# -----------------------------------------------------
# WIZARD KIND
# -----------------------------------------------------
class WizardKind(BaseStrEnum):
    """Which onboarding flow a wizard session runs."""

    team = "team"
    tenant = "tenant"


# -----------------------------------------------------
# STEP STATUS
# -----------------------------------------------------
class StepStatus(BaseStrEnum):
    completed = "completed"
    current = "current"
    locked = "locked"


# -----------------------------------------------------
# ROLE KEY (closed set of team-member roles)
# -----------------------------------------------------
class RoleKey(BaseStrEnum):
    property_manager = "PROPERTY_MANAGER"
    assistant_manager = "ASSISTANT_MANAGER"
    maintenance_staff = "MAINTENANCE_STAFF"
    accounting_staff = "ACCOUNTING_STAFF"
    leasing_agent = "LEASING_AGENT"
    regional_manager = "REGIONAL_MANAGER"
    senior_manager = "SENIOR_MANAGER"
    financial_controller = "FINANCIAL_CONTROLLER"
    legal_advisor = "LEGAL_ADVISOR"
    marketing_specialist = "MARKETING_SPECIALIST"
    system_administrator = "SYSTEM_ADMINISTRATOR"


# -----------------------------------------------------
# PERMISSION FLAG (form field names)
# -----------------------------------------------------
class PermissionFlag(BaseStrEnum):
    can_manage_properties = "canManageProperties"
    can_manage_tenants = "canManageTenants"
    can_manage_maintenance = "canManageMaintenance"
    can_manage_vendors = "canManageVendors"
    can_manage_financials = "canManageFinancials"
    can_view_reports = "canViewReports"
    can_view_analytics = "canViewAnalytics"
    can_view_audit_logs = "canViewAuditLogs"
    can_manage_team = "canManageTeam"
    can_assign_properties = "canAssignProperties"
    can_manage_settings = "canManageSettings"
    can_manage_integrations = "canManageIntegrations"
    can_manage_leases = "canManageLeases"
    can_manage_marketing = "canManageMarketing"
    can_manage_legal = "canManageLegal"
    can_manage_templates = "canManageTemplates"
    can_export_data = "canExportData"
    can_import_data = "canImportData"
