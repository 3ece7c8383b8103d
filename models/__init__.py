# -------------------------
# Enums
# -------------------------
from .enums import (
    AccessLevel,
    Department,
    EmploymentStatus,
    PermissionCategory,
    StepStatus,
    WizardKind,
)

# -------------------------
# Team Member Wizard
# -------------------------
from .team_member import (
    TeamPersonalInfoStep,
    TeamProfileStep,
    TeamRoleAccessStep,
    TeamEmploymentStep,
    TeamReviewStep,
    TeamMemberForm,
    TEAM_MEMBER_DEFAULTS,
)

# -------------------------
# Tenant Wizard
# -------------------------
from .tenant import (
    TenantPersonalInfoStep,
    TenantBackgroundStep,
    TenantLeaseStep,
    TenantScreeningStep,
    TenantReviewStep,
    TenantForm,
    TENANT_DEFAULTS,
)

# -------------------------
# API bodies
# -------------------------
from .wizard import FieldUpdate, WizardOption

__all__ = [
    # enums
    "AccessLevel",
    "Department",
    "EmploymentStatus",
    "PermissionCategory",
    "StepStatus",
    "WizardKind",

    # team member
    "TeamPersonalInfoStep",
    "TeamProfileStep",
    "TeamRoleAccessStep",
    "TeamEmploymentStep",
    "TeamReviewStep",
    "TeamMemberForm",
    "TEAM_MEMBER_DEFAULTS",

    # tenant
    "TenantPersonalInfoStep",
    "TenantBackgroundStep",
    "TenantLeaseStep",
    "TenantScreeningStep",
    "TenantReviewStep",
    "TenantForm",
    "TENANT_DEFAULTS",

    # api
    "FieldUpdate",
    "WizardOption",
]
