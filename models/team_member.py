# models/team_member.py

from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, StrictBool, field_validator

from models.enums import AccessLevel, RoleKey


# -------------------------------------------------
# Step 1: Personal Info
# -------------------------------------------------
class TeamPersonalInfoStep(BaseModel):
    firstName: str = Field(min_length=2, max_length=50)
    lastName: str = Field(min_length=2, max_length=50)
    email: EmailStr
    phoneNumber: Optional[str] = None


# -------------------------------------------------
# Step 2: Profile
# -------------------------------------------------
class TeamProfileStep(BaseModel):
    bio: Optional[str] = Field(None, max_length=500)
    department: str = Field(min_length=1)
    hireDate: str = Field(min_length=1)
    employmentStatus: str = Field(min_length=1)

    # Uploaded avatar URL (never the local preview)
    avatar: Optional[str] = None


# -------------------------------------------------
# Step 3: Role & Access
# -------------------------------------------------
class TeamRoleAccessStep(BaseModel):
    role: RoleKey
    accessLevel: AccessLevel

    # Core Management
    canManageProperties: StrictBool
    canManageTenants: StrictBool
    canManageMaintenance: StrictBool
    canManageVendors: StrictBool

    # Financial & Reporting
    canManageFinancials: StrictBool
    canViewReports: StrictBool
    canViewAnalytics: StrictBool
    canViewAuditLogs: StrictBool

    # Administrative
    canManageTeam: StrictBool
    canAssignProperties: StrictBool
    canManageSettings: StrictBool
    canManageIntegrations: StrictBool

    # Specialized Operations
    canManageLeases: StrictBool
    canManageMarketing: StrictBool
    canManageLegal: StrictBool
    canManageTemplates: StrictBool

    # Data Management
    canExportData: StrictBool
    canImportData: StrictBool

    @field_validator("role", mode="before")
    @classmethod
    def role_required(cls, v):
        if v is None or v == "":
            raise ValueError("Role is required")
        return v

    @field_validator("accessLevel", mode="before")
    @classmethod
    def access_level_required(cls, v):
        if v is None or v == "":
            raise ValueError("Access level is required")
        return v


# -------------------------------------------------
# Step 4: Employment
# -------------------------------------------------
class TeamEmploymentStep(BaseModel):
    salary: Optional[float] = Field(None, ge=0)
    emergencyContactName: Optional[str] = None
    emergencyContactPhone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("salary", mode="before")
    @classmethod
    def salary_positive(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v < 0:
            raise ValueError("Salary must be positive")
        return v


# -------------------------------------------------
# Step 5: Review (property assignment)
# -------------------------------------------------
class TeamReviewStep(BaseModel):
    assignedProperties: List[str]

    @field_validator("assignedProperties")
    @classmethod
    def at_least_one_property(cls, v):
        if len(v) < 1:
            raise ValueError("At least one property must be assigned")
        return v


# -------------------------------------------------
# Whole form (union of every step)
# -------------------------------------------------
class TeamMemberForm(
    TeamPersonalInfoStep,
    TeamProfileStep,
    TeamRoleAccessStep,
    TeamEmploymentStep,
    TeamReviewStep,
):
    """
    Payload handed to the team-member persistence service.
    Field names are the camelCase keys the frontend form uses.
    """
    pass


TEAM_MEMBER_DEFAULTS = {
    "firstName": "",
    "lastName": "",
    "email": "",
    "phoneNumber": "",
    "bio": "",
    "department": "",
    "hireDate": "",
    "employmentStatus": "",
    "avatar": None,
    "role": "",
    "accessLevel": AccessLevel.basic.value,
    "canManageProperties": False,
    "canManageTenants": False,
    "canManageMaintenance": False,
    "canManageVendors": False,
    "canManageFinancials": False,
    "canViewReports": False,
    "canViewAnalytics": False,
    "canViewAuditLogs": False,
    "canManageTeam": False,
    "canAssignProperties": False,
    "canManageSettings": False,
    "canManageIntegrations": False,
    "canManageLeases": False,
    "canManageMarketing": False,
    "canManageLegal": False,
    "canManageTemplates": False,
    "canExportData": False,
    "canImportData": False,
    "salary": 0,
    "emergencyContactName": "",
    "emergencyContactPhone": "",
    "address": "",
    "assignedProperties": [],
}
