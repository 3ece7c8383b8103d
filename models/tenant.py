# models/tenant.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, StrictBool, ValidationInfo, field_validator


def _blank_to_none(v):
    if isinstance(v, str) and v.strip() == "":
        return None
    return v


# -------------------------------------------------
# Step 1: Personal Info
# -------------------------------------------------
class TenantPersonalInfoStep(BaseModel):
    firstName: str = Field(min_length=2, max_length=50)
    lastName: str = Field(min_length=2, max_length=50)
    email: EmailStr
    phoneNumber: Optional[str] = None
    dateOfBirth: Optional[date] = None
    avatar: Optional[str] = None

    @field_validator("dateOfBirth", mode="before")
    @classmethod
    def blank_date(cls, v):
        return _blank_to_none(v)


# -------------------------------------------------
# Step 2: Background
# -------------------------------------------------
class TenantBackgroundStep(BaseModel):
    currentAddress: str = Field(min_length=1)
    employer: Optional[str] = None
    employmentStatus: str = Field(min_length=1)
    monthlyIncome: float = Field(ge=0)


# -------------------------------------------------
# Step 3: Lease Details
# -------------------------------------------------
class TenantLeaseStep(BaseModel):
    propertyId: str = Field(min_length=1)
    unitId: str = Field(min_length=1)
    leaseStartDate: date
    leaseEndDate: date
    monthlyRent: float = Field(gt=0)
    securityDeposit: float = Field(ge=0)

    @field_validator("leaseEndDate")
    @classmethod
    def end_after_start(cls, v: date, info: ValidationInfo):
        start = info.data.get("leaseStartDate")
        if start is not None and v <= start:
            raise ValueError("Lease end date must be after the start date")
        return v


# -------------------------------------------------
# Step 4: Screening
# -------------------------------------------------
class TenantScreeningStep(BaseModel):
    emergencyContactName: str = Field(min_length=1)
    emergencyContactPhone: str = Field(min_length=1)
    backgroundCheckConsent: StrictBool
    creditCheckConsent: StrictBool
    hasPets: StrictBool = False
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("backgroundCheckConsent", "creditCheckConsent")
    @classmethod
    def consent_given(cls, v: bool, info: ValidationInfo):
        if not v:
            label = "Background check" if info.field_name == "backgroundCheckConsent" else "Credit check"
            raise ValueError(f"{label} consent is required")
        return v


# -------------------------------------------------
# Step 5: Review
# -------------------------------------------------
class TenantReviewStep(BaseModel):
    agreeToTerms: StrictBool

    @field_validator("agreeToTerms")
    @classmethod
    def terms_accepted(cls, v: bool):
        if not v:
            raise ValueError("You must accept the lease terms")
        return v


# -------------------------------------------------
# Whole form (union of every step)
# -------------------------------------------------
class TenantForm(
    TenantPersonalInfoStep,
    TenantBackgroundStep,
    TenantLeaseStep,
    TenantScreeningStep,
    TenantReviewStep,
):
    pass


TENANT_DEFAULTS = {
    "firstName": "",
    "lastName": "",
    "email": "",
    "phoneNumber": "",
    "dateOfBirth": None,
    "avatar": None,
    "currentAddress": "",
    "employer": "",
    "employmentStatus": "",
    "monthlyIncome": 0,
    "propertyId": "",
    "unitId": "",
    "leaseStartDate": "",
    "leaseEndDate": "",
    "monthlyRent": 0,
    "securityDeposit": 0,
    "emergencyContactName": "",
    "emergencyContactPhone": "",
    "backgroundCheckConsent": False,
    "creditCheckConsent": False,
    "hasPets": False,
    "notes": "",
    "agreeToTerms": False,
}
