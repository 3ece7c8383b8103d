# services/tenant_service.py

from typing import Any, Dict

from core.errors import SubmissionError, handle_supabase_error
from core.logging_config import logger
from core.supabase_client import get_supabase_client


def build_tenant_row(form: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "email": form["email"].strip().lower(),
        "first_name": form["firstName"].strip(),
        "last_name": form["lastName"].strip(),
        "phone_number": form.get("phoneNumber") or None,
        "date_of_birth": form.get("dateOfBirth") or None,
        "avatar": form.get("avatar"),
        "current_address": form.get("currentAddress"),
        "employer": form.get("employer") or None,
        "employment_status": form.get("employmentStatus"),
        "monthly_income": form.get("monthlyIncome"),
        "emergency_contact_name": form.get("emergencyContactName"),
        "emergency_contact_phone": form.get("emergencyContactPhone"),
        "has_pets": bool(form.get("hasPets")),
        "notes": form.get("notes") or None,
        "status": "pending",
    }


def build_lease_row(form: Dict[str, Any], tenant_id: str) -> Dict[str, Any]:
    return {
        "tenant_id": tenant_id,
        "property_id": form["propertyId"],
        "unit_id": form["unitId"],
        "start_date": str(form["leaseStartDate"]),
        "end_date": str(form["leaseEndDate"]),
        "monthly_rent": form["monthlyRent"],
        "security_deposit": form.get("securityDeposit") or 0,
        "status": "pending",
    }


def create_tenant(form: Dict[str, Any]) -> Dict[str, Any]:
    """Insert the tenant, then their lease. Raises SubmissionError on failure."""
    client = get_supabase_client()
    if client is None:
        raise SubmissionError("Database is not configured", status_code=503)

    tenant_row = build_tenant_row(form)

    try:
        existing = (
            client.table("tenants")
            .select("id")
            .eq("email", tenant_row["email"])
            .limit(1)
            .execute()
        )
        if existing.data:
            raise SubmissionError("A tenant with this email already exists", status_code=400)

        result = client.table("tenants").insert(tenant_row).execute()
        if not result.data:
            raise SubmissionError("Failed to create tenant")
        tenant = result.data[0]

        lease = client.table("leases").insert(build_lease_row(form, tenant["id"])).execute()
    except SubmissionError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create tenant") from e

    tenant["lease"] = (lease.data or [None])[0]
    logger.info(f"Created tenant {tenant['id']} for unit {form['unitId']}")
    return tenant
