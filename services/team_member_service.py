# services/team_member_service.py

"""
Persistence for a completed "Add Team Member" wizard.
"""

import re
from typing import Any, Dict

from core.errors import SubmissionError, handle_supabase_error
from core.logging_config import logger
from core.permissions import ALL_PERMISSION_FIELDS
from core.supabase_client import get_supabase_client


def to_snake(name: str) -> str:
    """canManageProperties → can_manage_properties"""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def build_team_member_row(form: Dict[str, Any]) -> Dict[str, Any]:
    row = {
        "email": form["email"].strip().lower(),
        "first_name": form["firstName"].strip(),
        "last_name": form["lastName"].strip(),
        "phone_number": form.get("phoneNumber") or None,
        "role": form["role"],
        "is_active": True,
        "email_verified": False,
        "bio": form.get("bio") or None,
        "department": form.get("department"),
        "hire_date": form.get("hireDate"),
        "salary": form.get("salary"),
        "employment_status": form.get("employmentStatus"),
        "access_level": form.get("accessLevel") or "Basic",
        "avatar": form.get("avatar"),
        "emergency_contact_name": form.get("emergencyContactName") or None,
        "emergency_contact_phone": form.get("emergencyContactPhone") or None,
        "address": form.get("address") or None,
    }
    for field in ALL_PERMISSION_FIELDS:
        row[to_snake(field)] = bool(form.get(field, False))
    return row


def create_team_member(form: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert the team member and their property assignments.
    Raises SubmissionError on any failure; nothing is retried.
    """
    client = get_supabase_client()
    if client is None:
        raise SubmissionError("Database is not configured", status_code=503)

    row = build_team_member_row(form)

    try:
        existing = (
            client.table("users")
            .select("id")
            .eq("email", row["email"])
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create team member") from e

    if existing.data:
        raise SubmissionError("Email already exists", status_code=400)

    try:
        result = client.table("users").insert(row).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create team member") from e

    if not result.data:
        raise SubmissionError("Failed to create team member")

    member = result.data[0]

    assignments = [
        {"team_member_id": member["id"], "property_id": property_id}
        for property_id in form.get("assignedProperties") or []
    ]
    if assignments:
        try:
            client.table("team_member_properties").insert(assignments).execute()
        except Exception as e:
            raise handle_supabase_error(e, "Failed to assign properties") from e

    logger.info(f"Created team member {member['id']} ({row['role']}) with {len(assignments)} properties")
    return member
