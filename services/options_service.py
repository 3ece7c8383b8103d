# services/options_service.py

"""
Reference data (properties, units) offered by certain wizard steps.
"""

from typing import List

from core.logging_config import logger
from core.supabase_client import get_supabase_client
from models.enums import WizardKind
from models.wizard import WizardOption


# Step id → option kinds it needs
OPTION_STEPS = {
    WizardKind.team: {5: ["property"]},
    WizardKind.tenant: {3: ["property", "unit"]},
}


def fetch_properties(client) -> List[WizardOption]:
    rows = (
        client.table("properties")
        .select("id, name")
        .order("name")
        .execute()
    ).data or []
    return [WizardOption(value=str(r["id"]), label=r.get("name") or str(r["id"])) for r in rows]


def fetch_units(client) -> List[WizardOption]:
    rows = (
        client.table("units")
        .select("id, unit_number, property_id")
        .order("unit_number")
        .execute()
    ).data or []
    return [
        WizardOption(
            value=str(r["id"]),
            label=str(r.get("unit_number") or r["id"]),
            kind="unit",
            parentId=str(r["property_id"]) if r.get("property_id") else None,
        )
        for r in rows
    ]


FETCHERS = {
    "property": fetch_properties,
    "unit": fetch_units,
}


def fetch_options_for_step(kind: WizardKind, step_id: int) -> List[WizardOption]:
    """
    Options for one step of a wizard. Steps without reference data, and
    deployments without a database, get an empty list.
    """
    needed = OPTION_STEPS.get(kind, {}).get(step_id)
    if not needed:
        return []

    client = get_supabase_client()
    if client is None:
        logger.warning(f"No database configured; {kind} step {step_id} has no options")
        return []

    options: List[WizardOption] = []
    for option_kind in needed:
        options.extend(FETCHERS[option_kind](client))
    return options
