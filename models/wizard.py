# models/wizard.py

from typing import Any, Optional
from pydantic import BaseModel


# -------------------------------------------------
# PATCH /wizards/sessions/{id}/fields
# -------------------------------------------------
class FieldUpdate(BaseModel):
    name: str
    value: Any = None


# -------------------------------------------------
# Reference option offered by a step
# (properties, units; read-only to the wizard)
# -------------------------------------------------
class WizardOption(BaseModel):
    value: str
    label: str
    kind: str = "property"
    parentId: Optional[str] = None

    model_config = {"frozen": True}
