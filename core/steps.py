# core/steps.py

"""
Ordered wizard steps and their validation schemas.

Every step owns a pydantic model covering only its own fields. The
whole-form model is the union of all step models, so validating it
re-checks every step regardless of which one is current.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Type

from pydantic import BaseModel, ValidationError

from core.errors import FieldValidationError
from models.team_member import (
    TeamPersonalInfoStep,
    TeamProfileStep,
    TeamRoleAccessStep,
    TeamEmploymentStep,
    TeamReviewStep,
    TeamMemberForm,
    TEAM_MEMBER_DEFAULTS,
)
from models.tenant import (
    TenantPersonalInfoStep,
    TenantBackgroundStep,
    TenantLeaseStep,
    TenantScreeningStep,
    TenantReviewStep,
    TenantForm,
    TENANT_DEFAULTS,
)


@dataclass(frozen=True)
class FieldConstraint:
    name: str
    type: str
    required: bool
    rules: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "rules": list(self.rules),
        }


@dataclass(frozen=True)
class Step:
    id: int
    title: str
    schema: Type[BaseModel]
    description: str = ""

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(self.schema.model_fields)

    def constraints(self) -> List[FieldConstraint]:
        result = []
        for name, info in self.schema.model_fields.items():
            annotation = info.annotation
            type_name = getattr(annotation, "__name__", None) or str(annotation).replace("typing.", "")
            result.append(
                FieldConstraint(
                    name=name,
                    type=type_name,
                    required=info.is_required(),
                    rules=tuple(str(rule) for rule in info.metadata),
                )
            )
        return result

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "fields": [c.to_dict() for c in self.constraints()],
        }


def _field_errors(exc: ValidationError) -> List[FieldValidationError]:
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "__all__"
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append(FieldValidationError(field=field, message=message))
    return errors


class StepRegistry:
    """
    Immutable, ordered list of steps (ids 1..N) plus the merged form schema
    and the declared default value of every field.
    """

    def __init__(
        self,
        steps: Sequence[Step],
        form_schema: Type[BaseModel],
        defaults: Mapping[str, Any],
    ):
        ordered = tuple(sorted(steps, key=lambda s: s.id))
        if not ordered:
            raise ValueError("A wizard needs at least one step")
        if [s.id for s in ordered] != list(range(1, len(ordered) + 1)):
            raise ValueError("Step ids must be contiguous and start at 1")

        step_fields = [name for s in ordered for name in s.fields]
        if len(step_fields) != len(set(step_fields)):
            raise ValueError("A field may belong to only one step")

        missing_in_form = set(step_fields) - set(form_schema.model_fields)
        if missing_in_form:
            raise ValueError(f"Form schema lacks step fields: {sorted(missing_in_form)}")

        missing_defaults = set(form_schema.model_fields) - set(defaults)
        if missing_defaults:
            raise ValueError(f"No default declared for: {sorted(missing_defaults)}")

        self._steps = ordered
        self._form_schema = form_schema
        self._defaults = dict(defaults)

    # -----------------------------------------------------
    # Catalogue
    # -----------------------------------------------------
    @property
    def steps(self) -> Tuple[Step, ...]:
        return self._steps

    @property
    def count(self) -> int:
        return len(self._steps)

    @property
    def form_schema(self) -> Type[BaseModel]:
        return self._form_schema

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(self._form_schema.model_fields)

    def get(self, step_id: int) -> Step:
        if not 1 <= step_id <= self.count:
            raise KeyError(f"No step {step_id}")
        return self._steps[step_id - 1]

    def step_for_field(self, name: str) -> Step:
        for step in self._steps:
            if name in step.fields:
                return step
        raise KeyError(name)

    def defaults(self) -> Dict[str, Any]:
        """Fresh copy of the declared defaults (lists are not shared)."""
        return copy.deepcopy(self._defaults)

    # -----------------------------------------------------
    # Validation
    # -----------------------------------------------------
    def validate_step(self, step_id: int, values: Mapping[str, Any]) -> List[FieldValidationError]:
        step = self.get(step_id)
        subset = {name: values.get(name) for name in step.fields}
        try:
            step.schema.model_validate(subset)
        except ValidationError as exc:
            return _field_errors(exc)
        return []

    def validate_form(self, values: Mapping[str, Any]) -> List[FieldValidationError]:
        try:
            self._form_schema.model_validate(dict(values))
        except ValidationError as exc:
            return _field_errors(exc)
        return []


# ============================================================
# Team member onboarding
# ============================================================
TEAM_WIZARD_STEPS = StepRegistry(
    steps=[
        Step(1, "Personal Info", TeamPersonalInfoStep, "Name and contact details"),
        Step(2, "Profile", TeamProfileStep, "Department, hire date and photo"),
        Step(3, "Role & Access", TeamRoleAccessStep, "Role, access level and permissions"),
        Step(4, "Employment", TeamEmploymentStep, "Compensation and emergency contact"),
        Step(5, "Review", TeamReviewStep, "Property assignment and final review"),
    ],
    form_schema=TeamMemberForm,
    defaults=TEAM_MEMBER_DEFAULTS,
)


# ============================================================
# Tenant onboarding
# ============================================================
TENANT_WIZARD_STEPS = StepRegistry(
    steps=[
        Step(1, "Personal Info", TenantPersonalInfoStep, "Name and contact details"),
        Step(2, "Background", TenantBackgroundStep, "Address, employment and income"),
        Step(3, "Lease Details", TenantLeaseStep, "Property, unit and lease terms"),
        Step(4, "Screening", TenantScreeningStep, "Emergency contact and screening consent"),
        Step(5, "Review", TenantReviewStep, "Confirm and accept terms"),
    ],
    form_schema=TenantForm,
    defaults=TENANT_DEFAULTS,
)
