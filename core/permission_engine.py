# core/permission_engine.py

from typing import Dict, List, Mapping, MutableMapping, Optional

from core.logging_config import logger
from core.permissions import ALL_PERMISSION_FIELDS
from core.roles import DEPARTMENT_ROLES, ROLE_DEFINITIONS, RoleDefinition, parse_role
from models.enums import AccessLevel, RoleKey


ROLE_FIELD = "role"
DEPARTMENT_FIELD = "department"
ACCESS_LEVEL_FIELD = "accessLevel"


class PermissionDerivationEngine:
    """
    Keeps role, department, accessLevel and every permission flag consistent.

    Only a role or department change re-derives permissions. Manual flag
    edits made afterwards are left alone until the next such change.
    """

    watched_fields = frozenset({ROLE_FIELD, DEPARTMENT_FIELD})

    def __init__(
        self,
        roles: Mapping[RoleKey, RoleDefinition] = ROLE_DEFINITIONS,
        department_roles: Mapping[str, List[RoleKey]] = DEPARTMENT_ROLES,
        permission_fields: List[str] = ALL_PERMISSION_FIELDS,
    ):
        self._roles = roles
        self._department_roles = department_roles
        self._permission_fields = list(permission_fields)

    def watches(self, name: str) -> bool:
        return name in self.watched_fields

    def allowed_roles(self, department: Optional[str]) -> List[RoleKey]:
        if not department:
            return list(self._roles)
        return list(self._department_roles.get(str(department), []))

    def on_field_changed(self, name: str, values: MutableMapping) -> None:
        if name == ROLE_FIELD:
            self.apply_role(values, values.get(ROLE_FIELD))
        elif name == DEPARTMENT_FIELD:
            self.apply_department(values, values.get(DEPARTMENT_FIELD))

    # -----------------------------------------------------
    # Role change
    # -----------------------------------------------------
    def apply_role(self, values: MutableMapping, role) -> None:
        """
        Full reset of every flag, then the role's preset and access level.
        A role outside the current department's allowed set is cleared.
        """
        key = parse_role(role)
        department = values.get(DEPARTMENT_FIELD)

        if key is not None and department and key not in self.allowed_roles(department):
            logger.warning(f"Role {key} is not offered by department '{department}', clearing it")
            key = None

        if key is None or key not in self._roles:
            self._clear_role(values)
            return

        self.clear_permissions(values)
        definition = self._roles[key]
        for name, enabled in definition.permission_preset.items():
            values[name] = bool(enabled)
        values[ROLE_FIELD] = key.value
        values[ACCESS_LEVEL_FIELD] = definition.default_access_level.value
        logger.info(f"Applied permission preset for role {key} ({definition.default_access_level})")

    # -----------------------------------------------------
    # Department change
    # -----------------------------------------------------
    def apply_department(self, values: MutableMapping, department) -> None:
        if not department:
            return

        allowed = self.allowed_roles(department)
        current = parse_role(values.get(ROLE_FIELD))

        if current is not None and current in allowed:
            return

        if current is not None:
            logger.info(f"Role {current} not available in '{department}', clearing role and permissions")
        self._clear_role(values)

        # Single-role department: pick it, but only when no role was selected before
        if current is None and len(allowed) == 1:
            logger.info(f"Auto-selecting single role {allowed[0]} for '{department}'")
            self.apply_role(values, allowed[0])

    # -----------------------------------------------------
    # Clear All
    # -----------------------------------------------------
    def clear_permissions(self, values: MutableMapping) -> None:
        """Every flag off. Role, department and access level are untouched."""
        for name in self._permission_fields:
            values[name] = False

    def permissions(self, values: Mapping) -> Dict[str, bool]:
        return {name: bool(values.get(name)) for name in self._permission_fields}

    def _clear_role(self, values: MutableMapping) -> None:
        values[ROLE_FIELD] = ""
        self.clear_permissions(values)
        values[ACCESS_LEVEL_FIELD] = AccessLevel.basic.value
