# services/wizard_factory.py

from functools import partial

from core.dirty_guard import DirtyStateGuard
from core.permission_engine import PermissionDerivationEngine
from core.steps import TEAM_WIZARD_STEPS, TENANT_WIZARD_STEPS
from core.wizard import WizardController
from core.wizard_sessions import WizardSession, get_session_store
from models.enums import WizardKind
from services import options_service, team_member_service, tenant_service


def build_team_controller() -> WizardController:
    return WizardController(
        TEAM_WIZARD_STEPS,
        submit_handler=team_member_service.create_team_member,
        derivation=PermissionDerivationEngine(),
        options_provider=partial(options_service.fetch_options_for_step, WizardKind.team),
        name="team-wizard",
    )


def build_tenant_controller() -> WizardController:
    return WizardController(
        TENANT_WIZARD_STEPS,
        submit_handler=tenant_service.create_tenant,
        options_provider=partial(options_service.fetch_options_for_step, WizardKind.tenant),
        name="tenant-wizard",
    )


BUILDERS = {
    WizardKind.team: build_team_controller,
    WizardKind.tenant: build_tenant_controller,
}


def registry_for(kind: WizardKind):
    return TEAM_WIZARD_STEPS if kind == WizardKind.team else TENANT_WIZARD_STEPS


def open_wizard_session(kind: WizardKind) -> WizardSession:
    """
    Open a fresh wizard and register it. Closing it through its guard
    drops the session from the store.
    """
    store = get_session_store()
    session = WizardSession(kind=kind, controller=BUILDERS[kind]())
    session.guard = DirtyStateGuard(
        session.controller,
        on_close=lambda: store.delete(session.id),
    )
    return store.add(session)
