# routers/wizards.py

from typing import Optional

from fastapi import (
    APIRouter, BackgroundTasks, File, HTTPException, Path, Query, UploadFile
)

from core.dirty_guard import ESCAPE_KEY
from core.errors import AvatarUploadError
from core.logging_config import logger
from core.permissions import is_permission_relevant, permissions_by_category
from core.roles import available_roles, get_role
from core.wizard_sessions import WizardSession, get_session_store
from models.enums import WizardKind
from models.wizard import FieldUpdate
from services import avatar_service
from services.wizard_factory import open_wizard_session, registry_for

router = APIRouter(
    prefix="/wizards",
    tags=["Onboarding Wizards"],
)


# -----------------------------------------------------
# Session lookup
# -----------------------------------------------------
def load_session(session_id: str) -> WizardSession:
    session = get_session_store().get(session_id)
    if session is None:
        raise HTTPException(404, "Wizard session not found")
    return session


def navigation_result(session: WizardSession, moved: bool) -> dict:
    return {"moved": moved, "state": session.to_dict()}


def close_result(session: WizardSession, confirmation) -> dict:
    return {
        "closed": confirmation is None and not session.guard.is_open,
        "confirmation": confirmation.to_dict() if confirmation else None,
        "state": session.to_dict(),
    }


# -----------------------------------------------------
# Catalogue
# -----------------------------------------------------
@router.get("/{kind}/steps", summary="Steps and field rules of a wizard")
def list_steps(kind: WizardKind):
    registry = registry_for(kind)
    return {
        "kind": kind.value,
        "stepCount": registry.count,
        "steps": [step.to_dict() for step in registry.steps],
    }


@router.get("/team/roles", summary="Roles selectable for a department")
def list_roles(department: Optional[str] = Query(None)):
    return [get_role(key).to_dict() for key in available_roles(department)]


@router.get("/team/permissions", summary="Permission flags grouped by category")
def list_permissions(role: Optional[str] = Query(None)):
    """
    Every permission flag, grouped for display. When a role is given each
    flag is marked relevant or not for that role.
    """
    return [
        {
            "category": category.value,
            "permissions": [
                {
                    "name": flag.value,
                    "relevant": is_permission_relevant(role, flag) if role else None,
                }
                for flag in flags
            ],
        }
        for category, flags in permissions_by_category().items()
    ]


# -----------------------------------------------------
# Open / read
# -----------------------------------------------------
@router.post("/{kind}", status_code=201, summary="Open a wizard session")
def open_wizard(kind: WizardKind):
    session = open_wizard_session(kind)
    return session.to_dict()


@router.get("/sessions/{session_id}", summary="Current wizard state")
def get_wizard(session_id: str):
    return load_session(session_id).to_dict()


# -----------------------------------------------------
# Field edits
# -----------------------------------------------------
@router.patch("/sessions/{session_id}/fields", summary="Set one form field")
def update_field(session_id: str, payload: FieldUpdate):
    session = load_session(session_id)
    session.controller.update_field(payload.name, payload.value)
    return session.to_dict()


@router.post("/sessions/{session_id}/permissions/clear", summary="Turn every permission off")
def clear_permissions(session_id: str):
    session = load_session(session_id)
    session.controller.clear_permissions()
    return session.to_dict()


# -----------------------------------------------------
# Navigation
# -----------------------------------------------------
@router.post("/sessions/{session_id}/next", summary="Advance when the current step is valid")
def next_step(session_id: str):
    session = load_session(session_id)
    return navigation_result(session, session.controller.go_next())


@router.post("/sessions/{session_id}/back", summary="Go to the previous step")
def previous_step(session_id: str):
    session = load_session(session_id)
    return navigation_result(session, session.controller.go_back())


@router.post("/sessions/{session_id}/goto/{step_id}", summary="Jump to a step already reached")
def goto_step(session_id: str, step_id: int = Path(..., ge=1)):
    session = load_session(session_id)
    return navigation_result(session, session.controller.go_to_step(step_id))


# -----------------------------------------------------
# Reference options
# -----------------------------------------------------
@router.get("/sessions/{session_id}/steps/{step_id}/options", summary="Reference options for a step")
def step_options(session_id: str, step_id: int):
    session = load_session(session_id)
    try:
        options = session.controller.options_for_step(step_id)
    except KeyError:
        raise HTTPException(404, f"Step {step_id} not found")
    return list(options)


# -----------------------------------------------------
# Avatar
# -----------------------------------------------------
def finish_avatar_upload(
    session: WizardSession,
    token: int,
    filename: str,
    data: bytes,
    content_type: Optional[str],
):
    try:
        session.controller.complete_avatar_upload(
            lambda: avatar_service.upload_avatar(session.id, filename, data, content_type),
            token=token,
        )
    except AvatarUploadError:
        # Already logged; the preview has been reverted for the next poll
        return


@router.post("/sessions/{session_id}/avatar", status_code=202, summary="Stage and upload an avatar")
async def upload_avatar(
    session_id: str,
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
):
    session = load_session(session_id)
    data = await file.read()

    avatar_service.validate_avatar(file.filename, len(data))

    token = session.controller.stage_avatar(avatar_service.build_preview(data, file.content_type))
    background_tasks.add_task(finish_avatar_upload, session, token, file.filename, data, file.content_type)

    logger.info(f"Avatar staged for wizard session {session_id} ({len(data)} bytes)")
    return session.to_dict()


# -----------------------------------------------------
# Submit
# -----------------------------------------------------
@router.post("/sessions/{session_id}/submit", summary="Submit the completed wizard")
def submit_wizard(session_id: str):
    session = load_session(session_id)
    entity = session.controller.submit()
    return {
        "entity": entity,
        "state": session.to_dict(),
    }


# -----------------------------------------------------
# Close (unsaved-changes guard)
# -----------------------------------------------------
@router.post("/sessions/{session_id}/close", summary="Request to close the wizard")
def close_wizard(session_id: str):
    session = load_session(session_id)
    return close_result(session, session.guard.request_close())


@router.post("/sessions/{session_id}/close/confirm", summary="Close without saving")
def confirm_close(session_id: str):
    session = load_session(session_id)
    if not session.guard.confirm():
        raise HTTPException(409, "No close request is pending")
    return close_result(session, None)


@router.post("/sessions/{session_id}/close/cancel", summary="Continue editing")
def cancel_close(session_id: str):
    session = load_session(session_id)
    session.guard.cancel()
    return close_result(session, None)


@router.post("/sessions/{session_id}/keys/{key}", summary="Keyboard shortcut")
def press_key(session_id: str, key: str):
    session = load_session(session_id)
    if key != ESCAPE_KEY:
        return {"handled": False, **close_result(session, None)}
    return {"handled": True, **close_result(session, session.guard.handle_key(key))}
