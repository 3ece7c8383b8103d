# tests/test_wizard_controller.py

"""
Tests for wizard navigation, validation and submission.
"""

import threading

import pytest
from unittest.mock import Mock

from core.errors import (
    AvatarUploadError,
    FormValidationError,
    SubmissionError,
    SubmissionInProgressError,
    UnknownFieldError,
)
from core.dirty_guard import DirtyStateGuard
from core.steps import TEAM_WIZARD_STEPS
from core.wizard import WizardController


# -----------------------------------------------------
# Navigation
# -----------------------------------------------------
def test_starts_on_first_step_with_defaults(team_controller):
    assert team_controller.current_step_id == 1
    assert team_controller.is_first_step
    assert team_controller.values() == TEAM_WIZARD_STEPS.defaults()
    assert not team_controller.is_dirty


def test_go_next_moves_only_when_step_valid(team_controller, team_step_values):
    for step_id in range(1, team_controller.step_count):
        # Employment has no required fields, so it is valid from the start
        if step_id != 4:
            assert not team_controller.is_step_valid(step_id)
            assert team_controller.go_next() is False
            assert team_controller.current_step_id == step_id

        team_controller.update_fields(team_step_values[step_id])
        assert team_controller.is_step_valid(step_id)
        assert team_controller.go_next() is True
        assert team_controller.current_step_id == step_id + 1


def test_go_next_on_last_step_stays(completed_team_controller):
    assert completed_team_controller.is_last_step
    assert completed_team_controller.go_next() is False
    assert completed_team_controller.current_step_id == 5


def test_go_back_stops_at_first_step(team_controller, team_step_values):
    assert team_controller.go_back() is False

    team_controller.update_fields(team_step_values[1])
    team_controller.go_next()
    assert team_controller.go_back() is True
    assert team_controller.current_step_id == 1


def test_go_to_step_never_skips_ahead(completed_team_controller):
    controller = completed_team_controller

    assert controller.go_to_step(6) is False
    assert controller.go_to_step(0) is False
    assert controller.current_step_id == 5

    assert controller.go_to_step(2) is True
    assert controller.current_step_id == 2

    # Only steps up to the current one are reachable
    assert controller.go_to_step(5) is False
    assert controller.current_step_id == 2
    assert controller.go_to_step(2) is True


def test_step_statuses(completed_team_controller):
    completed_team_controller.go_to_step(3)
    statuses = completed_team_controller.step_statuses()

    assert [s["status"] for s in statuses] == ["completed", "completed", "current", "locked", "locked"]
    assert [s["navigable"] for s in statuses] == [True, True, True, False, False]
    assert statuses[2]["title"] == "Role & Access"


def test_is_step_valid_for_unknown_step(team_controller):
    assert team_controller.is_step_valid(99) is False


# -----------------------------------------------------
# Field state
# -----------------------------------------------------
def test_update_field_marks_dirty_and_reset_restores_defaults(team_controller, team_step_values):
    team_controller.update_fields(team_step_values[1])
    team_controller.go_next()
    team_controller.update_field("role", "SENIOR_MANAGER")
    assert team_controller.is_dirty

    team_controller.reset()

    assert not team_controller.is_dirty
    assert team_controller.current_step_id == 1
    assert team_controller.values() == TEAM_WIZARD_STEPS.defaults()


def test_unknown_field_rejected(team_controller):
    with pytest.raises(UnknownFieldError) as exc:
        team_controller.update_field("favouriteColour", "teal")
    assert exc.value.name == "favouriteColour"
    assert not team_controller.is_dirty


def test_values_are_copies(team_controller):
    team_controller.values()["assignedProperties"].append("prop-9")
    assert team_controller.get_field("assignedProperties") == []


def test_step_errors_report_field_and_message(team_controller):
    team_controller.update_field("firstName", "J")
    errors = {e.field: e.message for e in team_controller.step_errors(1)}

    assert "firstName" in errors
    assert "email" in errors


def test_salary_must_be_positive(team_controller):
    team_controller.update_field("salary", -10)
    errors = {e.field: e.message for e in team_controller.step_errors(4)}
    assert errors["salary"] == "Salary must be positive"


def test_review_requires_a_property(team_controller):
    errors = {e.field: e.message for e in team_controller.step_errors(5)}
    assert errors["assignedProperties"] == "At least one property must be assigned"


# -----------------------------------------------------
# Validation message
# -----------------------------------------------------
def test_validation_message(team_controller, team_step_values):
    assert team_controller.validation_message() == "Step 1 of 5 - Complete required fields to continue"

    team_controller.update_fields(team_step_values[1])
    assert team_controller.validation_message() == "Step 1 of 5 - All required fields completed"


def test_final_step_message_follows_whole_form(completed_team_controller):
    controller = completed_team_controller
    assert controller.validation_message() == "Step 5 of 5 - All required fields completed"

    controller.update_field("email", "not-an-email")
    assert controller.is_step_valid(5)
    assert controller.validation_message() == "Step 5 of 5 - Complete required fields to continue"


# -----------------------------------------------------
# Submission
# -----------------------------------------------------
def test_earlier_step_edit_invalidates_submission(completed_team_controller, submit_handler):
    controller = completed_team_controller
    assert controller.is_submission_valid()

    controller.go_to_step(1)
    controller.update_field("firstName", "")

    assert not controller.is_submission_valid()
    with pytest.raises(FormValidationError) as exc:
        controller.submit()
    assert "firstName" in {e.field for e in exc.value.errors}
    submit_handler.assert_not_called()


def test_submit_success_resets_form(completed_team_controller, submit_handler):
    controller = completed_team_controller

    entity = controller.submit()

    assert entity == {"id": "member-1"}
    submitted = submit_handler.call_args[0][0]
    assert submitted["firstName"] == "Jane"
    assert submitted["role"] == "PROPERTY_MANAGER"
    assert submitted["assignedProperties"] == ["prop-1"]

    assert controller.is_submitted
    assert controller.last_entity == entity
    assert not controller.is_dirty
    assert controller.current_step_id == 1
    assert controller.values() == TEAM_WIZARD_STEPS.defaults()


def test_submit_failure_keeps_form(completed_team_controller, submit_handler):
    controller = completed_team_controller
    submit_handler.side_effect = SubmissionError("Email already exists", status_code=400)

    with pytest.raises(SubmissionError) as exc:
        controller.submit()

    assert exc.value.status_code == 400
    assert not controller.is_submitting
    assert not controller.is_submitted
    assert controller.is_dirty
    assert controller.current_step_id == 5
    assert controller.get_field("firstName") == "Jane"


def test_unexpected_failure_becomes_submission_error(completed_team_controller, submit_handler):
    submit_handler.side_effect = RuntimeError("connection reset")

    with pytest.raises(SubmissionError) as exc:
        completed_team_controller.submit()

    assert exc.value.detail == "Submission failed, please try again"
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert not completed_team_controller.is_submitting


def test_second_submit_while_in_flight_rejected(team_step_values):
    attempts = []

    def handler(values):
        with pytest.raises(SubmissionInProgressError):
            controller.submit()
        attempts.append(values)
        return {"id": "member-2"}

    controller = WizardController(TEAM_WIZARD_STEPS, submit_handler=handler)
    for step_id in sorted(team_step_values):
        controller.update_fields(team_step_values[step_id])
        controller.go_next()

    assert controller.submit() == {"id": "member-2"}
    assert len(attempts) == 1


def test_submit_from_two_threads_runs_handler_once(team_step_values):
    entered = threading.Event()
    release = threading.Event()
    calls = []

    def slow_handler(values):
        calls.append(values)
        entered.set()
        release.wait(timeout=5)
        return {"id": "member-3"}

    controller = WizardController(TEAM_WIZARD_STEPS, submit_handler=slow_handler)
    for step_id in sorted(team_step_values):
        controller.update_fields(team_step_values[step_id])
        controller.go_next()

    worker = threading.Thread(target=controller.submit)
    worker.start()
    assert entered.wait(timeout=5)

    assert controller.is_submitting
    with pytest.raises(SubmissionInProgressError):
        controller.submit()

    release.set()
    worker.join(timeout=5)
    assert len(calls) == 1
    assert not controller.is_submitting
    assert controller.is_submitted


def test_reset_clears_submitted_flag(completed_team_controller):
    controller = completed_team_controller
    guard = DirtyStateGuard(controller)
    controller.submit()
    assert controller.is_submitted

    guard.open()

    assert not controller.is_submitted
    assert controller.snapshot()["isSubmitted"] is False


def test_staging_avatar_clears_submitted_flag(completed_team_controller):
    controller = completed_team_controller
    controller.submit()

    controller.stage_avatar("data:image/png;base64,FFFF")

    assert not controller.is_submitted


# -----------------------------------------------------
# Reference options
# -----------------------------------------------------
def test_options_fetched_once_per_step(submit_handler):
    provider = Mock(return_value=["prop-1", "prop-2"])
    controller = WizardController(TEAM_WIZARD_STEPS, submit_handler, options_provider=provider)

    first = controller.options_for_step(5)
    second = controller.options_for_step(5)

    assert first == ("prop-1", "prop-2")
    assert first is second
    provider.assert_called_once_with(5)


def test_options_for_unknown_step(team_controller):
    with pytest.raises(KeyError):
        team_controller.options_for_step(8)


def test_options_without_provider_are_empty(team_controller):
    assert team_controller.options_for_step(5) == ()


# -----------------------------------------------------
# Avatar
# -----------------------------------------------------
def test_avatar_upload_success(team_controller):
    team_controller.stage_avatar("data:image/png;base64,AAAA")
    assert team_controller.avatar_preview == "data:image/png;base64,AAAA"
    assert team_controller.get_field("avatar") is None
    assert team_controller.is_dirty

    url = team_controller.complete_avatar_upload(lambda: "https://cdn.example.com/a.png")

    assert url == "https://cdn.example.com/a.png"
    assert team_controller.get_field("avatar") == url
    assert team_controller.avatar_preview == url


def test_avatar_upload_failure_reverts_preview(team_controller):
    team_controller.complete_avatar_upload(lambda: "https://cdn.example.com/old.png")
    team_controller.stage_avatar("data:image/png;base64,BBBB")

    def broken_upload():
        raise ConnectionError("bucket unreachable")

    with pytest.raises(AvatarUploadError):
        team_controller.complete_avatar_upload(broken_upload)

    assert team_controller.avatar_preview == "https://cdn.example.com/old.png"
    assert team_controller.get_field("avatar") == "https://cdn.example.com/old.png"


def test_late_upload_after_confirmed_close_is_discarded(team_controller):
    guard = DirtyStateGuard(team_controller)
    token = team_controller.stage_avatar("data:image/png;base64,CCCC")
    guard.request_close()
    guard.confirm()

    result = team_controller.complete_avatar_upload(lambda: "https://cdn.example.com/old.png", token=token)

    assert result is None
    assert team_controller.get_field("avatar") is None
    assert team_controller.avatar_preview is None
    assert not team_controller.is_dirty
    assert team_controller.values() == TEAM_WIZARD_STEPS.defaults()


def test_late_upload_after_submit_is_discarded(completed_team_controller):
    controller = completed_team_controller
    token = controller.stage_avatar("data:image/png;base64,DDDD")
    controller.submit()

    result = controller.complete_avatar_upload(lambda: "https://cdn.example.com/prev-member.png", token=token)

    assert result is None
    assert controller.get_field("avatar") is None
    assert not controller.is_dirty
    assert controller.is_submitted


def test_late_failure_after_reset_is_ignored(team_controller):
    token = team_controller.stage_avatar("data:image/png;base64,EEEE")
    team_controller.reset()

    def broken_upload():
        raise ConnectionError("bucket unreachable")

    assert team_controller.complete_avatar_upload(broken_upload, token=token) is None
    assert not team_controller.is_dirty


def test_newer_avatar_wins_over_older_upload(team_controller):
    first = team_controller.stage_avatar("data:image/png;base64,AAAA")
    second = team_controller.stage_avatar("data:image/png;base64,BBBB")

    team_controller.complete_avatar_upload(lambda: "https://cdn.example.com/second.png", token=second)
    team_controller.complete_avatar_upload(lambda: "https://cdn.example.com/first.png", token=first)

    assert team_controller.get_field("avatar") == "https://cdn.example.com/second.png"
    assert team_controller.avatar_preview == "https://cdn.example.com/second.png"


def test_snapshot_omits_pending_preview(team_controller):
    token = team_controller.stage_avatar("data:image/png;base64," + "A" * 4096)

    state = team_controller.snapshot()
    assert state["avatarPending"] is True
    assert state["avatarPreview"] is None

    team_controller.complete_avatar_upload(lambda: "https://cdn.example.com/a.png", token=token)
    state = team_controller.snapshot()
    assert state["avatarPending"] is False
    assert state["avatarPreview"] == "https://cdn.example.com/a.png"


def test_clear_permissions_needs_permission_fields(tenant_controller):
    assert not tenant_controller.has_permissions
    with pytest.raises(UnknownFieldError):
        tenant_controller.clear_permissions()
