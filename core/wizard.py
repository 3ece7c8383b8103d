# core/wizard.py

"""
Multi-step onboarding wizard controller.

Owns the form state (every field of every step, initialised to the declared
defaults), the current step and the dirty flag. All mutation goes through
update_field / clear_permissions / reset; validity is recomputed on demand
from the step registry, so there is no hidden update ordering.
"""

import copy
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from core.errors import (
    AvatarUploadError,
    FieldValidationError,
    FormValidationError,
    SubmissionError,
    SubmissionInProgressError,
    UnknownFieldError,
)
from core.logging_config import logger
from core.permission_engine import PermissionDerivationEngine
from core.steps import StepRegistry
from models.enums import StepStatus


AVATAR_FIELD = "avatar"

SubmitHandler = Callable[[Dict[str, Any]], Any]
OptionsProvider = Callable[[int], Iterable[Any]]


class WizardController:
    def __init__(
        self,
        registry: StepRegistry,
        submit_handler: SubmitHandler,
        derivation: Optional[PermissionDerivationEngine] = None,
        options_provider: Optional[OptionsProvider] = None,
        name: str = "wizard",
    ):
        self.registry = registry
        self.name = name
        self._submit_handler = submit_handler
        self._derivation = derivation
        self._options_provider = options_provider
        self._options: Dict[int, Tuple[Any, ...]] = {}

        self._values: Dict[str, Any] = registry.defaults()
        self._current_step = 1
        self._is_dirty = False
        self._is_submitting = False
        self._is_submitted = False
        self._avatar_preview: Optional[str] = None
        self._avatar_pending = False
        self._avatar_token = 0
        self.last_entity: Any = None

        # Guards submission and avatar completion, which arrive from worker threads
        self._lock = RLock()

    # -----------------------------------------------------
    # Read accessors
    # -----------------------------------------------------
    @property
    def current_step_id(self) -> int:
        return self._current_step

    @property
    def step_count(self) -> int:
        return self.registry.count

    @property
    def is_first_step(self) -> bool:
        return self._current_step == 1

    @property
    def is_last_step(self) -> bool:
        return self._current_step == self.registry.count

    @property
    def is_dirty(self) -> bool:
        return self._is_dirty

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    @property
    def is_submitted(self) -> bool:
        return self._is_submitted

    @property
    def avatar_preview(self) -> Optional[str]:
        return self._avatar_preview

    @property
    def avatar_pending(self) -> bool:
        return self._avatar_pending

    @property
    def has_permissions(self) -> bool:
        return self._derivation is not None

    def values(self) -> Dict[str, Any]:
        """Deep copy of the form state; callers never get the live mapping."""
        return copy.deepcopy(self._values)

    def get_field(self, name: str) -> Any:
        if name not in self._values:
            raise UnknownFieldError(name)
        return copy.deepcopy(self._values[name])

    # -----------------------------------------------------
    # Mutation
    # -----------------------------------------------------
    def update_field(self, name: str, value: Any) -> None:
        if name not in self._values:
            raise UnknownFieldError(name)

        with self._lock:
            self._values[name] = copy.deepcopy(value)
            self._is_dirty = True
            self._is_submitted = False

            if self._derivation is not None and self._derivation.watches(name):
                self._derivation.on_field_changed(name, self._values)

    def update_fields(self, updates: Mapping[str, Any]) -> None:
        for name, value in updates.items():
            self.update_field(name, value)

    def clear_permissions(self) -> None:
        """'Clear All': every permission flag off, role and access level kept."""
        if self._derivation is None:
            raise UnknownFieldError("permissions")
        self._derivation.clear_permissions(self._values)
        self._is_dirty = True

    def reset(self) -> None:
        with self._lock:
            self._values = self.registry.defaults()
            self._current_step = 1
            self._is_dirty = False
            self._is_submitted = False
            self._avatar_preview = None
            self._avatar_pending = False
            # Uploads still in flight now belong to a discarded form
            self._avatar_token += 1

    # -----------------------------------------------------
    # Validity (pure)
    # -----------------------------------------------------
    def step_errors(self, step_id: int) -> List[FieldValidationError]:
        return self.registry.validate_step(step_id, self._values)

    def is_step_valid(self, step_id: int) -> bool:
        try:
            return not self.step_errors(step_id)
        except KeyError:
            return False

    def submission_errors(self) -> List[FieldValidationError]:
        return self.registry.validate_form(self._values)

    def is_submission_valid(self) -> bool:
        return not self.submission_errors()

    def is_current_step_valid(self) -> bool:
        # The final step gates on the whole form, not just its own fields
        if self.is_last_step:
            return self.is_submission_valid()
        return self.is_step_valid(self._current_step)

    def validation_message(self) -> str:
        prefix = f"Step {self._current_step} of {self.registry.count}"
        if self.is_current_step_valid():
            return f"{prefix} - All required fields completed"
        return f"{prefix} - Complete required fields to continue"

    def step_statuses(self) -> List[dict]:
        statuses = []
        for step in self.registry.steps:
            if step.id < self._current_step:
                status = StepStatus.completed
            elif step.id == self._current_step:
                status = StepStatus.current
            else:
                status = StepStatus.locked
            statuses.append({
                "id": step.id,
                "title": step.title,
                "status": status.value,
                "navigable": step.id <= self._current_step,
            })
        return statuses

    # -----------------------------------------------------
    # Navigation
    # -----------------------------------------------------
    def go_next(self) -> bool:
        if not self.is_step_valid(self._current_step):
            logger.debug(f"{self.name}: step {self._current_step} invalid, staying put")
            return False
        if self.is_last_step:
            return False
        self._current_step += 1
        return True

    def go_back(self) -> bool:
        previous = self._current_step
        self._current_step = max(1, self._current_step - 1)
        return self._current_step != previous

    def go_to_step(self, target_id: int) -> bool:
        """Jump to a step already reached. Jumping ahead is rejected."""
        if not 1 <= target_id <= self._current_step:
            logger.debug(f"{self.name}: rejected jump from step {self._current_step} to {target_id}")
            return False
        self._current_step = target_id
        return True

    # -----------------------------------------------------
    # Reference data
    # -----------------------------------------------------
    def options_for_step(self, step_id: int) -> Tuple[Any, ...]:
        self.registry.get(step_id)
        if step_id not in self._options:
            fetched = self._options_provider(step_id) if self._options_provider else ()
            self._options[step_id] = tuple(fetched or ())
        return self._options[step_id]

    # -----------------------------------------------------
    # Avatar (optimistic preview, URL substituted on success)
    # -----------------------------------------------------
    def stage_avatar(self, preview: str) -> int:
        """
        Show the local preview right away. Returns the token the matching
        complete_avatar_upload call must present; a later stage or a reset
        makes it stale.
        """
        with self._lock:
            if AVATAR_FIELD not in self._values:
                raise UnknownFieldError(AVATAR_FIELD)
            self._avatar_token += 1
            self._avatar_preview = preview
            self._avatar_pending = True
            self._is_dirty = True
            self._is_submitted = False
            return self._avatar_token

    def complete_avatar_upload(self, upload: Callable[[], str], token: Optional[int] = None) -> Optional[str]:
        """
        Run the upload and substitute its URL into the form. A result for a
        stale token (superseded avatar, submitted or discarded form) is
        dropped and None is returned.
        """
        with self._lock:
            if AVATAR_FIELD not in self._values:
                raise UnknownFieldError(AVATAR_FIELD)
            if token is None:
                token = self._avatar_token

        try:
            url = upload()
        except Exception as exc:
            with self._lock:
                if token != self._avatar_token:
                    logger.debug(f"{self.name}: ignoring failed upload for stale avatar {token}")
                    return None
                self._avatar_preview = self._values.get(AVATAR_FIELD)
                self._avatar_pending = False
            logger.warning(f"{self.name}: avatar upload failed, keeping previous avatar: {exc}")
            raise AvatarUploadError("Avatar upload failed") from exc

        with self._lock:
            if token != self._avatar_token:
                logger.debug(f"{self.name}: discarding upload result for stale avatar {token}")
                return None
            self._values[AVATAR_FIELD] = url
            self._avatar_preview = url
            self._avatar_pending = False
            self._is_dirty = True
        return url

    # -----------------------------------------------------
    # Submission
    # -----------------------------------------------------
    def submit(self) -> Any:
        with self._lock:
            if self._is_submitting:
                raise SubmissionInProgressError(f"{self.name}: submission already in progress")

            errors = self.submission_errors()
            if errors:
                raise FormValidationError(errors)

            self._is_submitting = True
            payload = self.values()

        try:
            entity = self._submit_handler(payload)
        except SubmissionError:
            self._end_submission()
            logger.warning(f"{self.name}: submission rejected, form kept for retry")
            raise
        except Exception as exc:
            self._end_submission()
            logger.error(f"{self.name}: submission failed: {exc}", exc_info=True)
            raise SubmissionError("Submission failed, please try again") from exc

        with self._lock:
            self._is_submitting = False
            self.reset()
            self._is_submitted = True
            self.last_entity = entity

        logger.info(f"{self.name}: submitted successfully")
        return entity

    def _end_submission(self) -> None:
        with self._lock:
            self._is_submitting = False

    # -----------------------------------------------------
    # Snapshot for API responses
    # -----------------------------------------------------
    def snapshot(self) -> dict:
        """
        While an upload is pending the preview is the whole file inlined,
        so only the pending flag is reported.
        """
        with self._lock:
            return {
                "values": self.values(),
                "currentStep": self._current_step,
                "stepCount": self.registry.count,
                "steps": self.step_statuses(),
                "isDirty": self._is_dirty,
                "isSubmitting": self._is_submitting,
                "isSubmitted": self._is_submitted,
                "isStepValid": self.is_step_valid(self._current_step),
                "isSubmissionValid": self.is_submission_valid(),
                "stepErrors": [e.to_dict() for e in self.step_errors(self._current_step)],
                "validationMessage": self.validation_message(),
                "avatarPreview": None if self._avatar_pending else self._avatar_preview,
                "avatarPending": self._avatar_pending,
            }
