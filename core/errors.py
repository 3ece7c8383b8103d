# core/errors.py

from dataclasses import dataclass
from typing import List


# ============================================================
# Field-level validation result (reported, never raised)
# ============================================================
@dataclass(frozen=True)
class FieldValidationError:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


# ============================================================
# Wizard exceptions
# ============================================================
class WizardError(Exception):
    """Base class for every error raised by the onboarding wizard core."""


class FormValidationError(WizardError):
    """Submission attempted while the merged form schema does not hold."""

    def __init__(self, errors: List[FieldValidationError]):
        self.errors = list(errors)
        fields = ", ".join(sorted({e.field for e in self.errors}))
        super().__init__(f"Form is incomplete: {fields}")


class SubmissionError(WizardError):
    """The persistence collaborator rejected or failed the submission."""

    def __init__(self, detail: str, status_code: int = 502):
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class SubmissionInProgressError(WizardError):
    """A submission for this wizard is already in flight."""


class UnknownFieldError(WizardError):
    """The field name is not declared by any step of the wizard."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown field '{name}'")


class AvatarRejectedError(WizardError):
    """The selected avatar file fails size or type limits."""


class AvatarUploadError(WizardError):
    """The storage collaborator failed to store the avatar."""


# ============================================================
# Supabase error helpers
# ============================================================
def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: PostgREST / GoTrue errors expose .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: errors with args (common)
    if error.args:
        return str(error.args[0])

    # Case 3: plain string fallback
    return str(error) or "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation") -> SubmissionError:
    """
    Convert Supabase errors into a SubmissionError with consistent formatting.
    Returns the error (doesn't raise) so caller can re-raise with context.

    Args:
        error: The exception that occurred
        operation: Description of what failed (e.g., "Failed to create team member")

    Returns:
        SubmissionError with a user-facing message
    """
    from core.logging_config import logger

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return SubmissionError(f"{operation}: Record already exists", status_code=400)
    elif "foreign key" in error_lower:
        return SubmissionError(f"{operation}: Invalid reference", status_code=400)
    else:
        return SubmissionError(f"{operation} failed")
