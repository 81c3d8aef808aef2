"""Domain error taxonomy.

Every failure a user action can hit is an ``AcademyError``. The global
handler in ``academy.middleware.error_handler`` renders them as
``{"detail": ..., "error": ...}`` with the class's status code. None of
them are fatal: the user can always retry the action.
"""

from __future__ import annotations

from typing import Any


class AcademyError(Exception):
    """Base class for errors surfaced to the user."""

    status_code: int = 400
    code: str = "academy_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "error": self.code}


class NotAuthenticatedError(AcademyError):
    status_code = 401
    code = "not_authenticated"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class AuthenticationError(AcademyError):
    """Bad credentials or a rejected sign-up."""

    status_code = 401
    code = "authentication_failed"


class MissingFieldsError(AcademyError):
    status_code = 400
    code = "missing_fields"


class MissingFeedbackError(AcademyError):
    status_code = 400
    code = "missing_feedback"

    def __init__(self, message: str = "Please provide feedback") -> None:
        super().__init__(message)


class PermissionDeniedError(AcademyError):
    status_code = 403
    code = "permission_denied"


class NotFoundError(AcademyError):
    status_code = 404
    code = "not_found"


class InvalidTransitionError(AcademyError):
    status_code = 409
    code = "invalid_transition"


class PaymentRequiredError(AcademyError):
    """Enrollment in a paid challenge must go through checkout first."""

    status_code = 402
    code = "payment_required"

    def __init__(self, challenge: dict[str, Any]) -> None:
        super().__init__(f'"{challenge.get("title")}" requires payment before enrollment')
        self.challenge = challenge

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["challenge_id"] = str(self.challenge.get("id"))
        data["price"] = self.challenge.get("price", 0)
        return data


class PaymentDeclinedError(AcademyError):
    """The payment network declined the charge; the message is the network's."""

    status_code = 402
    code = "payment_declined"


class ExternalServiceError(AcademyError):
    """A collaborator (store, identity, payments) was unreachable or rejected the call."""

    status_code = 502
    code = "external_service_failure"


class SignUpError(AuthenticationError):
    """Registration rejected (duplicate email, weak password)."""

    status_code = 400
    code = "signup_failed"


class PaymentNotRequiredError(AcademyError):
    """Checkout was attempted for a free challenge."""

    status_code = 409
    code = "payment_not_required"

    def __init__(self, challenge: dict[str, Any]) -> None:
        super().__init__(f'"{challenge.get("title")}" is free; enroll directly')
        self.challenge = challenge


class DocumentExistsError(AcademyError):
    """A create collided with an existing document id."""

    status_code = 409
    code = "document_exists"
