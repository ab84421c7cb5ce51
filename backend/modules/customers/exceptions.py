"""
Customer module exceptions.

These exceptions are raised by the customers module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import ConflictError, NotFoundError, ValidationError

from .models import MAX_EMAILS


class CustomerNotFoundError(NotFoundError):
    """Raised when no customer matches an ID or email."""

    def __init__(self, identifier: str = ""):
        super().__init__(
            "Customer not found",
            code="CUSTOMER_NOT_FOUND",
            details={"identifier": identifier} if identifier else {},
        )


class InvalidInputError(ValidationError):
    """Raised when a request field fails validation."""

    def __init__(self, field: str, message: str, code: str = "INVALID_INPUT"):
        super().__init__(message, code=code, details={"field": field})
        self.field = field


class TermsNotAcceptedError(ValidationError):
    def __init__(self):
        super().__init__("Terms and conditions must be accepted", code="TERMS_NOT_ACCEPTED")


class EmailTakenError(ConflictError):
    """Raised when an email address already belongs to a customer."""

    def __init__(self, by_caller: bool = False):
        if by_caller:
            super().__init__("Email address is already registered to you", code="EMAIL_TAKEN_BY_YOU")
        else:
            super().__init__("Email address is already taken", code="EMAIL_TAKEN")


class MaxEmailsReachedError(ValidationError):
    def __init__(self):
        super().__init__(
            f"A customer can have at most {MAX_EMAILS} email addresses",
            code="MAX_EMAILS_REACHED",
            details={"max": MAX_EMAILS},
        )


class IncorrectPasswordError(ValidationError):
    def __init__(self):
        super().__init__("Current password is incorrect", code="INCORRECT_PASSWORD")


class InvalidVerificationTokenError(ValidationError):
    """Raised when an email verification token is unknown or expired."""

    def __init__(self):
        super().__init__("Verification link is invalid or has expired", code="INVALID_VERIFICATION_TOKEN")
