from fastapi import status

from .api_exception import APIException


class ContactValidationError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Validation failed"
    description = "The submitted contact form is invalid."


class MissingFieldError(ContactValidationError):
    detail = "All fields (name, email, message) are required"
    description = "At least one of name, email or message is missing or empty."

    def __init__(self, missing: list[str]) -> None:
        super().__init__(missing={field: field in missing for field in ("name", "email", "message")})
        self.missing = missing


class WrongTypeError(ContactValidationError):
    detail = "All fields must be strings"
    description = "The form data is not an object of string fields."


class InvalidEmailFormatError(ContactValidationError):
    detail = "Please provide a valid email address"
    description = "The email address does not look like local@domain.tld."


class LengthOutOfRangeError(ContactValidationError):
    detail = "Field length out of range"
    description = "Name must be 2-100, email at most 255 and message 10-4000 characters long."

    def __init__(self, field: str, detail: str) -> None:
        self.detail = detail
        super().__init__(field=field)
        self.field = field


class SuspiciousContentError(ContactValidationError):
    detail = "Invalid characters detected in form data"
    description = "The form data contains script or handler injection patterns."


class RateLimitExceededError(APIException):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    detail = "Too many requests from this IP, please try again later."
    description = "The client address has sent too many requests."


class ContactRateLimitExceededError(RateLimitExceededError):
    detail = "Too many contact form submissions from this IP, please try again after 15 minutes."
    description = "The client address has submitted too many contact messages."


class DatabaseUnavailableError(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Database connection issue. Please try again later."
    description = "The message store could not be reached."


class DatabaseQueryError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database query failed. Please try again later."
    description = "The message store rejected the query."


class SaveMessageError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Failed to save contact message. Please try again later."
    description = "The message could not be saved."


class RetrieveMessagesError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Failed to retrieve messages"
    description = "The messages could not be loaded."


class RetrieveStatsError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Failed to retrieve statistics"
    description = "The statistics could not be computed."
