from typing import Optional, Tuple


class ServiceError(Exception):
    """
    Failure signal raised by the crud layer.

    `code` is a short string such as NOT_FOUND or FORBIDDEN; the route layer maps
    it to an HTTP status and a public message through ERROR_RESPONSES.
    """

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(code)
        self.code = code
        self.message = message

    def __repr__(self):
        return f"ServiceError(code={self.code!r}, message={self.message!r})"


# code -> (http status, public code, default message)
ERROR_RESPONSES = {
    "UNAUTHENTICATED": (401, "UNAUTHENTICATED", "No active session."),
    "SESSION_INVALID": (401, "SESSION_INVALID", "Failed to verify session."),
    "INVALID_CREDENTIALS": (401, "INVALID_CREDENTIALS", "Invalid email or password."),
    "FORBIDDEN": (403, "FORBIDDEN", "You do not have permission to perform this action."),
    "ACCOUNT_DISABLED": (403, "ACCOUNT_DISABLED", "Account has been disabled."),
    "NOT_FOUND": (404, "NOT_FOUND", "Resource not found."),
    "BREED_NOT_FOUND": (404, "BREED_NOT_FOUND", "Breed not found."),
    "REVIEW_NOT_FOUND": (404, "REVIEW_NOT_FOUND", "Review not found."),
    "INVALID_REQUEST": (400, "INVALID_REQUEST", "Invalid request."),
    "INVALID_RESTOCK_AMOUNT": (400, "INVALID_REQUEST", "Restock amount must be a positive number."),
    "INVALID_CONSUME_AMOUNT": (400, "INVALID_REQUEST", "Amount must be a positive number."),
    "REASON_REQUIRED": (400, "INVALID_REQUEST", "Reason is required."),
    "INVALID_RATING": (400, "INVALID_RATING", "Rating must be between 1 and 5"),
    "INVALID_STATUS": (400, "INVALID_STATUS", "Status must be one of: published, pending, hidden"),
    "TIMEOUT": (408, "TIMEOUT", "Authentication request timed out. Please try again."),
    "BREED_EXISTS": (409, "BREED_EXISTS", "A breed with this name already exists."),
    "BREED_IN_USE": (409, "BREED_IN_USE", "Cannot delete breed that is assigned to roosters."),
    "ROOSTER_EXISTS": (409, "ROOSTER_EXISTS", "A rooster with this ID already exists."),
    "TRANSACTION_CONFLICT": (409, "TRANSACTION_CONFLICT", "The record was modified concurrently. Please retry."),
    "SERVER_MISCONFIGURED": (500, "SERVER_MISCONFIGURED", "The server is not configured correctly."),
    "IMAGE_UPLOAD_FAILED": (502, "IMAGE_UPLOAD_FAILED", "Failed to upload image."),
}

INTERNAL_ERROR = (500, "INTERNAL_ERROR", "An unexpected error occurred.")


def resolve_error(error: ServiceError) -> Tuple[int, str, str]:
    """Return (status, public code, message); unknown codes collapse to a generic 500."""
    if error.code not in ERROR_RESPONSES:
        return INTERNAL_ERROR
    status_code, public_code, default_message = ERROR_RESPONSES[error.code]
    return status_code, public_code, error.message or default_message
