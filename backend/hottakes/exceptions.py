"""
HotTakes API: Error Taxonomy
=============================

What:  The closed set of error kinds the API can report, and the exception
       type that carries one of them through the request pipeline.
How:   Every application error is a HotTakesError holding an ErrorKind.
       The kind fixes the HTTP status and the machine-readable tag; the
       exception carries the message and any kind-specific fields.
       main.register_exception_handlers() renders them all through a
       single handler.
Who:   Raised by services, dependencies and repositories.
When:  Whenever a pipeline stage cannot produce its result.

Error Kinds:
    AUTHENTICATION_MISSING   → 401
    AUTHENTICATION_INVALID   → 401
    TOKEN_EXPIRED            → 401 (carries expiredAt)
    TOKEN_NOT_ACTIVE         → 401 (carries date)
    MALFORMED_SUBJECT        → 401
    FORBIDDEN                → 403
    VALIDATION_FAILED        → 400 (carries fields)
    RESOURCE_NOT_FOUND       → 404
    MALFORMED_IDENTIFIER     → 400
    UNSUPPORTED_MEDIA_TYPE   → 415
    FILE_MISSING             → 400
    INVALID_FILE_TYPE        → 400
    FILE_TOO_LARGE           → 400
    PERSISTENCE_FAILURE      → 500

Response envelope:
    {
        "error": {
            "type": "validation_failed",
            "name": "ValidationFailedError",
            "message": "User inputs have invalid values.",
            "fields": [{"location": "body", "param": "heat", "message": "..."}]
        }
    }
    The status never appears in the body. `context` is logged, never rendered.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(Enum):
    """Closed set of error kinds. Each value is (tag, HTTP status)."""

    AUTHENTICATION_MISSING = ("authentication_missing", 401)
    AUTHENTICATION_INVALID = ("authentication_invalid", 401)
    TOKEN_EXPIRED = ("token_expired", 401)
    TOKEN_NOT_ACTIVE = ("token_not_active", 401)
    MALFORMED_SUBJECT = ("malformed_subject", 401)
    FORBIDDEN = ("forbidden", 403)
    VALIDATION_FAILED = ("validation_failed", 400)
    RESOURCE_NOT_FOUND = ("resource_not_found", 404)
    MALFORMED_IDENTIFIER = ("malformed_identifier", 400)
    UNSUPPORTED_MEDIA_TYPE = ("unsupported_media_type", 415)
    FILE_MISSING = ("file_missing", 400)
    INVALID_FILE_TYPE = ("invalid_file_type", 400)
    FILE_TOO_LARGE = ("file_too_large", 400)
    PERSISTENCE_FAILURE = ("persistence_failure", 500)

    @property
    def tag(self) -> str:
        return self.value[0]

    @property
    def status(self) -> int:
        return self.value[1]


class HotTakesError(Exception):
    """
    Base exception for every classified application error.

    Attributes:
        kind:     The ErrorKind (fixes status and tag)
        message:  User-facing description, safe to return in a response
        details:  Kind-specific fields rendered into the error body
        context:  Debug information, logged but never returned to the client
    """

    default_kind: ErrorKind = ErrorKind.PERSISTENCE_FAILURE
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
        details: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.kind = kind or self.default_kind
        self.message = message or self.default_message
        self.details = details or {}
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.kind.status

    def to_dict(self) -> Dict[str, Any]:
        """Error body contents (the value of the "error" key)."""
        body: Dict[str, Any] = {
            "type": self.kind.tag,
            "name": type(self).__name__,
            "message": self.message,
        }
        body.update(self.details)
        return body


# ══════════════════════════════════════════════════════════════════════════
# Authentication (401) and authorization (403)
# ══════════════════════════════════════════════════════════════════════════


class AuthenticationError(HotTakesError):
    """
    Raised when the caller cannot be identified.

    Sub-kinds: AUTHENTICATION_MISSING, AUTHENTICATION_INVALID,
    TOKEN_EXPIRED, TOKEN_NOT_ACTIVE, MALFORMED_SUBJECT. All render as 401.
    """

    default_kind = ErrorKind.AUTHENTICATION_INVALID
    default_message = "Invalid request, you must be authenticated"

    @classmethod
    def missing(cls) -> "AuthenticationError":
        return cls(
            "Unauthorized: you must be authenticated to continue",
            kind=ErrorKind.AUTHENTICATION_MISSING,
        )

    @classmethod
    def expired(cls, expired_at: Optional[str]) -> "AuthenticationError":
        return cls(
            "The authentication token has expired",
            kind=ErrorKind.TOKEN_EXPIRED,
            details={"expiredAt": expired_at},
        )

    @classmethod
    def not_active(cls, date: Optional[str]) -> "AuthenticationError":
        return cls(
            "The authentication token is not active yet",
            kind=ErrorKind.TOKEN_NOT_ACTIVE,
            details={"date": date},
        )

    @classmethod
    def malformed_subject(cls) -> "AuthenticationError":
        return cls(
            "The token is valid but doesn't contain the required information",
            kind=ErrorKind.MALFORMED_SUBJECT,
        )


class ForbiddenError(HotTakesError):
    """Raised when the authenticated user does not own the target resource."""

    default_kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden: you don't have the right to access this resource"


# ══════════════════════════════════════════════════════════════════════════
# Client input (400, 404, 415)
# ══════════════════════════════════════════════════════════════════════════


class ValidationFailedError(HotTakesError):
    """
    Raised when client input fails validation.

    Carries every violation at once so a client can fix all fields in a
    single round-trip. Each entry is {"location", "param", "message"}.
    """

    default_kind = ErrorKind.VALIDATION_FAILED
    default_message = "User inputs have invalid values."

    def __init__(
        self,
        fields: List[Dict[str, str]],
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details={"fields": fields}, context=context)
        self.fields = fields


class NotFoundError(HotTakesError):
    """Raised when a requested resource does not exist."""

    default_kind = ErrorKind.RESOURCE_NOT_FOUND
    default_message = "The resource you're requesting doesn't exist"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class MalformedIdentifierError(HotTakesError):
    """Raised by the persistence layer when an id cannot be cast to a record key."""

    default_kind = ErrorKind.MALFORMED_IDENTIFIER
    default_message = "The identifier is not a valid record identifier"


class UnsupportedMediaTypeError(HotTakesError):
    default_kind = ErrorKind.UNSUPPORTED_MEDIA_TYPE
    default_message = "The request Content-Type is not accepted"


class FileUploadError(HotTakesError):
    """
    Raised when the uploaded image is absent or rejected.

    Kinds: FILE_MISSING, INVALID_FILE_TYPE, FILE_TOO_LARGE (all 400).
    `details` carries the offending field name.
    """

    default_kind = ErrorKind.FILE_MISSING
    default_message = "The request must contain an image file"

    def __init__(
        self,
        message: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
        field: str = "image",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, kind=kind, details={"field": field}, context=context)
        self.field = field


# ══════════════════════════════════════════════════════════════════════════
# Server side (500)
# ══════════════════════════════════════════════════════════════════════════


class PersistenceError(HotTakesError):
    """
    Raised when a storage operation fails for a reason the client cannot fix.

    The message returned to the client is always generic; `context`
    carries the driver error for the server log.
    """

    default_kind = ErrorKind.PERSISTENCE_FAILURE
    default_message = "A storage error occurred. Please try again later."


class FileStorageError(PersistenceError):
    """Raised when writing an uploaded image to disk fails."""

    default_message = "Failed to save the uploaded image. Please try again."


# Every kind must map to a client or server error status.
_UNMAPPED = [kind for kind in ErrorKind if not 400 <= kind.status < 600]
if _UNMAPPED:
    raise RuntimeError(f"Error kinds without an error status: {_UNMAPPED}")
