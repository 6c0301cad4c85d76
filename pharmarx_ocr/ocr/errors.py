"""Recognition error taxonomy.

Every failure coming out of a recognition client is reduced to one
`ErrorKind` at the adapter boundary; the retry controller only ever looks
at the kind.
"""
from __future__ import annotations

from enum import Enum

from google.api_core import exceptions as gexc

from pharmarx_ocr.core.exceptions import OCRServiceError


class ErrorKind(str, Enum):
    UNAVAILABLE = "unavailable"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    QUOTA_EXCEEDED = "quota_exceeded"
    PERMISSION_DENIED = "permission_denied"
    INVALID_ARGUMENT = "invalid_argument"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


# UNKNOWN carries no code to reason about, so it gets the benefit of a retry.
TRANSIENT_KINDS = frozenset({ErrorKind.UNAVAILABLE, ErrorKind.DEADLINE_EXCEEDED, ErrorKind.UNKNOWN})

# gRPC status codes as used by Google Cloud APIs
_GRPC_CODE_KINDS: dict[int, ErrorKind] = {
    3: ErrorKind.INVALID_ARGUMENT,
    4: ErrorKind.DEADLINE_EXCEEDED,
    7: ErrorKind.PERMISSION_DENIED,
    8: ErrorKind.QUOTA_EXCEEDED,
    13: ErrorKind.INTERNAL,
    14: ErrorKind.UNAVAILABLE,
}

_GRPC_NAME_KINDS: dict[str, ErrorKind] = {
    "INVALID_ARGUMENT": ErrorKind.INVALID_ARGUMENT,
    "DEADLINE_EXCEEDED": ErrorKind.DEADLINE_EXCEEDED,
    "PERMISSION_DENIED": ErrorKind.PERMISSION_DENIED,
    "RESOURCE_EXHAUSTED": ErrorKind.QUOTA_EXCEEDED,
    "INTERNAL": ErrorKind.INTERNAL,
    "UNAVAILABLE": ErrorKind.UNAVAILABLE,
}

# Order matters: subclasses before their HTTP-status base classes.
_EXCEPTION_KINDS: tuple[tuple[type[Exception], ErrorKind], ...] = (
    (gexc.ServiceUnavailable, ErrorKind.UNAVAILABLE),
    (gexc.DeadlineExceeded, ErrorKind.DEADLINE_EXCEEDED),
    (gexc.GatewayTimeout, ErrorKind.DEADLINE_EXCEEDED),
    (gexc.ResourceExhausted, ErrorKind.QUOTA_EXCEEDED),
    (gexc.TooManyRequests, ErrorKind.QUOTA_EXCEEDED),
    (gexc.PermissionDenied, ErrorKind.PERMISSION_DENIED),
    (gexc.Forbidden, ErrorKind.PERMISSION_DENIED),
    (gexc.InvalidArgument, ErrorKind.INVALID_ARGUMENT),
    (gexc.BadRequest, ErrorKind.INVALID_ARGUMENT),
    (gexc.InternalServerError, ErrorKind.INTERNAL),
)


class RecognitionError(OCRServiceError):
    """A recognition call failed; `message` is the upstream text, unmodified."""

    def __init__(self, kind: ErrorKind, message: str, details: dict | None = None) -> None:
        super().__init__(message, details)
        self.kind = kind

    @classmethod
    def from_exception(cls, exc: BaseException) -> RecognitionError:
        if isinstance(exc, RecognitionError):
            return exc
        return cls(classify_error(exc), error_message(exc))


def kind_from_code(code: object) -> ErrorKind:
    if isinstance(code, bool):
        return ErrorKind.UNKNOWN
    if isinstance(code, int):
        return _GRPC_CODE_KINDS.get(code, ErrorKind.UNKNOWN)
    if isinstance(code, str):
        name = code.upper().rsplit(".", 1)[-1]
        return _GRPC_NAME_KINDS.get(name, ErrorKind.UNKNOWN)
    # grpc.StatusCode members expose their name
    name = getattr(code, "name", None)
    if isinstance(name, str):
        return _GRPC_NAME_KINDS.get(name.upper(), ErrorKind.UNKNOWN)
    return ErrorKind.UNKNOWN


def classify_error(exc: BaseException) -> ErrorKind:
    if isinstance(exc, RecognitionError):
        return exc.kind

    for exc_type, kind in _EXCEPTION_KINDS:
        if isinstance(exc, exc_type):
            return kind

    if isinstance(exc, gexc.GoogleAPICallError):
        # `code` on api_core errors is the HTTP status; prefer the gRPC one.
        return kind_from_code(exc.grpc_status_code)

    return kind_from_code(getattr(exc, "code", None))


def error_message(exc: BaseException) -> str:
    if isinstance(exc, gexc.GoogleAPICallError):
        return exc.message
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or "Unknown OCR processing error"


def is_transient(kind: ErrorKind) -> bool:
    return kind in TRANSIENT_KINDS
