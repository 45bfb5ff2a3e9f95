"""Error classification for user-facing messages.

Maps arbitrary exceptions onto a small set of categories so that handlers can
answer with a stable error code, an HTTP status and a message the end user
can act on. Classification is driven by the exception type first and falls
back to substring matching on the exception message.
"""

import enum
from dataclasses import dataclass, field
from typing import Any

from fastapi import status


class ErrorType(str, enum.Enum):
    VALIDATION = "VALIDATION"
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMIT = "RATE_LIMIT"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    DATABASE = "DATABASE"
    NETWORK = "NETWORK"
    UNKNOWN = "UNKNOWN"


RECOVERABLE_TYPES = frozenset({ErrorType.VALIDATION, ErrorType.NOT_FOUND, ErrorType.AUTHENTICATION})
RETRYABLE_TYPES = frozenset({ErrorType.NETWORK, ErrorType.EXTERNAL_SERVICE, ErrorType.RATE_LIMIT})

USER_MESSAGES: dict[ErrorType, str] = {
    ErrorType.VALIDATION: "입력 정보를 확인해주세요.",
    ErrorType.AUTHENTICATION: "로그인이 필요합니다.",
    ErrorType.AUTHORIZATION: "접근 권한이 없습니다.",
    ErrorType.NOT_FOUND: "요청하신 정보를 찾을 수 없습니다.",
    ErrorType.CONFLICT: "이미 존재하는 정보입니다.",
    ErrorType.RATE_LIMIT: "너무 많은 요청입니다. 잠시 후 다시 시도해주세요.",
    ErrorType.EXTERNAL_SERVICE: "외부 서비스 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
    ErrorType.DATABASE: "일시적인 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
    ErrorType.NETWORK: "네트워크 오류가 발생했습니다. 인터넷 연결을 확인해주세요.",
    ErrorType.UNKNOWN: "예상치 못한 오류가 발생했습니다.",
}

STATUS_CODES: dict[ErrorType, int] = {
    ErrorType.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorType.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorType.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorType.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorType.EXTERNAL_SERVICE: status.HTTP_502_BAD_GATEWAY,
    ErrorType.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorType.NETWORK: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorType.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Checked in order; the first matching needle wins.
MESSAGE_RULES: tuple[tuple[tuple[str, ...], ErrorType, str], ...] = (
    (("unique constraint", "duplicate key"), ErrorType.CONFLICT, "이미 존재하는 정보입니다."),
    (("not null constraint", "null value in column"), ErrorType.VALIDATION, "필수 정보가 누락되었습니다."),
    (("foreign key constraint",), ErrorType.VALIDATION, "유효하지 않은 참조 정보입니다."),
    (("timeout", "timed out", "etimedout"), ErrorType.NETWORK, USER_MESSAGES[ErrorType.NETWORK]),
)


@dataclass(frozen=True)
class ClassifiedError:
    type: ErrorType
    message: str
    user_message: str
    status_code: int
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def recoverable(self) -> bool:
        return self.type in RECOVERABLE_TYPES

    @property
    def retryable(self) -> bool:
        return self.type in RETRYABLE_TYPES

    def to_payload(self) -> dict[str, Any]:
        return {
            "code": self.type.value,
            "message": self.user_message,
            "details": {"recoverable": self.recoverable, "retryable": self.retryable},
        }


def classify_message(message: str) -> tuple[ErrorType, str]:
    lowered = message.lower()
    for needles, error_type, user_message in MESSAGE_RULES:
        if any(needle in lowered for needle in needles):
            return error_type, user_message
    return ErrorType.UNKNOWN, USER_MESSAGES[ErrorType.UNKNOWN]


def classify_error(exc: BaseException, context: dict[str, Any] | None = None) -> ClassifiedError:
    """Classify an exception into an ErrorType with a localized message."""
    if isinstance(exc, TimeoutError | ConnectionError):
        error_type, user_message = ErrorType.NETWORK, USER_MESSAGES[ErrorType.NETWORK]
    else:
        error_type, user_message = classify_message(str(exc))

    return ClassifiedError(
        type=error_type,
        message=str(exc) or exc.__class__.__name__,
        user_message=user_message,
        status_code=STATUS_CODES[error_type],
        context=context or {},
    )
