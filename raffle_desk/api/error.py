from datetime import UTC, datetime
from typing import Any, Dict, Optional

from fastapi import status

from raffle_desk.libs.result import Error

STATUS_BY_CODE: Dict[str, int] = {
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "INVALID_JSON": status.HTTP_400_BAD_REQUEST,
    "INVALID_ACTION": status.HTTP_400_BAD_REQUEST,
    "INVALID_OTP": status.HTTP_400_BAD_REQUEST,
    "AUTH_REQUIRED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "ACCOUNT_PENDING": status.HTTP_403_FORBIDDEN,
    "ACCOUNT_EXPIRED": status.HTTP_403_FORBIDDEN,
    "ACCOUNT_DISABLED": status.HTTP_403_FORBIDDEN,
    "INSUFFICIENT_ROLE": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "EMAIL_EXISTS": status.HTTP_409_CONFLICT,
    "VERSION_CONFLICT": status.HTTP_409_CONFLICT,
    "RATE_LIMIT": status.HTTP_429_TOO_MANY_REQUESTS,
    "SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        self.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        super().__init__(base_error.message)


def status_for(code: str) -> int:
    return STATUS_BY_CODE.get(code, status.HTTP_400_BAD_REQUEST)


def to_http_error(error: Error) -> Exception:
    """Map a use case error to the exception the handlers render"""
    status_code = status_for(error.code)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return ServerError(error)
    return ClientError(error, status_code=status_code)


def server_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def success_envelope(payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    timestamp = server_timestamp()
    body: Dict[str, Any] = {"success": True, "timestamp": timestamp}
    body.update(payload or {})
    body["meta"] = {"timestamp": timestamp}
    return body


def error_envelope(error: Error, status_code: int) -> Dict[str, Any]:
    timestamp = server_timestamp()
    body: Dict[str, Any] = {
        "success": False,
        "error": error.message,
        "code": error.code,
        "status": status_code,
    }
    if error.details:
        body["details"] = dict(error.details)
    if error.code == "RATE_LIMIT" and "retryAfter" in error.details:
        body["retryAfter"] = error.details["retryAfter"]
    body["timestamp"] = timestamp
    body["meta"] = {"timestamp": timestamp}
    return body
