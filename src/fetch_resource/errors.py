from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ErrorResponse:
    """Response details attached to an HTTP status failure."""
    status_text: str
    status: Optional[int] = None
    json_body: Any = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"statusText": self.status_text}
        if self.json_body is not None:
            result["jsonBody"] = self.json_body
        return result


class FetchError(Exception):
    """Base exception for normalized fetch failures."""

    def __init__(self, message: str, response: Optional[ErrorResponse] = None):
        super().__init__(message)
        self.message = message
        self.response = response

    def to_dict(self) -> Dict[str, Any]:
        """Caller-facing error shape."""
        result: Dict[str, Any] = {"message": self.message}
        if self.response is not None:
            result["response"] = self.response.to_dict()
        return result


class TransportError(FetchError):
    """The transport never produced a response (DNS, refused connection, timeout)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    @classmethod
    def from_exception(cls, exc: BaseException) -> "TransportError":
        return cls(str(exc) or type(exc).__name__, cause=exc)


class HTTPStatusError(FetchError):
    """A response was received with a status outside [200, 300)."""

    def __init__(
        self,
        message: str,
        status: int,
        status_text: str,
        json_body: Any = None,
    ):
        super().__init__(
            message,
            ErrorResponse(status_text=status_text, status=status, json_body=json_body),
        )
        self.status = status
        self.status_text = status_text
        self.json_body = json_body
