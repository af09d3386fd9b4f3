"""Custom exception hierarchy for the MathML rendering pipeline."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of recoverable render failures."""

    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    INVALID_JSON = "invalid_json"
    INVALID_MATHML = "invalid_mathml"


class MathRenderingError(RuntimeError):
    """Base exception for TeX to MathML rendering failures."""

    kind: ErrorKind | None = None


class ConfigurationError(MathRenderingError):
    """Raised when the render configuration cannot be used."""


class ConversionError(MathRenderingError):
    """Raised when the LaTeXML daemon cannot deliver a response."""

    def __init__(self, message: str, *, host: str) -> None:
        super().__init__(message)
        self.host = host


class ConversionTimeoutError(ConversionError):
    """Raised when the daemon does not answer within the configured timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, host: str) -> None:
        super().__init__(failure_message(self.kind, host=host), host=host)


class ConversionTransportError(ConversionError):
    """Raised on any other network or protocol failure."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, host: str, detail: str) -> None:
        super().__init__(failure_message(self.kind, host=host, detail=detail), host=host)
        self.detail = detail


class InvalidResponseError(MathRenderingError):
    """Raised when the daemon response is not the expected JSON envelope."""

    kind = ErrorKind.INVALID_JSON

    def __init__(self, raw: str, reason: str = "invalid JSON") -> None:
        super().__init__(f"LaTeXML response could not be decoded ({reason}).")
        self.raw = raw
        self.reason = reason


FAILURE_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.TIMEOUT: "Failed to parse (LaTeXML server timeout from '{host}')",
    ErrorKind.TRANSPORT: (
        "Failed to parse (LaTeXML server '{host}' returned an invalid response: {detail})"
    ),
    ErrorKind.INVALID_JSON: "Failed to parse (LaTeXML server '{host}' returned invalid JSON)",
    ErrorKind.INVALID_MATHML: "Failed to parse (LaTeXML server '{host}' returned invalid MathML)",
}


def failure_message(kind: ErrorKind, *, host: str, detail: str = "") -> str:
    """Return the user-facing message for a failure kind."""
    return FAILURE_MESSAGES[kind].format(host=host, detail=detail)


__all__ = [
    "FAILURE_MESSAGES",
    "ConfigurationError",
    "ConversionError",
    "ConversionTimeoutError",
    "ConversionTransportError",
    "ErrorKind",
    "InvalidResponseError",
    "MathRenderingError",
    "failure_message",
]
