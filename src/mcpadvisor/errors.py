from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"
    UNKNOWN_SECTION = "UNKNOWN_SECTION"
    UNKNOWN_LOCATOR = "UNKNOWN_LOCATOR"
    SCHEMA_FETCH_FAILED = "SCHEMA_FETCH_FAILED"
    INDEX_FETCH_FAILED = "INDEX_FETCH_FAILED"
    INVALID_INPUT = "INVALID_INPUT"


# Codes caused by the caller's arguments rather than by a remote source.
CALLER_ERROR_CODES: frozenset[ErrorCode] = frozenset(
    {
        ErrorCode.UNSUPPORTED_VERSION,
        ErrorCode.UNKNOWN_SECTION,
        ErrorCode.UNKNOWN_LOCATOR,
        ErrorCode.INVALID_INPUT,
    }
)


class AdvisorError(Exception):
    """Raised by handlers and the composer for all expected failure conditions.

    Caught by server.py and converted into an MCP error (resources, prompts)
    or a structured tool error result (tools). Never catch this inside
    business logic; let it propagate to the MCP layer.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
        *,
        supported_versions: tuple[str, ...] = (),
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable
        self.supported_versions = supported_versions

    @property
    def is_caller_error(self) -> bool:
        return self.code in CALLER_ERROR_CODES

    def to_dict(self) -> dict:
        error: dict = {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "recoverable": self.recoverable,
        }
        if self.supported_versions:
            error["supported_versions"] = list(self.supported_versions)
        return {"error": error}
