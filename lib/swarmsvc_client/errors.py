from __future__ import annotations

from dataclasses import dataclass


class SwarmClientError(Exception):
    """Base client error."""


class NetworkError(SwarmClientError):
    """Transport/network layer error."""


class ApiError(SwarmClientError):
    def __init__(self, status_code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AuthError(ApiError):
    """Auth-related API error."""


class CommandError(SwarmClientError):
    """A docker CLI invocation returned non-success."""

    def __init__(self, operation: str, returncode: int, output: str = ""):
        self.operation = operation
        self.returncode = returncode
        self.output = output
        detail = output.strip() or f"exit status {returncode}"
        super().__init__(f"error {operation}: {detail}")


class LifecycleError(SwarmClientError):
    def __init__(self, service: str, operation: str, reason: str):
        super().__init__(f"error {operation} service {service}: {reason}")
        self.service = service
        self.operation = operation


@dataclass
class BackupFormatError(ValueError):
    line_no: int
    line: str
    message: str

    def __str__(self) -> str:
        return f"backup line {self.line_no}: {self.message} ({self.line!r})"
