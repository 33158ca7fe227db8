"""Domain error taxonomy shared by services and routers."""

from __future__ import annotations

from fastapi import HTTPException


class TrackerError(ValueError):
    error_code = "E_TRACKER"
    http_status = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NotFound(TrackerError):
    """Unknown student, handle or record."""
    error_code = "E_NOT_FOUND"
    http_status = 404


class UpstreamUnavailable(TrackerError):
    """External stats source failed or timed out; retried at the next sync only."""
    error_code = "E_UPSTREAM_UNAVAILABLE"
    http_status = 502


class MalformedInput(TrackerError):
    error_code = "E_MALFORMED_INPUT"
    http_status = 400


class Inconsistent(TrackerError):
    """Stored state violates a uniqueness expectation (duplicate bucket etc.)."""
    error_code = "E_INCONSISTENT"
    http_status = 409


def http_error(exc: TrackerError) -> HTTPException:
    return HTTPException(status_code=exc.http_status, detail={"error_code": exc.error_code, "message": exc.message})


__all__ = ["TrackerError", "NotFound", "UpstreamUnavailable", "MalformedInput", "Inconsistent", "http_error"]
