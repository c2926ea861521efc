"""
Error Types

Exceptions shared by the upstream clients, the disbursement pipeline
and the dashboard layer.
"""

from typing import Optional


class UpstreamError(RuntimeError):
    """
    Raised when Airtable or HCB answers with a non-2xx status or a body
    that cannot be decoded.

    Attributes:
        status: HTTP status code, or None when no response was received
        body: Raw response body (or the transport error message)
    """

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status is not None:
            return f"{base} (status {self.status}): {self.body}"
        if self.body:
            return f"{base}: {self.body}"
        return base


class InvalidInput(ValueError):
    """Raised for a non-numeric or non-positive custom amount."""


class RunInProgressError(RuntimeError):
    """Raised when a disbursement run is triggered while another is in flight."""
