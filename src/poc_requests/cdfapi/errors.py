"""Exceptions raised by the CDF API client.

Every failure is surfaced to the immediate caller; nothing is retried.
"""


class CogniteError(Exception):
    """Base class for all client errors."""


class CogniteConnectionError(CogniteError):
    """Raised when the request could not be sent or no response arrived."""


class CogniteAPIError(CogniteError):
    """Raised when the API answers with a non-success status code."""

    def __init__(self, action: str, status_code: int, reason: str, body: str = ""):
        self.action = action
        self.status_code = status_code
        self.reason = reason
        self.body = body
        msg = f"{action}: {status_code} {reason}".rstrip()
        if body:
            msg = f"{msg} - {body}"
        super().__init__(msg)


class CogniteDecodeError(CogniteError):
    """Raised when a response body cannot be decoded into the expected type."""


class UnknownDatapointTypeError(CogniteDecodeError):
    """Raised when a data point item carries no known payload variant."""


class TokenAcquisitionError(CogniteError):
    """Raised when the identity provider does not return an access token."""


class ExpiredTokenError(CogniteError):
    """Raised when a static bearer token has already expired."""
