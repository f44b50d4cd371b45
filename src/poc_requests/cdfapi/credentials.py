"""Credential providers producing bearer tokens for the CDF API.

The OAuth client-credentials provider delegates token acquisition and
caching to MSAL. A static token provider is available for pre-issued
tokens.
"""

import base64
import json
import threading
import time
from dataclasses import dataclass, field
from typing import Protocol

import msal
import requests
import structlog

from .errors import CogniteConnectionError, ExpiredTokenError, TokenAcquisitionError

logger = structlog.get_logger(__name__)

AZURE_AD_AUTHORITY = "https://login.microsoftonline.com"


class CredentialProvider(Protocol):
    """Anything able to hand out a bearer token."""

    def fetch_token(self) -> str: ...


def validate_jwt_not_expired(token: str) -> None:
    """Check that a JWT token has not expired.

    Decodes the JWT payload without verifying the signature and checks
    the ``exp`` claim against the current time. Raises
    :class:`ExpiredTokenError` if the token is already past its
    expiration. If the token is not a valid JWT or has no ``exp`` claim,
    a warning is logged and execution continues.

    Args:
        token: The raw JWT string (header.payload.signature).

    Raises:
        ExpiredTokenError: If the token's ``exp`` claim is in the past.
    """
    parts = token.split(".")
    if len(parts) != 3:  # noqa: PLR2004
        logger.warning("Token does not appear to be a JWT, skipping expiry check")
        return

    try:
        # JWT base64url encoding omits padding; restore it
        payload_b64 = parts[1]
        padding = 4 - len(payload_b64) % 4
        if padding != 4:  # noqa: PLR2004
            payload_b64 += "=" * padding

        payload = json.loads(base64.urlsafe_b64decode(payload_b64))
    except (ValueError, json.JSONDecodeError):
        logger.warning("Failed to decode JWT payload, skipping expiry check")
        return

    exp = payload.get("exp") if isinstance(payload, dict) else None
    if exp is None:
        logger.warning("JWT has no 'exp' claim, skipping expiry check")
        return

    now = time.time()
    if now >= exp:
        msg = f"Bearer token has expired (exp={exp}, now={int(now)})"
        raise ExpiredTokenError(msg)

    logger.debug("JWT expiry validated", expires_in_seconds=int(exp - now))


@dataclass(frozen=True)
class Token:
    """Static bearer token, e.g. one issued out of band."""

    access_token: str

    def fetch_token(self) -> str:
        validate_jwt_not_expired(self.access_token)
        return self.access_token


@dataclass(frozen=True)
class OAuthClientCredentials:
    """OAuth2 client-credentials grant against an identity authority.

    The MSAL application is created on first use and kept for the lifetime
    of this object, so its in-memory token cache serves later calls.
    """

    client_id: str
    client_secret: str = field(repr=False)
    authority_uri: str
    cluster: str
    _app: msal.ConfidentialClientApplication | None = field(
        default=None,
        init=False,
        repr=False,
        compare=False,
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock,
        init=False,
        repr=False,
        compare=False,
    )

    @property
    def scopes(self) -> list[str]:
        return [f"https://{self.cluster}.cognitedata.com/.default"]

    def _application(self) -> msal.ConfidentialClientApplication:
        with self._lock:
            if self._app is None:
                app = msal.ConfidentialClientApplication(
                    self.client_id,
                    client_credential=self.client_secret,
                    authority=self.authority_uri,
                )
                # frozen dataclass, cache the application out of band
                object.__setattr__(self, "_app", app)
            return self._app

    def _acquire(self) -> dict | None:
        # msal raises ValueError for a bad authority and lets requests errors through
        app = self._application()
        scopes = self.scopes

        result = app.acquire_token_silent(scopes, account=None)
        if not result or "access_token" not in result:
            logger.debug("No cached token, acquiring by credential", scopes=scopes)
            result = app.acquire_token_for_client(scopes=scopes)
        return result

    def fetch_token(self) -> str:
        """Return an access token, reusing a cached one when possible.

        Tries a silent (cached) acquisition first and falls back to a
        fresh client-credentials request on a cache miss.

        Raises:
            CogniteConnectionError: If the authority could not be reached.
            TokenAcquisitionError: If the authority does not issue a token
                or rejects the configuration (e.g. an unknown tenant).
        """
        try:
            result = self._acquire()
        except requests.exceptions.RequestException as exc:
            logger.exception("Token request failed", authority=self.authority_uri)
            msg = f"Error acquiring token: could not reach {self.authority_uri}: {exc}"
            raise CogniteConnectionError(msg) from exc
        except ValueError as exc:
            logger.exception("Token request rejected", authority=self.authority_uri)
            msg = f"Error acquiring token: {exc}"
            raise TokenAcquisitionError(msg) from exc

        if not result or "access_token" not in result:
            result = result or {}
            error = result.get("error", "unknown_error")
            description = result.get("error_description", "")
            logger.error(
                "Token acquisition failed",
                authority=self.authority_uri,
                error=error,
            )
            msg = f"Error acquiring token: {error}"
            if description:
                msg = f"{msg} - {description}"
            raise TokenAcquisitionError(msg)

        return result["access_token"]


def azure_ad_client_credentials(
    client_id: str,
    client_secret: str,
    tenant_id: str,
    cluster: str,
) -> OAuthClientCredentials:
    """Build client credentials for an Azure AD tenant."""
    return OAuthClientCredentials(
        client_id=client_id,
        client_secret=client_secret,
        authority_uri=f"{AZURE_AD_AUTHORITY}/{tenant_id}",
        cluster=cluster,
    )
