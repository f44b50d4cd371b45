"""Tests for the credential providers."""

import base64
import json
import time

import pytest
import requests

from poc_requests.cdfapi import credentials, errors


def _make_jwt(payload: dict, header: dict | None = None) -> str:
    """Build a minimal unsigned JWT string from a payload dict."""
    header = header or {"alg": "HS256", "typ": "JWT"}
    h = base64.urlsafe_b64encode(json.dumps(header).encode()).rstrip(b"=").decode()
    p = base64.urlsafe_b64encode(json.dumps(payload).encode()).rstrip(b"=").decode()
    return f"{h}.{p}.fakesignature"


class FakeConfidentialClient:
    """Stand-in for msal.ConfidentialClientApplication."""

    instances: list["FakeConfidentialClient"] = []
    silent_result: dict | None = None
    credential_result: dict | None = None

    def __init__(self, client_id, client_credential=None, authority=None):
        self.client_id = client_id
        self.client_credential = client_credential
        self.authority = authority
        self.calls: list[tuple[str, list[str]]] = []
        FakeConfidentialClient.instances.append(self)

    def acquire_token_silent(self, scopes, account=None):
        self.calls.append(("silent", scopes))
        return self.silent_result

    def acquire_token_for_client(self, scopes):
        self.calls.append(("credential", scopes))
        return self.credential_result


@pytest.fixture
def fake_msal(monkeypatch) -> type[FakeConfidentialClient]:
    monkeypatch.setattr(FakeConfidentialClient, "instances", [])
    monkeypatch.setattr(FakeConfidentialClient, "silent_result", None)
    monkeypatch.setattr(
        FakeConfidentialClient,
        "credential_result",
        {"access_token": "fresh-token", "token_type": "Bearer"},
    )
    monkeypatch.setattr(
        credentials.msal,
        "ConfidentialClientApplication",
        FakeConfidentialClient,
    )
    return FakeConfidentialClient


@pytest.fixture
def oauth() -> credentials.OAuthClientCredentials:
    return credentials.azure_ad_client_credentials(
        client_id="client-id",
        client_secret="client-secret",
        tenant_id="tenant-id",
        cluster="westeurope-1",
    )


# ---------------------------------------------------------------------------
# validate_jwt_not_expired
# ---------------------------------------------------------------------------


def test_validate_jwt_valid_token_does_not_raise():
    """Valid JWT with future expiry passes validation."""
    token = _make_jwt({"exp": int(time.time()) + 3600})
    credentials.validate_jwt_not_expired(token)


def test_validate_jwt_expired_token_raises():
    """Expired JWT raises ExpiredTokenError."""
    token = _make_jwt({"exp": int(time.time()) - 60})
    with pytest.raises(errors.ExpiredTokenError, match="expired"):
        credentials.validate_jwt_not_expired(token)


def test_validate_jwt_token_at_exact_expiry_raises():
    """JWT whose exp equals current time is treated as expired."""
    token = _make_jwt({"exp": int(time.time())})
    with pytest.raises(errors.ExpiredTokenError):
        credentials.validate_jwt_not_expired(token)


def test_validate_jwt_non_jwt_string_is_skipped():
    """Opaque tokens (no dots) are accepted to support other token formats."""
    credentials.validate_jwt_not_expired("not-a-jwt-token")


def test_validate_jwt_no_exp_claim_is_skipped():
    token = _make_jwt({"sub": "user"})
    credentials.validate_jwt_not_expired(token)


def test_validate_jwt_invalid_base64_payload_is_skipped():
    """Malformed base64 payload is skipped rather than crashing."""
    credentials.validate_jwt_not_expired("header.!!!invalid!!!.signature")


# ---------------------------------------------------------------------------
# Token
# ---------------------------------------------------------------------------


def test_static_token_is_returned():
    assert credentials.Token("test-access-token").fetch_token() == "test-access-token"


def test_static_token_refuses_expired_jwt():
    token = credentials.Token(_make_jwt({"exp": int(time.time()) - 60}))
    with pytest.raises(errors.ExpiredTokenError):
        token.fetch_token()


# ---------------------------------------------------------------------------
# OAuthClientCredentials
# ---------------------------------------------------------------------------


def test_azure_ad_client_credentials_fields(oauth):
    assert oauth.client_id == "client-id"
    assert oauth.client_secret == "client-secret"
    assert oauth.authority_uri == "https://login.microsoftonline.com/tenant-id"
    assert oauth.cluster == "westeurope-1"


def test_scopes_target_the_cluster(oauth):
    assert oauth.scopes == ["https://westeurope-1.cognitedata.com/.default"]


def test_secret_is_not_in_repr(oauth):
    assert "client-secret" not in repr(oauth)


def test_fetch_token_uses_cached_token(fake_msal, oauth):
    """A silent (cached) hit is returned without a credential request."""
    fake_msal.silent_result = {"access_token": "cached-token"}

    assert oauth.fetch_token() == "cached-token"

    (app,) = fake_msal.instances
    assert app.calls == [("silent", oauth.scopes)]


def test_fetch_token_falls_back_to_credentials_on_cache_miss(fake_msal, oauth):
    assert oauth.fetch_token() == "fresh-token"

    (app,) = fake_msal.instances
    assert app.calls == [("silent", oauth.scopes), ("credential", oauth.scopes)]


def test_fetch_token_builds_application_from_credentials(fake_msal, oauth):
    oauth.fetch_token()

    (app,) = fake_msal.instances
    assert app.client_id == "client-id"
    assert app.client_credential == "client-secret"
    assert app.authority == "https://login.microsoftonline.com/tenant-id"


def test_fetch_token_reuses_application(fake_msal, oauth):
    """The MSAL application, and with it its token cache, is created once."""
    oauth.fetch_token()
    oauth.fetch_token()

    assert len(fake_msal.instances) == 1


def test_fetch_token_raises_when_no_token_issued(fake_msal, oauth):
    fake_msal.credential_result = {
        "error": "invalid_client",
        "error_description": "AADSTS7000215: Invalid client secret provided.",
    }

    with pytest.raises(errors.TokenAcquisitionError, match="invalid_client.*AADSTS7000215"):
        oauth.fetch_token()


def test_fetch_token_unreachable_authority(fake_msal, oauth, monkeypatch):
    def unreachable(self, scopes):
        raise requests.exceptions.ConnectionError("login.microsoftonline.com unreachable")

    monkeypatch.setattr(fake_msal, "acquire_token_for_client", unreachable)

    with pytest.raises(errors.CogniteConnectionError, match="unreachable") as exc_info:
        oauth.fetch_token()
    assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)


def test_fetch_token_unknown_tenant_raises_acquisition_error(monkeypatch, oauth):
    def reject(*args, **kwargs):
        raise ValueError("Unable to get authority configuration")

    monkeypatch.setattr(credentials.msal, "ConfidentialClientApplication", reject)

    with pytest.raises(errors.TokenAcquisitionError, match="authority configuration"):
        oauth.fetch_token()
