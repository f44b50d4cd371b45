"""Settings, logging and client construction for the demo program."""

import logging
import os
from collections.abc import Mapping

import pydantic
import structlog

from . import cdfapi

# Settings field -> environment variable
ENV_VARS = {
    "client_id": "CLIENT_ID",
    "client_secret": "CLIENT_SECRET",
    "tenant_id": "TENANT_ID",
    "cluster": "CDF_CLUSTER",
    "project": "CDF_PROJECT",
    "client_name": "CDF_CLIENT_NAME",
    "log_level": "LOG_LEVEL",
    "timeout": "CDF_TIMEOUT",
}

REQUIRED = ("client_id", "client_secret", "tenant_id", "cluster", "project")


class Settings(pydantic.BaseModel):
    """Settings for connecting to a CDF project."""

    model_config = pydantic.ConfigDict(frozen=True)

    client_id: str = pydantic.Field(description="OAuth client id")
    client_secret: str = pydantic.Field(description="OAuth client secret", repr=False)
    tenant_id: str = pydantic.Field(description="Azure AD tenant id")
    cluster: str = pydantic.Field(description="CDF cluster, e.g. westeurope-1")
    project: str = pydantic.Field(description="CDF project")
    client_name: str = pydantic.Field(
        cdfapi.client.SDK_NAME,
        description="Application name sent in the x-cdp-app header",
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")
    timeout: float = pydantic.Field(
        cdfapi.DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output."""
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from environment variables.

    Args:
        environ: Mapping to read from; defaults to ``os.environ``.

    Raises:
        ValueError: If required variables are missing or empty.
        pydantic.ValidationError: If a value is invalid (e.g. a bad timeout).
    """
    environ = os.environ if environ is None else environ

    data = {}
    for field, env_var in ENV_VARS.items():
        value = environ.get(env_var, "").strip()
        if value:
            data[field] = value

    missing = [ENV_VARS[field] for field in REQUIRED if field not in data]
    if missing:
        msg = f"required environment variables not set: {', '.join(missing)}"
        raise ValueError(msg)

    return Settings(**data)


def create_client(settings: Settings) -> cdfapi.CogniteClient:
    """Construct a client authenticated with Azure AD client credentials."""
    credentials = cdfapi.azure_ad_client_credentials(
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        tenant_id=settings.tenant_id,
        cluster=settings.cluster,
    )
    config = cdfapi.ClientConfig(
        client_name=settings.client_name,
        cluster=settings.cluster,
        project=settings.project,
        credentials=credentials,
    )
    return cdfapi.CogniteClient(config, timeout=settings.timeout)
