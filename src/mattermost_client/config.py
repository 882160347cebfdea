"""Configuration and logging setup for the Mattermost client."""

import json
import logging
import os
import pathlib
import sys
from typing import Literal, TextIO

import pydantic
import structlog

from . import mmrestapi

CONFIG_ENV_VAR = "MATTERMOST_CLIENT_CONFIG_PATH"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for the Mattermost client."""

    hostname: str = pydantic.Field(description="Mattermost server hostname", min_length=1)
    port: int = pydantic.Field(443, description="Server port", gt=0, lt=65536)
    use_tls: bool = pydantic.Field(True, description="Connect over TLS")
    auto_close: bool = pydantic.Field(
        True,
        description="Ask the server to close the connection after each response",
    )
    timeout: float = pydantic.Field(
        mmrestapi.DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")
    log_format: Literal["logfmt", "json"] = pydantic.Field(
        "logfmt",
        description="Log output format",
    )
    log_events: bool = pydantic.Field(
        False,
        description="Log every request/response event through structlog",
    )


def configure_logging(
    log_level_name: str,
    log_format: str = "logfmt",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the client's diagnostics and request events.

    Output goes to ``stream`` (stderr by default) so it never mixes with a
    host program's stdout.

    Args:
        log_level_name: Name of the minimum level, e.g. "DEBUG".
        log_format: "logfmt" or "json".
        stream: File-like object to write to.
    """
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.processors.LogfmtRenderer(
            key_order=("timestamp", "level", "msg", "function", "method", "path", "status"),
            drop_missing=True,
        )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def load_config(config_path: str) -> ClientConfig:
    """Load configuration from JSON file."""
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = json.load(f)

    return ClientConfig(**data)


def create_client(config: ClientConfig) -> mmrestapi.MattermostClient:
    """Construct a client from validated config."""
    connection = mmrestapi.make_connection_data(
        hostname=config.hostname,
        port=config.port,
        use_tls=config.use_tls,
        auto_close=config.auto_close,
        timeout=config.timeout,
    )
    event_logger = mmrestapi.structlog_logger() if config.log_events else mmrestapi.no_logger
    logger.info("Created client", base_url=connection.base_url)
    return mmrestapi.MattermostClient(connection, logger=event_logger)


def create_client_from_env(config_path: str | None = None) -> mmrestapi.MattermostClient:
    """Create a client using a config path or the environment default."""
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, "/config.json")
    config = load_config(resolved_path)
    configure_logging(config.log_level, config.log_format)
    return create_client(config)
