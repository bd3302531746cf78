# Infrastructure module - logging, configuration, and the MCP stdio server
# BridgeServer lives in infra.server and is not re-exported here

from .logging import (
    get_logger, configure_logging, RequestContext,
    log_request_end, get_request_id, generate_request_id
)
from .config import ConfigManager, BridgeConfig, ConfigError, load_config

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "RequestContext",
    "log_request_end",
    "get_request_id",
    "generate_request_id",
    # Config
    "ConfigManager",
    "BridgeConfig",
    "ConfigError",
    "load_config",
]
