"""Configuration module."""

from heirloom.config.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from heirloom.config.settings import PipelineConfig, Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "PipelineConfig",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "bind_request_context",
    "clear_request_context",
]
