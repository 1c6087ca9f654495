"""
Core utilities and configuration for Cortex Relay.

This package provides core functionality including logging configuration,
optional Logfire monitoring, and other shared utilities.
"""

from cortex_relay.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
