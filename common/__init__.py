"""Common utilities for the whisper beacon advertiser."""

from common.config import AdvertiserConfig, PolicyConfig, StatusConfig
from common.logging_setup import setup_logging, get_logger

__all__ = [
    "AdvertiserConfig",
    "PolicyConfig",
    "StatusConfig",
    "setup_logging",
    "get_logger",
]
