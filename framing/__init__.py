"""Framing module for the whisper beacon advertiser."""

from framing.beacon import BEACON_TEMPLATE, ID_WHISPER_PAYLOAD
from framing.builder import FrameBuilder, FrameOverflowError

__all__ = ["BEACON_TEMPLATE", "ID_WHISPER_PAYLOAD", "FrameBuilder", "FrameOverflowError"]
