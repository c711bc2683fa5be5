"""Advertiser module for the whisper beacon advertiser."""

from advertiser.advertiser import AdvertiseResult, Advertiser, AdvertiserState
from advertiser.daemon import AdvertiserDaemon

__all__ = ["AdvertiseResult", "Advertiser", "AdvertiserState", "AdvertiserDaemon"]
