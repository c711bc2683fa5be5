"""Radio transport for the whisper beacon advertiser."""

from transport.radio import InMemoryRadio, Radio, RadioError, ScapyRadio

__all__ = ["Radio", "RadioError", "ScapyRadio", "InMemoryRadio"]
