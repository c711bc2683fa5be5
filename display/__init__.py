"""Display output for the whisper beacon advertiser."""

from display.sink import DisplaySink

__all__ = ["DisplaySink"]
