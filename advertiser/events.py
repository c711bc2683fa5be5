"""Progress event topics published by the advertiser.

Events go out through pypubsub so any number of sinks (console, screen,
telemetry) can follow a batch without the advertiser knowing about them.

Topics and message arguments:
- advertiser.started:  no arguments
- advertiser.sent:     packets (int), rate (float, packets per second)
- advertiser.failed:   attempt (int, 0-based)
- advertiser.finished: packets (int), attempts (int)
"""

from typing import Any, Callable

from pubsub import pub

TOPIC_ROOT = "advertiser"
TOPIC_STARTED = "advertiser.started"
TOPIC_SENT = "advertiser.sent"
TOPIC_FAILED = "advertiser.failed"
TOPIC_FINISHED = "advertiser.finished"

ALL_TOPICS = (TOPIC_STARTED, TOPIC_SENT, TOPIC_FAILED, TOPIC_FINISHED)

Publisher = Callable[..., None]


def publish(topic: str, **kwargs: Any) -> None:
    """Publish an advertiser event on the global pypubsub bus."""
    pub.sendMessage(topic, **kwargs)
