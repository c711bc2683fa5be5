"""Display sink for advertiser progress."""

from typing import Optional, Tuple

from pubsub import pub

from advertiser.events import TOPIC_FAILED, TOPIC_FINISHED, TOPIC_SENT, TOPIC_STARTED
from common.logging_setup import get_logger

logger = get_logger(__name__)

FACE_BUSY = "(>-<)"
FACE_BROKEN = "(X-X)"
FACE_HAPPY = "(^-^)"


class DisplaySink:
    """
    Turns advertiser events into face + text status lines.

    Lines are logged and the latest one is kept in ``current`` for a
    screen driver to poll.
    """

    def __init__(self):
        self.current: Optional[Tuple[str, str]] = None
        self._attached = False

    def attach(self) -> None:
        """Subscribe to advertiser topics."""
        if self._attached:
            return
        pub.subscribe(self.on_started, TOPIC_STARTED)
        pub.subscribe(self.on_sent, TOPIC_SENT)
        pub.subscribe(self.on_failed, TOPIC_FAILED)
        pub.subscribe(self.on_finished, TOPIC_FINISHED)
        self._attached = True

    def detach(self) -> None:
        """Unsubscribe from advertiser topics."""
        if not self._attached:
            return
        pub.unsubscribe(self.on_started, TOPIC_STARTED)
        pub.unsubscribe(self.on_sent, TOPIC_SENT)
        pub.unsubscribe(self.on_failed, TOPIC_FAILED)
        pub.unsubscribe(self.on_finished, TOPIC_FINISHED)
        self._attached = False

    def show(self, face: str, text: str) -> None:
        self.current = (face, text)
        logger.info(f"{face} {text}")

    def on_started(self) -> None:
        self.show(FACE_BUSY, "Starting advertisement...")

    def on_sent(self, packets: int, rate: float) -> None:
        self.show(FACE_BUSY, f"Packets per second: {rate:.2f} pkt/s")

    def on_failed(self, attempt: int) -> None:
        self.show(FACE_BROKEN, "Advertisement failed to send!")

    def on_finished(self, packets: int, attempts: int) -> None:
        self.show(FACE_HAPPY, "Advertisement finished!")
