"""Bounded beacon advertisement batches."""

import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from advertiser.events import (
    Publisher,
    TOPIC_FAILED,
    TOPIC_FINISHED,
    TOPIC_SENT,
    TOPIC_STARTED,
    publish,
)
from common.config import StatusConfig
from common.logging_setup import get_logger
from framing.builder import FrameBuilder

logger = get_logger(__name__)

# Sends per batch
DEFAULT_ATTEMPTS = 150

# Pause between announcing a batch and the first send
START_DELAY_S = 0.25


class AdvertiserState(Enum):
    """Advertiser lifecycle."""

    IDLE = "idle"
    ADVERTISING = "advertising"


@dataclass
class AdvertiseResult:
    """Outcome of one advertise() call."""

    enabled: bool
    attempts: int = 0
    sent: int = 0
    failed: int = 0
    elapsed: float = 0.0
    rate: Optional[float] = None


class Advertiser:
    """
    Drives a fixed number of beacon sends and reports throughput.

    One call to advertise() is one batch. Callers wanting a continuous
    presence call it again; there is no background loop and no way to
    cancel a batch once it has started.
    """

    def __init__(
        self,
        builder: FrameBuilder,
        status: Optional[StatusConfig] = None,
        attempts: int = DEFAULT_ATTEMPTS,
        start_delay: float = START_DELAY_S,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        publisher: Publisher = publish,
    ):
        """
        Initialize the advertiser.

        Args:
            builder: Frame builder used for every send
            status: Status holding the advertise flag (defaults to the builder's)
            attempts: Sends per batch
            start_delay: Seconds to wait after announcing a batch
            clock: Monotonic clock in seconds
            sleep: Sleep function
            publisher: Event publisher, called as publisher(topic, **kwargs)
        """
        if attempts < 0:
            raise ValueError(f"attempts must be >= 0, got {attempts}")
        self.builder = builder
        self.status = status if status is not None else builder.status
        self.attempts = attempts
        self.start_delay = start_delay
        self._clock = clock
        self._sleep = sleep
        self._publish = publisher
        self.state = AdvertiserState.IDLE

    def advertise(self) -> AdvertiseResult:
        """
        Run one advertisement batch.

        Returns:
            AdvertiseResult; enabled is False when advertising is turned off
        """
        if not self.status.advertise:
            logger.debug("Advertising disabled, staying idle")
            return AdvertiseResult(enabled=False)

        result = AdvertiseResult(enabled=True)
        start = self._clock()
        self.state = AdvertiserState.ADVERTISING

        try:
            logger.info(f"Starting advertisement batch of {self.attempts} beacons")
            self._publish(TOPIC_STARTED)
            self._sleep(self.start_delay)

            for attempt in range(self.attempts):
                result.attempts += 1
                if self.builder.send():
                    result.sent += 1
                    rate = self._rate(result.sent, self._clock() - start)
                    if rate is not None:
                        result.rate = rate
                        self._publish(TOPIC_SENT, packets=result.sent, rate=rate)
                else:
                    result.failed += 1
                    self._publish(TOPIC_FAILED, attempt=attempt)
        finally:
            result.elapsed = self._clock() - start
            self.state = AdvertiserState.IDLE

        logger.info(
            f"Advertisement finished: {result.sent}/{result.attempts} sent "
            f"in {result.elapsed:.2f}s"
        )
        self._publish(TOPIC_FINISHED, packets=result.sent, attempts=result.attempts)
        return result

    @staticmethod
    def _rate(packets: int, elapsed: float) -> Optional[float]:
        """Packets per second, or None when it cannot be computed."""
        if elapsed <= 0:
            return None
        rate = packets / elapsed
        if not math.isfinite(rate):
            return None
        return rate
