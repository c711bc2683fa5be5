"""Tests for advertisement batches."""

import math
import unittest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from advertiser.advertiser import Advertiser, AdvertiserState
from advertiser.events import TOPIC_FAILED, TOPIC_FINISHED, TOPIC_SENT, TOPIC_STARTED
from common.config import PolicyConfig, StatusConfig
from framing.builder import FrameBuilder
from transport.radio import InMemoryRadio


class FakeClock:
    """Clock advancing by a fixed step on every read."""

    def __init__(self, step=0.1):
        self.now = 0.0
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


class EventRecorder:
    """Publisher that records (topic, kwargs)."""

    def __init__(self):
        self.events = []

    def __call__(self, topic, **kwargs):
        self.events.append((topic, kwargs))

    def topics(self, topic):
        return [kwargs for t, kwargs in self.events if t == topic]


class TestAdvertiser(unittest.TestCase):
    """Test Advertiser.advertise()."""

    def make(self, advertise=True, attempts=5, fail_on=None, clock=None):
        self.status = StatusConfig(policy=PolicyConfig(advertise=advertise))
        self.radio = InMemoryRadio(fail_on=fail_on)
        self.sleeps = []
        builder = FrameBuilder(self.status, self.radio, sleep=self.sleeps.append)
        self.events = EventRecorder()
        return Advertiser(
            builder,
            attempts=attempts,
            clock=clock or FakeClock(),
            sleep=self.sleeps.append,
            publisher=self.events,
        )

    def test_disabled_is_idle(self):
        """No transmits and no events when advertising is off."""
        advertiser = self.make(advertise=False)
        result = advertiser.advertise()

        self.assertFalse(result.enabled)
        self.assertEqual(result.attempts, 0)
        self.assertEqual(self.radio.calls, 0)
        self.assertEqual(self.events.events, [])
        self.assertEqual(advertiser.state, AdvertiserState.IDLE)

    def test_exact_attempt_count(self):
        advertiser = self.make(attempts=7)
        result = advertiser.advertise()

        self.assertTrue(result.enabled)
        self.assertEqual(self.radio.calls, 7)
        self.assertEqual(result.attempts, 7)
        self.assertEqual(result.sent, 7)
        self.assertEqual(result.failed, 0)

    def test_default_attempts(self):
        status = StatusConfig()
        advertiser = Advertiser(FrameBuilder(status, InMemoryRadio()), publisher=EventRecorder())
        self.assertEqual(advertiser.attempts, 150)
        self.assertIs(advertiser.status, status)

    def test_negative_attempts_rejected(self):
        with self.assertRaises(ValueError):
            self.make(attempts=-1)

    def test_failures_do_not_abort_batch(self):
        advertiser = self.make(attempts=5, fail_on={1, 3})
        result = advertiser.advertise()

        self.assertEqual(self.radio.calls, 5)
        self.assertEqual(result.sent, 3)
        self.assertEqual(result.failed, 2)
        self.assertEqual([e["attempt"] for e in self.events.topics(TOPIC_FAILED)], [1, 3])

    def test_reported_packets_bounded_by_successes(self):
        advertiser = self.make(attempts=6, fail_on={0, 2, 4})
        advertiser.advertise()

        counts = [e["packets"] for e in self.events.topics(TOPIC_SENT)]
        self.assertEqual(counts, [1, 2, 3])
        self.assertTrue(all(c <= 6 for c in counts))

    def test_event_sequence(self):
        advertiser = self.make(attempts=2, fail_on={1})
        advertiser.advertise()

        topics = [t for t, _ in self.events.events]
        self.assertEqual(topics, [TOPIC_STARTED, TOPIC_SENT, TOPIC_FAILED, TOPIC_FINISHED])
        self.assertEqual(
            self.events.topics(TOPIC_FINISHED),
            [{"packets": 1, "attempts": 2}],
        )

    def test_rate_computed_from_elapsed(self):
        # start=0.0, then 0.5, 1.0 after each send
        advertiser = self.make(attempts=2, clock=FakeClock(step=0.5))
        result = advertiser.advertise()

        rates = [e["rate"] for e in self.events.topics(TOPIC_SENT)]
        self.assertEqual(len(rates), 2)
        self.assertAlmostEqual(rates[0], 1 / 0.5)
        self.assertAlmostEqual(rates[1], 2 / 1.0)
        self.assertAlmostEqual(result.rate, 2.0)

    def test_zero_elapsed_skips_rate(self):
        """A frozen clock never produces an infinite rate."""
        advertiser = self.make(attempts=3, clock=lambda: 100.0)
        result = advertiser.advertise()

        self.assertEqual(result.sent, 3)
        self.assertEqual(self.events.topics(TOPIC_SENT), [])
        self.assertIsNone(result.rate)
        self.assertEqual(len(self.events.topics(TOPIC_FINISHED)), 1)

    def test_rates_are_finite(self):
        advertiser = self.make(attempts=4, clock=FakeClock(step=1e-9))
        advertiser.advertise()

        for event in self.events.topics(TOPIC_SENT):
            self.assertTrue(math.isfinite(event["rate"]))

    def test_start_delay_before_sends(self):
        advertiser = self.make(attempts=2)
        advertiser.advertise()

        self.assertEqual(self.sleeps, [0.25, 0.102, 0.102])

    def test_state_returns_to_idle(self):
        advertiser = self.make(attempts=1)
        seen = []
        original = advertiser.builder.send

        def spying_send():
            seen.append(advertiser.state)
            return original()

        advertiser.builder.send = spying_send
        advertiser.advertise()

        self.assertEqual(seen, [AdvertiserState.ADVERTISING])
        self.assertEqual(advertiser.state, AdvertiserState.IDLE)

    def test_state_idle_after_error(self):
        advertiser = self.make(attempts=1)

        def broken_send():
            raise ValueError("frame too large")

        advertiser.builder.send = broken_send
        with self.assertRaises(ValueError):
            advertiser.advertise()
        self.assertEqual(advertiser.state, AdvertiserState.IDLE)

    def test_repeat_batches_are_independent(self):
        advertiser = self.make(attempts=3, fail_on={0})
        first = advertiser.advertise()
        second = advertiser.advertise()

        self.assertEqual(first.sent, 2)
        self.assertEqual(second.sent, 3)
        self.assertEqual(self.radio.calls, 6)

    def test_every_frame_identical_within_batch(self):
        advertiser = self.make(attempts=3)
        advertiser.advertise()

        frames = {frame for _, frame in self.radio.sent}
        self.assertEqual(len(frames), 1)


if __name__ == "__main__":
    unittest.main()
