"""Advertiser daemon for the whisper beacon advertiser."""

import argparse
import signal
import sys
import threading
import time
from typing import Optional

from advertiser.advertiser import Advertiser
from common.config import AdvertiserConfig, StatusConfig
from common.interface_detection import find_wireless_interface
from common.logging_setup import setup_logging, get_logger
from common.profile import load_status_profile
from display.sink import DisplaySink
from framing.builder import FrameBuilder
from transport.radio import InMemoryRadio, Radio, ScapyRadio

logger = get_logger(__name__)


class AdvertiserDaemon:
    """
    Repeats advertisement batches until stopped.

    Stop requests take effect between batches; a running batch always
    completes.
    """

    def __init__(
        self,
        config: AdvertiserConfig,
        status: StatusConfig,
        radio: Optional[Radio] = None,
    ):
        """
        Initialize advertiser daemon.

        Args:
            config: Runtime settings
            status: Status record to advertise
            radio: Radio to use; built from config when omitted
        """
        self.config = config
        self.status = status
        self._radio = radio
        self._advertiser: Advertiser = None  # type: ignore
        self._display = DisplaySink()
        self._stop_event = threading.Event()
        self._started_at = 0.0
        self.batches = 0

    def _make_radio(self) -> Radio:
        if self.config.dry_run:
            logger.info("Dry run: frames are recorded, not transmitted")
            return InMemoryRadio()
        return ScapyRadio()

    def start(self) -> None:
        """Start the advertiser daemon."""
        logger.info("Starting advertiser daemon...")

        if self._radio is None:
            self._radio = self._make_radio()

        builder = FrameBuilder(
            status=self.status,
            radio=self._radio,
            interface=self.config.interface,
            send_delay=self.config.send_delay,
            slack=self.config.slack,
        )
        self._advertiser = Advertiser(
            builder,
            attempts=self.config.attempts,
            start_delay=self.config.start_delay,
        )

        self._display.attach()
        self._started_at = time.monotonic()
        self._stop_event.clear()

        logger.info(f"Advertising as '{self.status.name}' on {self.config.interface}")

    def run_batch(self):
        """Refresh uptime and run one advertisement batch."""
        self.status.uptime = int(time.monotonic() - self._started_at)
        result = self._advertiser.advertise()
        self.batches += 1
        return result

    def run(self, once: bool = False) -> None:
        """Run the daemon main loop."""
        while not self._stop_event.is_set():
            self.run_batch()
            if once:
                break
            self._stop_event.wait(self.config.batch_interval)

    def request_stop(self) -> None:
        """Ask run() to return once the current batch has finished."""
        self._stop_event.set()

    def stop(self) -> None:
        """Stop the advertiser daemon."""
        logger.info("Stopping advertiser daemon...")

        self._stop_event.set()
        self._display.detach()

        if self._radio:
            self._radio.close()

        logger.info("Advertiser daemon stopped")


def main() -> None:
    """Main entry point for whisper-advertiserd."""
    parser = argparse.ArgumentParser(
        description="Whisper Beacon - pwngrid-compatible advertiser",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--iface",
        help="Monitor-capable interface to transmit on (auto-detected if omitted)",
    )

    parser.add_argument(
        "--profile",
        default="default",
        help="Bundled profile name or path to a JSON status profile",
    )

    parser.add_argument(
        "--attempts",
        type=int,
        default=150,
        help="Beacons per advertisement batch",
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=5.0,
        help="Seconds between batches",
    )

    parser.add_argument(
        "--slack",
        type=int,
        default=0xFF,
        help="Zero bytes reserved after the last whisper chunk",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single batch and exit",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Record frames in memory instead of transmitting",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    parser.add_argument(
        "--log-file",
        help="Log file path (optional)",
    )

    args = parser.parse_args()

    # Set up logging
    setup_logging(level=args.log_level, log_file=args.log_file)

    # Create config
    config = AdvertiserConfig(
        interface=find_wireless_interface(args.iface),
        attempts=args.attempts,
        batch_interval=args.interval,
        slack=args.slack,
        log_level=args.log_level,
        log_file=args.log_file,
        dry_run=args.dry_run,
    )

    try:
        status = load_status_profile(args.profile)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load profile '{args.profile}': {e}")
        sys.exit(1)

    # Create and run daemon
    daemon = AdvertiserDaemon(config, status)

    # Set up signal handlers
    def signal_handler(sig, frame):
        logger.info("Received signal, stopping after the current batch...")
        daemon.request_stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        daemon.start()
        daemon.run(once=args.once)
        daemon.stop()
    except Exception as e:
        logger.error(f"Advertiser daemon error: {e}")
        daemon.stop()
        sys.exit(1)


if __name__ == "__main__":
    main()
