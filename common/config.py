"""Configuration management for the whisper beacon advertiser."""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PolicyConfig:
    """Policy sub-record advertised to peers."""

    advertise: bool = True
    ap_ttl: int = 120
    associate: bool = True
    bored_num_epochs: int = 15
    channels: List[int] = field(default_factory=lambda: [1, 6, 11])
    deauth: bool = True
    excited_num_epochs: int = 10
    hop_recon_time: int = 10
    max_inactive_scale: int = 3
    max_interactions: int = 3
    max_misses_for_recon: int = 5

    # None keeps the firmware behaviour of advertising min_rssi here.
    # Whether pwngrid expects a separate value is unresolved.
    min_recon_time: Optional[int] = None
    min_rssi: int = -200
    recon_inactive_multiplier: int = 2
    recon_time: int = 30
    sad_num_epochs: int = 15
    sta_ttl: int = 300

    def to_record(self) -> "OrderedDict[str, Any]":
        """Return the policy mapping in wire key order."""
        min_recon_time = self.min_rssi if self.min_recon_time is None else self.min_recon_time
        return OrderedDict([
            ("advertise", self.advertise),
            ("ap_ttl", self.ap_ttl),
            ("associate", self.associate),
            ("bored_num_epochs", self.bored_num_epochs),
            ("channels", list(self.channels)),
            ("deauth", self.deauth),
            ("excited_num_epochs", self.excited_num_epochs),
            ("hop_recon_time", self.hop_recon_time),
            ("max_inactive_scale", self.max_inactive_scale),
            ("max_interactions", self.max_interactions),
            ("max_misses_for_recon", self.max_misses_for_recon),
            ("min_recon_time", min_recon_time),
            ("min_rssi", self.min_rssi),
            ("recon_inactive_multiplier", self.recon_inactive_multiplier),
            ("recon_time", self.recon_time),
            ("sad_num_epochs", self.sad_num_epochs),
            ("sta_ttl", self.sta_ttl),
        ])


@dataclass
class StatusConfig:
    """
    Status record serialized into every beacon.

    The frame builder reads this object at pack time, so updates made
    between sends (uptime, counters) show up in the next frame.
    """

    epoch: int = 0
    face: str = "(^-^)"
    identity: str = "b9210077f7c14c0651aa338c55e820e93f90110ef679648001b1cecdbffc0090"
    name: str = "minigotchi"
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    pwnd_run: int = 0
    pwnd_tot: int = 0
    session_id: str = "84:f3:eb:58:95:bd"
    uptime: int = 0
    version: str = "3.5.3-beta"

    @property
    def advertise(self) -> bool:
        """Shortcut for the policy advertise flag."""
        return self.policy.advertise

    def to_record(self) -> "OrderedDict[str, Any]":
        """Return the full status mapping in wire key order."""
        return OrderedDict([
            ("epoch", self.epoch),
            ("face", self.face),
            ("identity", self.identity),
            ("name", self.name),
            ("policy", self.policy.to_record()),
            ("pwnd_run", self.pwnd_run),
            ("pwnd_tot", self.pwnd_tot),
            ("session_id", self.session_id),
            ("uptime", self.uptime),
            ("version", self.version),
        ])

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "StatusConfig":
        """
        Build a StatusConfig from a (possibly partial) record.

        Missing keys keep their defaults.

        Raises:
            ValueError: If the record contains unknown keys
        """
        data = dict(record)
        policy_data = data.pop("policy", {}) or {}

        status_fields = set(cls.__dataclass_fields__) - {"policy"}
        unknown = set(data) - status_fields
        if unknown:
            raise ValueError(f"Unknown status keys: {sorted(unknown)}")

        if not isinstance(policy_data, dict):
            raise ValueError("policy must be an object")
        unknown = set(policy_data) - set(PolicyConfig.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown policy keys: {sorted(unknown)}")

        return cls(policy=PolicyConfig(**policy_data), **data)


@dataclass
class AdvertiserConfig:
    """Runtime settings for the advertiser daemon."""

    # Station interface the radio transmits on
    interface: str = "wlan0"

    # Sends per advertisement batch
    attempts: int = 150

    # Delay before every send, throttles the radio
    send_delay: float = 0.102

    # Pause between announcing a batch and the first send
    start_delay: float = 0.25

    # Seconds between batches in daemon mode
    batch_interval: float = 5.0

    # Zero bytes reserved after the last whisper chunk
    slack: int = 0xFF

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Use an in-memory radio instead of the interface
    dry_run: bool = False


# Default configuration instance
default_config = AdvertiserConfig()
