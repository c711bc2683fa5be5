"""
Status profiles for the whisper beacon advertiser.

A profile is a JSON object shaped like the advertised status record. It
lets one unit announce a different name, face or policy without code
changes. Bundled profiles live in the ./profiles directory; any other
JSON file can be loaded by path.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List

from typing_extensions import TypedDict

from common.config import StatusConfig


class PolicyProfile(TypedDict, total=False):
    """Policy section of a status profile."""

    advertise: bool
    ap_ttl: int
    associate: bool
    bored_num_epochs: int
    channels: List[int]
    deauth: bool
    excited_num_epochs: int
    hop_recon_time: int
    max_inactive_scale: int
    max_interactions: int
    max_misses_for_recon: int
    min_recon_time: int | None
    min_rssi: int
    recon_inactive_multiplier: int
    recon_time: int
    sad_num_epochs: int
    sta_ttl: int


class StatusProfile(TypedDict, total=False):
    """Shape of a status profile loaded from JSON."""

    epoch: int
    face: str
    identity: str
    name: str
    policy: PolicyProfile
    pwnd_run: int
    pwnd_tot: int
    session_id: str
    uptime: int
    version: str


def _profiles_dir() -> Path:
    root = Path(__file__).resolve()
    while root != root.parent and not (root / "profiles").exists():
        root = root.parent
    return root / "profiles"


def _load_raw_profile(path: Path) -> StatusProfile:
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Profile file {path} did not contain an object")
    return data  # type: ignore[return-value]


def resolve_profile_path(name: str) -> Path:
    """
    Resolve a profile name or path.

    Anything ending in ``.json`` or containing a path separator is taken
    as a file path, otherwise ``<name>.json`` in the profiles directory.
    """
    if name.endswith(".json") or "/" in name:
        return Path(name).expanduser()
    return _profiles_dir() / f"{name}.json"


def load_status_profile(name: str) -> StatusConfig:
    """
    Load a status profile by name or path.

    Raises:
        FileNotFoundError: If the profile does not exist
        ValueError: If the profile is not an object or has unknown keys
    """
    path = resolve_profile_path(name)
    return StatusConfig.from_record(dict(_load_raw_profile(path)))


def list_profiles() -> Iterable[str]:
    """Return bundled profile names (without .json)."""
    for entry in sorted(_profiles_dir().iterdir()):
        if entry.name.endswith(".json"):
            yield entry.name.rsplit(".", 1)[0]


__all__ = [
    "PolicyProfile",
    "StatusProfile",
    "resolve_profile_path",
    "load_status_profile",
    "list_profiles",
]
