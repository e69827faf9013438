"""Configuration layering: built-in defaults < stored profile < explicit overrides.

The merge runs once per process. Overrides are presence-tagged: a field left
as ``None`` was not supplied for this run and passes the profile value
through, even when the supplied value would equal the built-in default.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, fields, replace
from typing import Any

from wavelog_bridge.config import (
    DEFAULT_PROFILE,
    FALLBACK_PROFILE_NAME,
    PLACEHOLDER_API_KEY,
    ConfigError,
    ProfileConfig,
    ProfileStore,
)

DATA_SOURCES = ("flrig", "hamlib")

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


@dataclass(frozen=True, slots=True)
class ConfigOverrides:
    """Settings supplied explicitly for this run; ``None`` means not supplied."""

    wavelog_url: str | None = None
    wavelog_key: str | None = None
    radio_name: str | None = None
    flrig_host: str | None = None
    flrig_port: int | None = None
    hamlib_host: str | None = None
    hamlib_port: int | None = None
    interval: str | None = None
    data_source: str | None = None
    log_level: str | None = None

    def supplied(self) -> dict[str, Any]:
        """Return only the fields that were explicitly set."""
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


@dataclass(frozen=True, slots=True)
class EffectiveConfig:
    """Validated settings used for one run of the bridge."""

    wavelog_url: str
    wavelog_key: str
    radio_name: str
    data_source: str
    flrig_host: str
    flrig_port: int
    hamlib_host: str
    hamlib_port: int
    interval: float
    log_level: str
    profile_name: str = FALLBACK_PROFILE_NAME


def select_profile_name(store: ProfileStore, requested: str | None = None) -> str:
    """Pick the profile to load: requested, else stored default, else fallback."""
    if requested:
        return requested
    if store.default_profile:
        return store.default_profile
    return FALLBACK_PROFILE_NAME


def merge_profile(
    store: ProfileStore,
    overrides: ConfigOverrides | None = None,
    requested: str | None = None,
) -> tuple[str, ProfileConfig]:
    """Merge defaults, the selected stored profile and overrides, in that order."""
    name = select_profile_name(store, requested)
    merged = DEFAULT_PROFILE
    stored = store.get(name)
    if stored is not None:
        merged = stored
    if overrides is not None:
        merged = replace(merged, **overrides.supplied())
    return name, merged


def parse_interval(text: str) -> float:
    """Parse duration text such as ``1s``, ``1500ms`` or ``1m30s`` into seconds."""
    value = text.strip()
    if not value:
        raise ValueError("empty duration")
    try:
        return float(value)
    except ValueError:
        pass
    total = 0.0
    position = 0
    for match in _DURATION_PART.finditer(value):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    if position != len(value):
        raise ValueError(f"invalid duration '{text}'")
    return total


def build_effective_config(name: str, profile: ProfileConfig) -> EffectiveConfig:
    """Validate a merged profile; raises :class:`ConfigError` when unusable."""
    if not profile.wavelog_key or profile.wavelog_key == PLACEHOLDER_API_KEY:
        raise ConfigError(
            "Wavelog API key is required. Please set via --wavelog-key or in the config file."
        )
    if not profile.wavelog_url:
        raise ConfigError("Wavelog URL is required.")

    data_source = profile.data_source.strip().lower()
    if data_source not in DATA_SOURCES:
        raise ConfigError(
            f"Invalid data source specified: '{profile.data_source}'. Must be 'flrig' or 'hamlib'."
        )

    try:
        interval = parse_interval(profile.interval)
    except ValueError as exc:
        raise ConfigError(f"Invalid interval duration format: {exc}") from exc
    if not math.isfinite(interval) or interval <= 0:
        raise ConfigError(f"Polling interval must be positive, got '{profile.interval}'")

    return EffectiveConfig(
        wavelog_url=profile.wavelog_url,
        wavelog_key=profile.wavelog_key,
        radio_name=profile.radio_name,
        data_source=data_source,
        flrig_host=profile.flrig_host,
        flrig_port=profile.flrig_port,
        hamlib_host=profile.hamlib_host,
        hamlib_port=profile.hamlib_port,
        interval=interval,
        log_level=profile.log_level,
        profile_name=name,
    )


def resolve_config(
    store: ProfileStore,
    overrides: ConfigOverrides | None = None,
    requested: str | None = None,
) -> EffectiveConfig:
    """Produce the effective configuration for this run."""
    name, profile = merge_profile(store, overrides, requested)
    return build_effective_config(name, profile)
