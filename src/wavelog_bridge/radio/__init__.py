"""Radio control daemon readers and source selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wavelog_bridge.config import ConfigError

from .base import (
    RadioConnectionError,
    RadioIOError,
    RadioProtocolError,
    RadioSource,
    RadioSourceError,
    RigSnapshot,
    classify_os_error,
)
from .flrig import FlrigConfig, FlrigSource
from .hamlib import HamlibConfig, HamlibSource

if TYPE_CHECKING:  # pragma: no cover
    from wavelog_bridge.config_layering import EffectiveConfig


def build_radio_source(config: "EffectiveConfig") -> RadioSource:
    """Instantiate the reader selected by ``config.data_source``."""
    source = config.data_source.lower()
    if source == "flrig":
        return FlrigSource(FlrigConfig(host=config.flrig_host, port=config.flrig_port))
    if source == "hamlib":
        return HamlibSource(
            HamlibConfig(host=config.hamlib_host, port=config.hamlib_port)
        )
    raise ConfigError(
        f"Invalid data source specified: '{config.data_source}'. Must be 'flrig' or 'hamlib'."
    )


__all__ = [
    "FlrigConfig",
    "FlrigSource",
    "HamlibConfig",
    "HamlibSource",
    "RadioConnectionError",
    "RadioIOError",
    "RadioProtocolError",
    "RadioSource",
    "RadioSourceError",
    "RigSnapshot",
    "build_radio_source",
    "classify_os_error",
]
