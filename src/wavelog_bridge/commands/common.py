"""Helpers shared by the CLI command handlers."""

from __future__ import annotations

import logging
from argparse import Namespace
from pathlib import Path

from wavelog_bridge import config as config_module
from wavelog_bridge.config import ProfileStore
from wavelog_bridge.config_layering import ConfigOverrides

LOG = logging.getLogger(__name__)


def load_store(config_path: Path, *, strict: bool = False) -> ProfileStore:
    """Load stored profiles, falling back to an empty store.

    With ``strict``, a file that exists but cannot be loaded raises instead.
    """
    try:
        return config_module.load_profile_store(config_path)
    except FileNotFoundError:
        return ProfileStore()
    except (OSError, ValueError) as exc:
        if strict:
            raise
        LOG.error(
            "Configuration file found but failed to load (%s). Starting with defaults. Error: %s",
            config_path,
            exc,
        )
        return ProfileStore()


def overrides_from_args(args: Namespace) -> ConfigOverrides:
    """Collect the setting flags the user actually passed."""
    return ConfigOverrides(
        wavelog_url=getattr(args, "wavelog_url", None),
        wavelog_key=getattr(args, "wavelog_key", None),
        radio_name=getattr(args, "radio_name", None),
        flrig_host=getattr(args, "flrig_host", None),
        flrig_port=getattr(args, "flrig_port", None),
        hamlib_host=getattr(args, "hamlib_host", None),
        hamlib_port=getattr(args, "hamlib_port", None),
        interval=getattr(args, "interval", None),
        data_source=getattr(args, "data_source", None),
        log_level=getattr(args, "log_level", None),
    )
