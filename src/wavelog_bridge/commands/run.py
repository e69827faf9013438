"""Runtime command: poll the radio and keep Wavelog up to date."""

from __future__ import annotations

import functools
import logging
from argparse import Namespace

from wavelog_bridge import config as config_module
from wavelog_bridge.config import ConfigError
from wavelog_bridge.config_layering import resolve_config
from wavelog_bridge.logsetup import configure_logging
from wavelog_bridge.poller import PollLoop
from wavelog_bridge.radio import build_radio_source
from wavelog_bridge.wavelog import WavelogClient

from .common import load_store, overrides_from_args

LOG = logging.getLogger(__name__)


def run_bridge(args: Namespace) -> int:
    """Resolve configuration, then poll until interrupted."""
    config_path = config_module.resolve_config_path(getattr(args, "config", None))
    store = load_store(config_path)

    try:
        config = resolve_config(
            store, overrides_from_args(args), getattr(args, "profile", None)
        )
        source = build_radio_source(config)
    except ConfigError as exc:
        print(f"Config invalid: {exc}")
        return 1

    if config.log_level != getattr(args, "log_level", None):
        # main() already configured logging from the command-line flag.
        configure_logging(config.log_level)

    if config.data_source == "flrig":
        endpoint = f"{config.flrig_host}:{config.flrig_port}"
    else:
        endpoint = f"{config.hamlib_host}:{config.hamlib_port}"
    LOG.info(
        "Using %s client at %s (Profile: %s)",
        config.data_source,
        endpoint,
        config.profile_name,
    )

    client = WavelogClient(config.wavelog_url)
    loop = PollLoop(source, functools.partial(client.forward, config), config.interval)
    try:
        loop.run()
    except KeyboardInterrupt:
        LOG.info("Interrupted; stopping.")
        return 0
    finally:
        client.close()
    return 0  # pragma: no cover - run() never returns
