"""Fixed-cadence poll loop: read the radio, forward state changes."""

from __future__ import annotations

import enum
import logging
import time
from typing import Callable

import requests

from wavelog_bridge.radio.base import (
    RadioConnectionError,
    RadioSource,
    RadioSourceError,
    RigSnapshot,
)
from wavelog_bridge.wavelog import WavelogError

LOG = logging.getLogger(__name__)


class PollOutcome(enum.Enum):
    READ_FAILED = "read_failed"
    UNCHANGED = "unchanged"
    FORWARDED = "forwarded"
    FORWARD_FAILED = "forward_failed"


def should_forward(last: RigSnapshot | None, current: RigSnapshot) -> bool:
    """Return True unless ``current`` is exactly the last forwarded state."""
    return last is None or current != last


class PollLoop:
    """Own the last forwarded snapshot and run read/compare/forward cycles."""

    def __init__(
        self,
        source: RadioSource,
        forward: Callable[[RigSnapshot], None],
        interval: float,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._source = source
        self._forward = forward
        self._interval = interval
        self._sleep = sleep
        self.last_forwarded: RigSnapshot | None = None

    def run(self) -> None:
        """Poll forever; the first read happens one interval after start."""
        LOG.info("Starting polling every %ss...", self._interval)
        while True:
            self._sleep(self._interval)
            self.poll_once()

    def poll_once(self) -> PollOutcome:
        try:
            current = self._source.get_data()
        except RadioConnectionError as exc:
            # The control daemon may simply not be running yet.
            LOG.debug("Connection error fetching radio data: %s", exc)
            return PollOutcome.READ_FAILED
        except RadioSourceError as exc:
            LOG.error("Error fetching radio data: %s", exc)
            return PollOutcome.READ_FAILED

        if not should_forward(self.last_forwarded, current):
            LOG.debug("Radio data unchanged. Skipping update.")
            return PollOutcome.UNCHANGED

        LOG.info(
            "Radio state changed; freq: %.0f Hz, mode: %s. Updating Wavelog...",
            current.freq_a,
            current.mode_a,
        )
        try:
            self._forward(current)
        except (WavelogError, requests.RequestException) as exc:
            LOG.error("Error posting to Wavelog: %s", exc)
            return PollOutcome.FORWARD_FAILED

        self.last_forwarded = current
        LOG.debug("Successfully updated Wavelog.")
        return PollOutcome.FORWARDED
