"""Wavelog radio-status API client."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from wavelog_bridge import __version__
from wavelog_bridge.config_layering import EffectiveConfig
from wavelog_bridge.radio.base import RigSnapshot

LOG = logging.getLogger(__name__)

RADIO_ENDPOINT = "/api/radio"
# requests applies the read timeout per socket read, not to the whole response.
CONNECT_TIMEOUT_S = 5
READ_TIMEOUT_S = 10


class WavelogError(RuntimeError):
    """Raised when Wavelog rejects or never receives a radio update."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def build_payload(config: EffectiveConfig, snapshot: RigSnapshot) -> dict[str, Any]:
    """Translate a snapshot into the ``/api/radio`` JSON body.

    With split engaged VFO B is the transmit side and is reported in the
    primary fields; VFO A becomes the receive side.
    """
    payload: dict[str, Any] = {
        "key": config.wavelog_key,
        "radio": config.radio_name,
        "power": snapshot.power,
        "frequency": int(snapshot.freq_a),
        "mode": snapshot.mode_a,
    }
    if snapshot.split != 0:
        payload["frequency"] = int(snapshot.freq_b)
        payload["mode"] = snapshot.mode_b
        payload["frequency_rx"] = int(snapshot.freq_a)
        payload["mode_rx"] = snapshot.mode_a
    return payload


class WavelogClient:
    """Post radio status updates to one Wavelog instance."""

    def __init__(self, base_url: str, session: object | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.url = self.base_url + RADIO_ENDPOINT
        self._timeout = (CONNECT_TIMEOUT_S, READ_TIMEOUT_S)
        self._session: Any = session or requests.Session()
        self._session.headers.setdefault("User-Agent", f"wavelog-bridge/{__version__}")

    def post_radio(self, payload: dict[str, Any]) -> None:
        """Send one update; raises :class:`WavelogError` unless HTTP 200."""
        body = json.dumps(payload)
        LOG.info("Sending to %s: %s", self.url, json.dumps({**payload, "key": "***"}))
        try:
            response = self._session.post(
                self.url,
                data=body,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise WavelogError(f"Failed to execute HTTP request: {exc}") from exc

        if response.status_code != 200:
            text = response.text or ""
            raise WavelogError(
                f"Wavelog API returned non-200 status code: {response.status_code}. Body: {text}",
                status_code=response.status_code,
                body=text,
            )
        LOG.debug("Wavelog response: %s", (response.text or "")[:200])

    def forward(self, config: EffectiveConfig, snapshot: RigSnapshot) -> None:
        self.post_radio(build_payload(config, snapshot))

    def close(self) -> None:
        self._session.close()
