"""flrig reader speaking XML-RPC over HTTP."""

from __future__ import annotations

import http.client
import logging
import xmlrpc.client
from dataclasses import dataclass
from typing import Any
from xml.parsers.expat import ExpatError

from .base import (
    RadioProtocolError,
    RadioSourceError,
    RigSnapshot,
    classify_os_error,
    parse_frequency,
    parse_power,
)

LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class FlrigConfig:
    host: str = "127.0.0.1"
    port: int = 12345
    timeout: float = 2.0


class _TimeoutTransport(xmlrpc.client.Transport):
    """Plain HTTP transport that bounds connect and read time."""

    def __init__(self, timeout: float) -> None:
        super().__init__()
        self._timeout = timeout

    def make_connection(self, host):  # type: ignore[no-untyped-def]
        connection = super().make_connection(host)
        connection.timeout = self._timeout
        return connection


class FlrigSource:
    """Read rig state from flrig, opening a fresh client for every read."""

    def __init__(self, config: FlrigConfig | None = None) -> None:
        self._config = config or FlrigConfig()

    @property
    def url(self) -> str:
        return f"http://{self._config.host}:{self._config.port}/"

    def get_data(self) -> RigSnapshot:
        transport = _TimeoutTransport(self._config.timeout)
        with xmlrpc.client.ServerProxy(self.url, transport=transport) as proxy:
            vfo_a = self._call(proxy, "rig.get_vfo")
            freq_a = parse_frequency(vfo_a, "vfo frequency")
            mode_a = str(self._call(proxy, "rig.get_mode"))

            try:
                power = parse_power(self._call(proxy, "rig.get_power"))
            except RadioSourceError as exc:
                LOG.debug("rig.get_power failed (flrig): %s. Sending 0 power.", exc)
                power = 0.0

            try:
                split = int(self._call(proxy, "rig.get_split"))
            except (RadioSourceError, TypeError, ValueError) as exc:
                LOG.warning("rig.get_split failed (flrig): %s. Sending split=0.", exc)
                split = 0

            try:
                freq_b = parse_frequency(self._call(proxy, "rig.get_vfoB"), "vfoB frequency")
            except RadioSourceError as exc:
                LOG.debug("rig.get_vfoB failed (flrig): %s. Sending vfoA %s.", exc, vfo_a)
                freq_b = freq_a

            try:
                mode_b = str(self._call(proxy, "rig.get_modeB"))
            except RadioSourceError as exc:
                LOG.debug("rig.get_modeB failed (flrig): %s. Sending mode A.", exc)
                mode_b = mode_a

        snapshot = RigSnapshot(
            freq_a=freq_a,
            freq_b=freq_b,
            mode_a=mode_a,
            mode_b=mode_b,
            split=split,
            power=power,
        )
        LOG.debug("Got data %r", snapshot)
        return snapshot

    @staticmethod
    def _call(proxy: xmlrpc.client.ServerProxy, method: str) -> Any:
        try:
            return getattr(proxy, method)()
        except xmlrpc.client.Fault as exc:
            raise RadioProtocolError(
                f"call failed to {method}: fault {exc.faultCode} {exc.faultString}"
            ) from exc
        except OSError as exc:
            raise classify_os_error(exc, f"call failed to {method}") from exc
        except (xmlrpc.client.Error, ExpatError, http.client.HTTPException) as exc:
            raise RadioProtocolError(f"call failed to {method}: {exc}") from exc
