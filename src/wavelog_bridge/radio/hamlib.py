"""Hamlib ``rigctld`` reader speaking the line-oriented TCP protocol."""

from __future__ import annotations

import io
import logging
import socket
from dataclasses import dataclass

from .base import (
    RadioIOError,
    RadioProtocolError,
    RadioSourceError,
    RigSnapshot,
    classify_os_error,
    parse_frequency,
    parse_power,
)

LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class HamlibConfig:
    host: str = "127.0.0.1"
    port: int = 4532
    timeout: float = 2.0


class HamlibSource:
    """Read rig state from rigctld over a short-lived TCP connection.

    Only VFO A is queried: split is always reported off and VFO B mirrors
    VFO A.
    """

    def __init__(self, config: HamlibConfig | None = None) -> None:
        self._config = config or HamlibConfig()

    def get_data(self) -> RigSnapshot:
        address = (self._config.host, self._config.port)
        try:
            sock = socket.create_connection(address, timeout=self._config.timeout)
        except OSError as exc:
            raise classify_os_error(
                exc, f"hamlib connection error ({address[0]}:{address[1]})"
            ) from exc

        with sock, sock.makefile("rb") as reader:
            sock.settimeout(self._config.timeout)

            freq_text = self._query(sock, reader, "f")
            freq = parse_frequency(freq_text, "frequency")

            # e.g. "USB 2400": mode then passband
            mode_parts = self._query(sock, reader, "m").split()
            if not mode_parts:
                raise RadioProtocolError("invalid mode response format from hamlib: ''")
            mode = mode_parts[0]

            try:
                power = parse_power(self._query(sock, reader, "P"))
            except RadioSourceError as exc:
                LOG.warning("Failed to read power from hamlib: %s. Sending 0.", exc)
                power = 0.0

        return RigSnapshot(
            freq_a=freq,
            freq_b=freq,
            mode_a=mode,
            mode_b=mode,
            split=0,
            power=power,
        )

    @staticmethod
    def _query(sock: socket.socket, reader: io.BufferedReader, command: str) -> str:
        """Send one command and return its single-line response."""
        try:
            sock.sendall(f"{command}\n".encode("ascii"))
            line = reader.readline()
        except OSError as exc:
            raise classify_os_error(exc, f"hamlib '{command}' command failed") from exc
        if not line:
            raise RadioIOError(f"hamlib closed the connection during '{command}'")
        return line.decode("ascii", errors="replace").strip()
