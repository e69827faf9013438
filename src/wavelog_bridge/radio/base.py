"""Shared types for radio control daemon readers."""

from __future__ import annotations

import errno
import math
import socket
from dataclasses import dataclass
from typing import Protocol


class RadioSourceError(RuntimeError):
    """Raised when a radio read fails; no snapshot is produced."""


class RadioConnectionError(RadioSourceError):
    """The control daemon is not reachable (not started, refusing, timing out)."""


class RadioProtocolError(RadioSourceError):
    """The control daemon answered with something we cannot interpret."""


class RadioIOError(RadioSourceError):
    """Any other transport failure while talking to the control daemon."""


_UNREACHABLE_ERRNOS = frozenset(
    {
        errno.ECONNREFUSED,
        errno.ENETUNREACH,
        errno.EHOSTUNREACH,
        errno.ENETDOWN,
        errno.EHOSTDOWN,
        errno.ETIMEDOUT,
    }
)


@dataclass(frozen=True, slots=True)
class RigSnapshot:
    """One fully populated observation of the transceiver state."""

    freq_a: float
    freq_b: float
    mode_a: str
    mode_b: str
    split: int = 0
    power: float = 0.0


class RadioSource(Protocol):
    """Anything able to read a :class:`RigSnapshot` from a control daemon."""

    def get_data(self) -> RigSnapshot:  # pragma: no cover - typing hook
        ...


def classify_os_error(exc: OSError, context: str) -> RadioSourceError:
    """Map a socket-level failure onto the radio failure taxonomy."""
    message = f"{context}: {exc}"
    if isinstance(exc, (ConnectionRefusedError, TimeoutError, socket.gaierror)):
        return RadioConnectionError(message)
    if exc.errno in _UNREACHABLE_ERRNOS:
        return RadioConnectionError(message)
    return RadioIOError(message)


def parse_frequency(raw: object, field: str) -> float:
    """Parse a frequency response into Hz, raising on garbage."""
    try:
        value = float(str(raw).strip())
    except ValueError as exc:
        raise RadioProtocolError(f"Failed to parse {field} '{raw}': {exc}") from exc
    if not math.isfinite(value):
        raise RadioProtocolError(f"Failed to parse {field} '{raw}': not a finite number")
    return value


def parse_power(raw: object) -> float:
    """Parse a power response; non-numeric and non-finite values are protocol errors."""
    return parse_frequency(raw, "power")
