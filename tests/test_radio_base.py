"""Tests for snapshot values and failure classification."""

from __future__ import annotations

import dataclasses
import errno
import socket

import pytest

from wavelog_bridge.config import ConfigError
from wavelog_bridge.config_layering import EffectiveConfig
from wavelog_bridge.radio import (
    FlrigSource,
    HamlibSource,
    RadioConnectionError,
    RadioIOError,
    RadioProtocolError,
    RigSnapshot,
    build_radio_source,
    classify_os_error,
)
from wavelog_bridge.radio.base import parse_frequency


def _config(**overrides) -> EffectiveConfig:
    values = dict(
        wavelog_url="https://log.example/index.php",
        wavelog_key="wl123",
        radio_name="FT-891",
        data_source="flrig",
        flrig_host="127.0.0.1",
        flrig_port=12345,
        hamlib_host="127.0.0.1",
        hamlib_port=4532,
        interval=1.0,
        log_level="error",
    )
    values.update(overrides)
    return EffectiveConfig(**values)


@pytest.mark.parametrize(
    "exc",
    [
        ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused"),
        socket.timeout("timed out"),
        socket.gaierror(socket.EAI_NONAME, "Name or service not known"),
        OSError(errno.ENETUNREACH, "Network is unreachable"),
        OSError(errno.EHOSTUNREACH, "No route to host"),
    ],
)
def test_unreachable_errors_are_connection_errors(exc: OSError) -> None:
    assert isinstance(classify_os_error(exc, "dial"), RadioConnectionError)


@pytest.mark.parametrize(
    "exc",
    [
        ConnectionResetError(errno.ECONNRESET, "Connection reset by peer"),
        BrokenPipeError(errno.EPIPE, "Broken pipe"),
        OSError("boom"),
    ],
)
def test_other_os_errors_are_io_errors(exc: OSError) -> None:
    classified = classify_os_error(exc, "read")
    assert isinstance(classified, RadioIOError)
    assert str(classified).startswith("read: ")


def test_parse_frequency_rejects_garbage() -> None:
    assert parse_frequency(" 14074000\n", "frequency") == 14_074_000.0
    with pytest.raises(RadioProtocolError):
        parse_frequency("RPRT -1", "frequency")
    with pytest.raises(RadioProtocolError):
        parse_frequency("nan", "frequency")
    with pytest.raises(RadioProtocolError):
        parse_frequency("-inf", "frequency")


def test_snapshot_is_immutable() -> None:
    snapshot = RigSnapshot(14_074_000.0, 14_074_000.0, "USB", "USB")
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.power = 5.0  # type: ignore[misc]


def test_build_radio_source_selects_variant() -> None:
    assert isinstance(build_radio_source(_config(data_source="flrig")), FlrigSource)
    assert isinstance(build_radio_source(_config(data_source="hamlib")), HamlibSource)


def test_build_radio_source_rejects_unknown_variant() -> None:
    with pytest.raises(ConfigError):
        build_radio_source(_config(data_source="omnirig"))
