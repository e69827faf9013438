"""Tests for profile persistence helpers."""

from __future__ import annotations

import os
import stat
import sys

import pytest

from wavelog_bridge import config as config_module
from wavelog_bridge.config import (
    DEFAULT_PROFILE,
    KEYRING_SENTINEL,
    ProfileConfig,
    ProfileStore,
)


class FakeKeyring:
    def __init__(self) -> None:
        self.secrets: dict[tuple[str, str], str] = {}

    def set_password(self, service: str, username: str, password: str) -> None:
        self.secrets[(service, username)] = password

    def get_password(self, service: str, username: str) -> str | None:
        return self.secrets.get((service, username))

    def delete_password(self, service: str, username: str) -> None:
        self.secrets.pop((service, username), None)


def test_save_and_load_roundtrip(tmp_path) -> None:
    store = ProfileStore(
        default_profile="shack",
        profiles={
            "shack": ProfileConfig(
                wavelog_url="https://log.example/index.php",
                wavelog_key="wl123",
                radio_name="FT-891",
                data_source="hamlib",
                hamlib_port=4533,
                interval="1500ms",
                log_level="info",
            ),
            "portable": ProfileConfig(radio_name="IC-705", flrig_port=12346),
        },
    )

    path = config_module.save_profile_store(store, tmp_path / "config.toml")
    loaded = config_module.load_profile_store(path)

    assert loaded == store


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions only")
def test_saved_file_is_private(tmp_path) -> None:
    path = config_module.save_profile_store(ProfileStore(), tmp_path / "nested" / "config.toml")

    assert path.exists()
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


def test_partial_profile_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        'version = 1\ndefault_profile = "shack"\n\n[profiles.shack]\nwavelog_key = "wl123"\n',
        encoding="utf-8",
    )

    store = config_module.load_profile_store(path)

    profile = store.get("shack")
    assert profile is not None
    assert profile.wavelog_key == "wl123"
    assert profile.radio_name == DEFAULT_PROFILE.radio_name
    assert profile.flrig_port == DEFAULT_PROFILE.flrig_port


def test_load_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        config_module.load_profile_store(tmp_path / "absent.toml")


@pytest.mark.parametrize(
    "text",
    [
        "this is = = not toml",
        "version = 2\n",
        'version = 1\n[profiles.shack]\nflrig_port = "abc"\n',
        'version = 1\nprofiles = "nope"\n',
    ],
)
def test_load_invalid_file_raises_value_error(tmp_path, text: str) -> None:
    path = tmp_path / "config.toml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ValueError):
        config_module.load_profile_store(path)


def test_resolve_config_path_env_override(monkeypatch, tmp_path) -> None:
    path = tmp_path / "custom.toml"
    monkeypatch.setenv(config_module.CONFIG_ENV_VAR, str(path))

    assert config_module.resolve_config_path() == path


def test_resolve_config_path_defaults_to_xdg(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    resolved = config_module.resolve_config_path()

    assert resolved == tmp_path / "wavelog-bridge" / "config.toml"


def test_save_profile_requires_name() -> None:
    with pytest.raises(ValueError):
        config_module.save_profile(ProfileStore(), "", DEFAULT_PROFILE)


def test_set_default_profile_requires_existing_profile() -> None:
    store = ProfileStore(profiles={"shack": DEFAULT_PROFILE})

    with pytest.raises(ValueError):
        config_module.set_default_profile(store, "portable")

    config_module.set_default_profile(store, "shack")
    assert store.default_profile == "shack"


def test_key_in_keyring_is_not_written_to_file(monkeypatch, tmp_path) -> None:
    fake = FakeKeyring()
    monkeypatch.setattr(config_module, "_keyring", fake)
    store = ProfileStore(
        profiles={"shack": ProfileConfig(wavelog_key="secret-key", key_in_keyring=True)}
    )

    path = config_module.save_profile_store(store, tmp_path / "config.toml")

    text = path.read_text(encoding="utf-8")
    assert "secret-key" not in text
    assert KEYRING_SENTINEL in text
    assert fake.secrets[(config_module.KEYRING_SERVICE, "shack")] == "secret-key"

    loaded = config_module.load_profile_store(path)
    assert loaded.profiles["shack"].wavelog_key == "secret-key"
    assert loaded.profiles["shack"].key_in_keyring is True


def test_keyring_sentinel_without_backend_raises(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(config_module, "_keyring", None)
    path = tmp_path / "config.toml"
    path.write_text(
        f'version = 1\n[profiles.shack]\nwavelog_key = "{KEYRING_SENTINEL}"\n',
        encoding="utf-8",
    )

    with pytest.raises(ValueError):
        config_module.load_profile_store(path)


def test_config_summary_masks_key() -> None:
    summary = config_module.config_summary(
        ProfileConfig(wavelog_key="abcdef123456", radio_name="FT-891"), "shack"
    )

    assert "abcdef123456" not in summary
    assert "abc***" in summary
    assert "FT-891" in summary
    assert "shack" in summary
