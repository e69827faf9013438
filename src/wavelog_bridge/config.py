"""Configuration profiles: loading, persistence and keyring helpers."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import tomli_w  # type: ignore[import]

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

try:  # Optional dependency for secure credential storage
    import keyring as _keyring  # type: ignore[import]
    from keyring.errors import KeyringError  # type: ignore[import]
except ImportError:  # pragma: no cover - keyring not installed
    _keyring = None
    KeyringError = Exception

CONFIG_VERSION = 1
CONFIG_ENV_VAR = "WAVELOG_BRIDGE_CONFIG_PATH"
CONFIG_DIR_NAME = "wavelog-bridge"
CONFIG_FILENAME = "config.toml"
KEYRING_SERVICE = "wavelog-bridge"
KEYRING_SENTINEL = "__KEYRING__"
FALLBACK_PROFILE_NAME = "default"
PLACEHOLDER_API_KEY = "YOUR_API_KEY"


class ConfigError(ValueError):
    """Raised when the effective configuration cannot be used to run."""


def _xdg_path(env_var: str, default: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return default


def get_config_dir() -> Path:
    """Return the directory containing configuration files."""
    default = Path.home() / ".config"
    return _xdg_path("XDG_CONFIG_HOME", default) / CONFIG_DIR_NAME


def get_data_dir() -> Path:
    """Return the directory for runtime data/log files."""
    default = Path.home() / ".local" / "share"
    return _xdg_path("XDG_DATA_HOME", default) / CONFIG_DIR_NAME


def get_logs_dir() -> Path:
    return get_data_dir() / "logs"


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Resolve the configuration file path, honouring overrides."""
    if path is not None:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / CONFIG_FILENAME


@dataclass(frozen=True, slots=True)
class ProfileConfig:
    """One named set of bridge settings as stored on disk."""

    wavelog_url: str = "http://localhost/index.php"
    wavelog_key: str = PLACEHOLDER_API_KEY
    radio_name: str = "RIG"
    flrig_host: str = "127.0.0.1"
    flrig_port: int = 12345
    hamlib_host: str = "127.0.0.1"
    hamlib_port: int = 4532
    interval: str = "1s"
    data_source: str = "flrig"
    log_level: str = "error"
    key_in_keyring: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert the profile to a TOML-serialisable dictionary."""
        data = {item.name: getattr(self, item.name) for item in fields(self)}
        data.pop("key_in_keyring")
        if self.key_in_keyring:
            data["wavelog_key"] = KEYRING_SENTINEL
        return data

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], *, base: ProfileConfig | None = None
    ) -> ProfileConfig:
        """Build a profile from stored data; absent keys keep ``base`` values."""
        base = base or DEFAULT_PROFILE
        if not isinstance(data, dict):
            raise ValueError("Profile entry must be a table")
        try:
            values: dict[str, Any] = {
                "wavelog_url": str(data.get("wavelog_url", base.wavelog_url)),
                "wavelog_key": str(data.get("wavelog_key", base.wavelog_key)),
                "radio_name": str(data.get("radio_name", base.radio_name)),
                "flrig_host": str(data.get("flrig_host", base.flrig_host)),
                "flrig_port": int(data.get("flrig_port", base.flrig_port)),
                "hamlib_host": str(data.get("hamlib_host", base.hamlib_host)),
                "hamlib_port": int(data.get("hamlib_port", base.hamlib_port)),
                "interval": str(data.get("interval", base.interval)),
                "data_source": str(data.get("data_source", base.data_source)),
                "log_level": str(data.get("log_level", base.log_level)),
            }
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid profile entry: {exc}") from exc
        return cls(**values)


DEFAULT_PROFILE = ProfileConfig()


@dataclass(slots=True)
class ProfileStore:
    """All stored profiles plus the name of the one used by default."""

    default_profile: str = FALLBACK_PROFILE_NAME
    profiles: dict[str, ProfileConfig] = field(default_factory=dict)

    def get(self, name: str) -> ProfileConfig | None:
        return self.profiles.get(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": CONFIG_VERSION,
            "default_profile": self.default_profile,
            "profiles": {
                name: profile.to_dict() for name, profile in self.profiles.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProfileStore:
        """Construct from a dictionary (typically parsed from TOML)."""
        version = data.get("version", CONFIG_VERSION)
        if version != CONFIG_VERSION:
            raise ValueError(f"Unsupported config version: {version}")

        raw_profiles = data.get("profiles", {})
        if not isinstance(raw_profiles, dict):
            raise ValueError("'profiles' must be a table of named profiles")

        profiles: dict[str, ProfileConfig] = {}
        for name, entry in raw_profiles.items():
            profile = ProfileConfig.from_dict(entry)
            if profile.wavelog_key == KEYRING_SENTINEL:
                profile = replace(
                    profile,
                    wavelog_key=_retrieve_key_from_keyring(name),
                    key_in_keyring=True,
                )
            profiles[str(name)] = profile

        return cls(
            default_profile=str(data.get("default_profile", FALLBACK_PROFILE_NAME)),
            profiles=profiles,
        )


def load_profile_store(path: str | Path | None = None) -> ProfileStore:
    """Load persisted profiles; raises ``FileNotFoundError`` if absent."""
    config_path = resolve_config_path(path)
    with config_path.open("rb") as handle:
        try:
            data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Failed to parse {config_path}: {exc}") from exc
    return ProfileStore.from_dict(data)


def save_profile_store(store: ProfileStore, path: str | Path | None = None) -> Path:
    """Persist profiles to disk and return the file path."""
    for name, profile in store.profiles.items():
        if profile.key_in_keyring:
            _store_key_in_keyring(name, profile.wavelog_key)
    config_path = resolve_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    toml_text = tomli_w.dumps(store.to_dict())
    config_path.write_text(toml_text, encoding="utf-8")
    try:
        os.chmod(config_path, stat.S_IRUSR | stat.S_IWUSR)
    except PermissionError:  # pragma: no cover - some FS disallow chmod
        pass
    return config_path


def save_profile(store: ProfileStore, name: str, profile: ProfileConfig) -> None:
    """Record ``profile`` under ``name`` in the store."""
    if not name:
        raise ValueError("A profile name is required")
    store.profiles[name] = profile


def set_default_profile(store: ProfileStore, name: str) -> None:
    """Make ``name`` the profile used when none is requested."""
    if name not in store.profiles:
        raise ValueError(
            f"Cannot set default profile. Profile '{name}' does not exist in the configuration file."
        )
    store.default_profile = name


def config_summary(profile: ProfileConfig, profile_name: str | None = None) -> str:
    """Generate a human-readable summary of key settings."""
    key = profile.wavelog_key
    if key and key != PLACEHOLDER_API_KEY:
        key = f"{key[:3]}***" if len(key) > 6 else "***"
    if profile.key_in_keyring:
        key += " (keyring)"
    lines = []
    if profile_name is not None:
        lines.append(f"  Profile  : {profile_name}")
    lines.extend(
        [
            f"  Wavelog  : {profile.wavelog_url}",
            f"  API key  : {key or 'not set'}",
            f"  Radio    : {profile.radio_name}",
            f"  Source   : {profile.data_source}",
            f"  flrig    : {profile.flrig_host}:{profile.flrig_port}",
            f"  Hamlib   : {profile.hamlib_host}:{profile.hamlib_port}",
            f"  Interval : {profile.interval}",
            f"  Logging  : {profile.log_level}",
        ]
    )
    return "\n".join(lines)


def keyring_supported() -> bool:
    """Return True if a keyring backend is available."""
    return _keyring is not None


def _store_key_in_keyring(profile_name: str, key: str) -> None:
    if _keyring is None:
        raise ValueError("Keyring backend not available; install 'keyring' package")
    try:
        _keyring.set_password(KEYRING_SERVICE, profile_name, key)
    except KeyringError as exc:  # pragma: no cover - backend dependent
        raise ValueError(f"Failed to store API key in keyring: {exc}") from exc


def _retrieve_key_from_keyring(profile_name: str) -> str:
    if _keyring is None:
        raise ValueError("Keyring backend not available for stored API key")
    try:
        value = _keyring.get_password(KEYRING_SERVICE, profile_name)
    except KeyringError as exc:  # pragma: no cover - backend dependent
        raise ValueError(f"Failed to read API key from keyring: {exc}") from exc
    if not value:
        raise ValueError(
            f"No Wavelog API key stored in keyring for profile '{profile_name}'"
        )
    return value
