"""Profile management commands: save, set default, show."""

from __future__ import annotations

from argparse import Namespace
from dataclasses import replace
from pathlib import Path

from wavelog_bridge import config as config_module
from wavelog_bridge.config import ProfileStore
from wavelog_bridge.config_layering import merge_profile

from .common import load_store, overrides_from_args


def _load_existing(config_path: Path) -> ProfileStore | None:
    try:
        return load_store(config_path, strict=True)
    except (OSError, ValueError) as exc:
        print(f"Failed to load configuration file {config_path}; leaving it unchanged: {exc}")
        return None


def run_save_profile(args: Namespace) -> int:
    """Store the merged settings of this invocation under a profile name."""
    name = getattr(args, "name", "") or ""
    config_path = config_module.resolve_config_path(getattr(args, "config", None))
    store = _load_existing(config_path)
    if store is None:
        return 1
    _, profile = merge_profile(
        store, overrides_from_args(args), getattr(args, "profile", None)
    )

    if getattr(args, "key_in_keyring", False):
        if not config_module.keyring_supported():
            print("Keyring backend not available; install 'keyring' package")
            return 1
        profile = replace(profile, key_in_keyring=True)

    try:
        config_module.save_profile(store, name, profile)
        saved_path = config_module.save_profile_store(store, config_path)
    except (OSError, ValueError) as exc:
        print(f"Failed to save configuration file: {exc}")
        return 1

    print(f"Configuration saved successfully to profile '{name}' in {saved_path}")
    return 0


def run_set_default_profile(args: Namespace) -> int:
    """Record which stored profile is used when none is requested."""
    name = getattr(args, "name", "") or ""
    config_path = config_module.resolve_config_path(getattr(args, "config", None))
    store = _load_existing(config_path)
    if store is None:
        return 1

    try:
        config_module.set_default_profile(store, name)
        config_module.save_profile_store(store, config_path)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}")
        return 1

    print(f"Default profile successfully set to '{name}'.")
    return 0


def run_show(args: Namespace) -> int:
    """Print the merged configuration for this invocation."""
    config_path = config_module.resolve_config_path(getattr(args, "config", None))
    store = load_store(config_path)
    name, profile = merge_profile(
        store, overrides_from_args(args), getattr(args, "profile", None)
    )
    stored = ", ".join(sorted(store.profiles)) or "none"
    print(f"Configuration file: {config_path}")
    print(f"Stored profiles  : {stored} (default: {store.default_profile})")
    print(config_module.config_summary(profile, name))
    return 0
