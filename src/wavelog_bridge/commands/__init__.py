"""CLI command handlers."""

from .profiles import run_save_profile, run_set_default_profile, run_show
from .run import run_bridge

__all__ = ["run_bridge", "run_save_profile", "run_set_default_profile", "run_show"]
