"""Settings helpers to centralize configuration access."""
from __future__ import annotations

from typing import Optional

from finbench.settings.config import Config


def load_settings(debug_override: Optional[bool] = None, *, max_workers: Optional[int] = None) -> Config:
    """Return a Config from the environment with optional runtime overrides applied."""
    config = Config.from_env()
    if debug_override is not None:
        config.debug = debug_override
    if max_workers is not None:
        config.max_workers = max(1, max_workers)
    return config
