"""Rich-backed logging for the CLI and the analysis workflow."""
from __future__ import annotations

import logging
from typing import Optional

from rich.logging import RichHandler

_LOGGER_CONFIGURED = False


def configure_logging(debug: bool = False, *, level: Optional[int] = None) -> None:
    """Route the engine's module loggers through a single Rich handler (idempotent)."""
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    engine_level = level or (logging.DEBUG if debug else logging.WARNING)
    handler = RichHandler(rich_tracebacks=debug, show_path=debug, markup=False)
    logging.basicConfig(level=engine_level, format="%(threadName)s %(message)s", datefmt="%H:%M:%S", handlers=[handler])
    logging.getLogger("finbench").setLevel(engine_level)
    # Graph internals are chatty at DEBUG.
    logging.getLogger("langgraph").setLevel(max(engine_level, logging.INFO))
    _LOGGER_CONFIGURED = True
