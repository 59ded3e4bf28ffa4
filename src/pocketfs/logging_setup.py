"""Rich console logging for pocketfs."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "pocketfs-rich"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a RichHandler to the ``pocketfs`` logger.

    Safe to call more than once; the handler is only installed the first time
    and later calls just adjust the level.
    """
    logger = logging.getLogger("pocketfs")
    logger.setLevel(level.upper())

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
