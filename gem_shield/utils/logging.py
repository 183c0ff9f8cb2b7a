"""Logging utilities for GemShield."""

import logging
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ROOT_LOGGER = "gem_shield"

LOG_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "critical": "red bold",
    "debug": "dim",
})


class GemShieldLogger:
    """Thin wrapper over a stdlib logger that renders through rich.

    Every instance logs under the ``gem_shield`` namespace, whose single
    rich handler writes to stderr so that report output on stdout stays
    machine readable.
    """

    def __init__(self, name: str) -> None:
        self.logger = logging.getLogger(f"{ROOT_LOGGER}.{name}")
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Attach the rich handler to the package logger once."""
        package_logger = logging.getLogger(ROOT_LOGGER)
        if any(isinstance(h, RichHandler) for h in package_logger.handlers):
            return

        handler = RichHandler(
            console=Console(stderr=True, theme=LOG_THEME),
            show_time=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%X]"))

        package_logger.addHandler(handler)
        package_logger.propagate = False

    def info(self, msg: str, **kwargs: Any) -> None:
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self.logger.debug(msg, extra=kwargs)


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Configure GemShield logging.

    Args:
        level: Logging level
        log_file: Optional log file path
        verbose: Enable debug logging
    """
    if verbose:
        level = logging.DEBUG

    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(level)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        package_logger.addHandler(file_handler)


def get_logger(name: str) -> GemShieldLogger:
    """Get a GemShield logger instance.

    Args:
        name: Logger name, namespaced under ``gem_shield``

    Returns:
        Configured logger instance
    """
    return GemShieldLogger(name)
