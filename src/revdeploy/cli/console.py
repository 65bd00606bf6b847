"""Console output for the revdeploy CLI."""

from __future__ import annotations

import logging

import click


class ClickEchoHandler(logging.Handler):
    """Logging handler writing records through click.echo.

    Warnings and errors go to stderr.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            click.echo(msg, err=record.levelno >= logging.WARNING)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Route the revdeploy logger to the console.

    Args:
        verbose: Show per-file DEBUG messages.

    Returns:
        The configured "revdeploy" logger.
    """
    log = logging.getLogger("revdeploy")
    for handler in log.handlers[:]:
        log.removeHandler(handler)
    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    log.addHandler(handler)
    log.setLevel(logging.DEBUG if verbose else logging.INFO)
    log.propagate = False
    return log
