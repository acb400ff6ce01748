"""
Logging utilities for argvreader.

Stdlib logging under the "argvreader" namespace, rendered through rich.

The library never configures logging by itself: the package logger only has
a NullHandler until a host calls configure_logging().
"""
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "argvreader"


def get_logger(name=None):
    """
    return the package logger, or the "argvreader.<name>" child when given.
    """
    if name is None:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger("%s.%s" % (_LOGGER_NAME, name))


def configure_logging(verbosity=0, *, use_color=None):
    """
    install a single RichHandler (stderr) on the package logger.

    - verbosity 0 logs INFO and above; any higher verbosity logs DEBUG, which
      traces every classification the reader applies.
    - use_color None means "color when stderr is a terminal".
    - handlers installed by a previous call are replaced.
    """
    logger = get_logger()
    logger.setLevel(logging.DEBUG if verbosity >= 1 else logging.INFO)

    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    if use_color is None:
        use_color = sys.stderr.isatty()

    handler = RichHandler(
        console=Console(stderr=True, no_color=not use_color, highlight=use_color),
        show_time=False,
        show_path=verbosity >= 2,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = (
    "get_logger",
    "configure_logging",
)
