"""
Debug tracing of the parse loop.

The parser reports every dispatch step (token popped, pack produced, key
matched, counters) to the "cmdopts" logger at DEBUG level. The logger is
silent until a handler is attached; enable() attaches a rich handler writing
to stderr, which is usually all a host needs while debugging its grammar.

    >>> from cmdopts import tracing
    >>> tracing.enable()
    >>> parse_arguments(["-abc"], group)   # trace lines appear on stderr
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("cmdopts")
logger.addHandler(logging.NullHandler())


def enable(level=logging.DEBUG, /, *, console=None):
    """
    attach a RichHandler to the "cmdopts" logger and return the logger.

    parameters
    - level: logging level for the logger and its handler.
    - console: rich Console to write to (stderr console by default).

    calling enable() again replaces the handler installed by a previous call.
    """
    disable()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    handler.setLevel(level)
    handler._cmdopts = True  # NOQA: marks handlers owned by enable()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def disable():
    """
    remove the handler installed by enable() and restore propagation.
    """
    for handler in list(logger.handlers):
        if getattr(handler, "_cmdopts", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


__all__ = (
    "logger",
    "enable",
    "disable",
)
