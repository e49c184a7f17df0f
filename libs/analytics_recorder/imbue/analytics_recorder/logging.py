import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger

from imbue.analytics_recorder.primitives import LogLevel


def _dynamic_stderr_sink(message: Any) -> None:
    """Loguru sink that always writes to the current sys.stderr."""
    sys.stderr.write(str(message))
    sys.stderr.flush()


def setup_logging(level: LogLevel | str = LogLevel.WARNING) -> None:
    """Configure loguru logging to stderr with the specified level.

    The sink looks up sys.stderr on every message so that redirected streams
    (e.g. under click's CliRunner) are honored.
    """
    logger.remove()
    logger.add(
        _dynamic_stderr_sink,
        level=str(level).upper(),
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )


@contextmanager
def log_span(message: str, *args: Any, **context: Any) -> Iterator[None]:
    """Log a debug message on entry and a trace message with timing on exit.

    Keyword arguments are passed to logger.contextualize so that all log messages
    within the span include the extra context fields.
    """
    with logger.contextualize(**context):
        logger.debug(message, *args)
        start_time = time.monotonic()
        try:
            yield
        except BaseException:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [failed after {:.5f} sec]", *args, elapsed)
            raise
        else:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [done in {:.5f} sec]", *args, elapsed)
