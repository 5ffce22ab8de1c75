"""Standard Python logging configuration."""
from __future__ import annotations

import logging
import sys

DEFAULT_LEVEL = logging.INFO

def setup_logging(level: str | int = DEFAULT_LEVEL) -> None:
    """Configure standard Python logging.

    Call **exactly once** at startup (app factory or CLI entrypoint).
    """
    if getattr(setup_logging, "_configured", False):  # type: ignore[attr-defined]
        return

    # Create a standard formatter with gunicorn-like brackets
    formatter = logging.Formatter(
        fmt='[%(asctime)s] [%(process)d] [%(levelname)s] %(name)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S %z'
    )

    # Log to stderr so summaries printed on stdout stay clean
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Route uvicorn loggers through the root handler
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(level)

    setup_logging._configured = True  # type: ignore[attr-defined]
