import logging
import sys


def configure_logging(level="INFO"):
    """Configure root logging to stderr."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)

    # Remove existing handlers to avoid duplicates on reload
    if root_logger.handlers:
        root_logger.handlers.clear()

    root_logger.addHandler(handler)
