"""Logging setup shared by the API and the validation workers."""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Route all log records to stdout with a timestamped format."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    # uvicorn access logs are noisy under polling clients
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
