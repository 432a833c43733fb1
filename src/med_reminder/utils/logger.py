# src/med_reminder/utils/logger.py

"""
Process-wide logging for the API, the Prefect flows and the scripts.
Importing this module configures the root logger once; modules then use
``logging.getLogger(__name__)``.
"""

import logging
import os
import sys

LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s"

# HTTP and Redis clients log every request at INFO
QUIET_LOGGERS = ("redis", "urllib3")
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(level: int = LOG_LEVEL) -> logging.Logger:
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
        uvicorn_logger.setLevel(max(level, logging.INFO) if name.endswith("access") else level)

    return logging.getLogger("med_reminder")


logger = configure_logging()
logger.debug(f"Logging configured at {LOG_LEVEL_NAME}.")
