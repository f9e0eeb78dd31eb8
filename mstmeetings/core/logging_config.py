"""
Logging configuration for the MS Teams Meetings slash-command service.
"""

import logging
import logging.handlers
from pathlib import Path


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LOG_FORMATS = {
    "standard": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(funcName)s - %(message)s",
    # One line per event with the fields log shippers key on
    "service": "%(asctime)s level=%(levelname)s logger=%(name)s pid=%(process)d msg=%(message)s",
}


def setup_logging(
    log_level: str = "INFO", log_file: str = None, log_to_console: bool = True, log_format: str = "standard"
):
    """
    Configure application logging.

    Args:
        log_level: Logging level (one of LOG_LEVELS)
        log_file: Path to log file (None = no file logging)
        log_to_console: Whether to log to console
        log_format: Key of LOG_FORMATS ('standard', 'detailed' or 'service')
    """

    if log_file:
        log_dir = Path(log_file).parent
        log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMATS.get(log_format, LOG_FORMATS["standard"]), datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove existing handlers
    root_logger.handlers.clear()

    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # File handler with rotation
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Third-party noise: urllib3 logs every Mattermost call, msal every cache lookup
    for noisy in ("urllib3", "msal", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.info(f"Logging configured: level={log_level}, format={log_format}, file={log_file}")
