# recordflow/utils/logger.py
import logging

from recordflow.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def log_info(msg: str):
    logging.getLogger("recordflow").info(msg)


def log_error(msg: str):
    logging.getLogger("recordflow").error(msg)
