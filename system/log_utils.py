import logging
import os

LOGGER_NAME = "washer"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(threadName)s %(message)s"

_logger = logging.getLogger(LOGGER_NAME)

if not _logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _logger.addHandler(_handler)
    _logger.setLevel(os.environ.get("WASHER_LOG_LEVEL", "INFO").upper())


def _format(msg: str, fields: dict) -> str:
    if not fields:
        return msg
    extra = " ".join(f"{k}={v}" for k, v in fields.items())
    return f"{msg} {extra}"


def debug(msg: str, **fields) -> None:
    _logger.debug(_format(msg, fields))


def info(msg: str, **fields) -> None:
    _logger.info(_format(msg, fields))


def warn(msg: str, **fields) -> None:
    _logger.warning(_format(msg, fields))


def error(msg: str, **fields) -> None:
    _logger.error(_format(msg, fields))
