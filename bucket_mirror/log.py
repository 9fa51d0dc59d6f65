import logging

from pythonjsonlogger import jsonlogger

JSON_FORMAT = (
    "%(asctime)s %(levelname)s %(message)s %(key)s %(status)s %(duration_sec)s %(size_bytes)s"
)
TEXT_FORMAT = "%(asctime)s %(levelname)s %(message)s"

# SDK loggers that are chatty at INFO
QUIET_LOGGERS = (
    "oss2",
    "boto3",
    "botocore",
    "s3transfer",
    "urllib3",
    "alibabacloud_credentials",
    "alibabacloud_tea_util",
    "apscheduler",
    "tenacity",
)


def setup_logging(level="INFO", fmt="json"):
    """Configure the root logger with a single stdout handler.

    Calling it again replaces the handler instead of stacking a second one.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    handler = logging.StreamHandler()
    if fmt == "json":
        formatter = jsonlogger.JsonFormatter(
            JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    else:
        formatter = logging.Formatter(TEXT_FORMAT)
    handler.setFormatter(formatter)

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
