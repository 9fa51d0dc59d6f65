#!/usr/bin/env python3
import logging
import os
import sys

from .config import load_config
from .cycle import SyncCycle
from .errors import ConfigError
from .log import setup_logging
from .reporting import create_reporter
from .scheduler import Scheduler
from .store import create_store

logger = logging.getLogger(__name__)


def main(environ=None):
    if environ is None:
        environ = os.environ
    setup_logging(
        environ.get("LOG_LEVEL", "INFO").upper(), environ.get("LOG_FORMAT", "json").lower()
    )

    try:
        config = load_config(environ)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    setup_logging(config.log_level, config.log_format)

    logger.info(f"🚀 Starting bucket mirror for bucket: {config.bucket}")
    logger.info(f"  LOCAL_ROOT = {os.path.abspath(config.local_root)}")

    store = create_store(config)
    cycle = SyncCycle(
        store,
        config.local_root,
        reporter=create_reporter(config),
        chunk_size=config.chunk_bytes,
    )

    if config.run_once:
        result = cycle.run()
        return 0 if not result.aborted and not result.errors else 1

    logger.info(f"Will sync every {config.interval_sec:.0f} seconds.")
    scheduler = Scheduler(cycle.run, config.interval_sec)
    scheduler.install_signal_handlers()
    scheduler.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
