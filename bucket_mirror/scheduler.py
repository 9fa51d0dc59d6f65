import logging
import signal
import threading
import time

logger = logging.getLogger(__name__)


class Scheduler:
    """Runs a cycle immediately, then once per interval until stopped.

    The interval is measured from the start of the previous cycle. A cycle
    that overruns is followed immediately by the next one; missed ticks are
    not caught up and cycles never overlap. ``stop()`` interrupts the wait
    between cycles but does not cancel a cycle already running.
    """

    def __init__(self, run_cycle, interval, stop_event=None, clock=time.monotonic):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.run_cycle = run_cycle
        self.interval = interval
        self.stop_event = stop_event or threading.Event()
        self.clock = clock
        self.cycles_run = 0

    def stop(self):
        self.stop_event.set()

    def _run_once(self):
        try:
            self.run_cycle()
        except Exception:
            logger.exception("Unexpected error in sync cycle; will retry next tick")
        finally:
            self.cycles_run += 1

    def run_forever(self):
        logger.info(f"Scheduler started, interval {self.interval:.0f}s")
        try:
            while not self.stop_event.is_set():
                started = self.clock()
                self._run_once()
                remaining = max(0.0, started + self.interval - self.clock())
                if remaining:
                    logger.info(
                        f"Waiting {remaining:.0f}s for next run", extra={"status": "idle"}
                    )
                if self.stop_event.wait(remaining):
                    break
        finally:
            self.stop_event.set()
            logger.info(f"Scheduler stopped after {self.cycles_run} cycle(s)")

    def install_signal_handlers(self, signals=(signal.SIGTERM, signal.SIGINT)):
        def handler(signum, frame):
            logger.info(f"Received signal {signum}, shutting down after current cycle")
            self.stop()

        for sig in signals:
            signal.signal(sig, handler)
