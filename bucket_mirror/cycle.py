"""One pass of the mirror: list the bucket, decide, download.

Per-object problems are logged, counted and skipped past. Only a failure to
create the local root or to fetch a listing page ends the cycle early; files
already downloaded in that cycle are kept.
"""

import logging
import time
from dataclasses import dataclass, field

from .errors import DirectoryError, ListError, RootError, TransferError, UnsafeKeyError
from .lister import iter_pages
from .paths import ensure_parent_dir, ensure_root, is_pseudo_directory, safe_path
from .reporting import NullReporter
from .staleness import needs_download
from .store import ObjectDescriptor, ObjectStore
from .config import DEFAULT_CHUNK_BYTES
from .transfer import transfer

logger = logging.getLogger(__name__)

COMPLETED = "completed"
EMPTY_BUCKET = "empty_bucket"
ABORTED = "aborted"


@dataclass
class SyncCycleResult:
    objects_listed: int = 0
    downloaded: int = 0
    skipped: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    bytes_transferred: int = 0
    aborted: bool = False
    abort_reason: str | None = None
    started_at: float = field(default_factory=time.time)
    duration_sec: float = 0.0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def outcome(self) -> str:
        if self.aborted:
            return ABORTED
        if self.objects_listed == 0:
            return EMPTY_BUCKET
        return COMPLETED


class SyncCycle:
    def __init__(
        self,
        store: ObjectStore,
        local_root: str,
        reporter=None,
        chunk_size: int = DEFAULT_CHUNK_BYTES,
    ):
        self.store = store
        self.local_root = local_root
        self.reporter = reporter or NullReporter()
        self.chunk_size = chunk_size

    @property
    def bucket_name(self):
        return getattr(self.store, "bucket_name", "?")

    def run(self) -> SyncCycleResult:
        result = SyncCycleResult()
        start = time.monotonic()
        logger.info(
            f"--- Starting sync cycle for bucket {self.bucket_name} into {self.local_root} ---"
        )

        try:
            ensure_root(self.local_root)
            for page_number, page in enumerate(iter_pages(self.store), start=1):
                logger.debug(f"Processing page {page_number} ({len(page)} objects)")
                for obj in page:
                    result.objects_listed += 1
                    self._process(obj, result)
        except RootError as e:
            result.aborted = True
            result.abort_reason = str(e)
            logger.error(f"❌ {e}; aborting cycle")
        except ListError as e:
            result.aborted = True
            result.abort_reason = str(e)
            logger.error(
                f"❌ Could not list objects in bucket {self.bucket_name}: {e.cause}; aborting cycle"
            )

        result.duration_sec = time.monotonic() - start
        self._log_summary(result)
        self.reporter.summary(result)
        return result

    def _process(self, obj: ObjectDescriptor, result: SyncCycleResult) -> None:
        key = obj.key
        if is_pseudo_directory(key):
            logger.debug("Skipping directory marker", extra={"key": key})
            return

        start_time = time.monotonic()
        try:
            local_path = safe_path(self.local_root, key)
            ensure_parent_dir(local_path)

            if not needs_download(local_path, obj.size):
                result.skipped += 1
                logger.info(
                    "Key unchanged (size match), skip",
                    extra={"key": key, "status": "skipped", "size_bytes": obj.size},
                )
                self.reporter.record(key, "skipped", 0, 0)
                return

            written = transfer(
                self.store,
                key,
                local_path,
                expected_size=obj.size,
                chunk_size=self.chunk_size,
            )
        except (
            UnsafeKeyError,
            DirectoryError,
            TransferError,
            OSError,
            ValueError,
        ) as e:
            duration = time.monotonic() - start_time
            cause = str(getattr(e, "cause", e))
            result.errors.append((key, cause))
            logger.error(
                f"❌ Failed to sync: {cause}",
                extra={"key": key, "status": "error", "duration_sec": duration},
            )
            self.reporter.record(key, "error", duration, 0)
            return

        duration = time.monotonic() - start_time
        result.downloaded += 1
        result.bytes_transferred += written
        logger.info(
            f"✅ Downloaded {self.bucket_name}/{key} to {local_path}",
            extra={
                "key": key,
                "status": "downloaded",
                "duration_sec": duration,
                "size_bytes": written,
            },
        )
        self.reporter.record(key, "downloaded", duration, written)

    def _log_summary(self, result: SyncCycleResult) -> None:
        if result.outcome == EMPTY_BUCKET:
            logger.info(f"Bucket {self.bucket_name} is empty. Nothing to download.")

        failed_keys = ",".join(key for key, _ in result.errors)
        summary = {
            "outcome": result.outcome,
            "objects_listed": result.objects_listed,
            "downloaded": result.downloaded,
            "skipped": result.skipped,
            "total_errors": result.error_count,
            "total_bytes": result.bytes_transferred,
            "run_duration_sec": result.duration_sec,
            "failed_keys": failed_keys,
        }
        if result.aborted or result.errors:
            logger.warning("Cycle summary", extra=summary)
        else:
            logger.info("Cycle summary", extra=summary)
        logger.info(
            f"--- Finished sync cycle: listed={result.objects_listed} "
            f"downloaded={result.downloaded} skipped={result.skipped} "
            f"errors={result.error_count} ---"
        )
