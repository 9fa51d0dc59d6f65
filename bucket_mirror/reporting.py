import logging
import time

from aliyun.log import LogClient, LogItem, PutLogsRequest

from .credentials import build_cred_client

logger = logging.getLogger(__name__)

SLS_TOPIC = "bucket-mirror"
BATCH_SIZE = 10


class NullReporter:
    """Used when no SLS logstore is configured."""

    def record(self, key, status, duration, size_bytes):
        pass

    def summary(self, result):
        pass


class SlsReporter:
    """Ships per-object records and a per-cycle aggregate to an SLS logstore.

    Send failures are logged and dropped; they never affect a cycle.
    """

    def __init__(self, endpoint, project, logstore, cred_client, topic=SLS_TOPIC):
        self.endpoint = endpoint
        self.project = project
        self.logstore = logstore
        self.cred_client = cred_client
        self.topic = topic
        self.batch = []
        self.client = None
        self._credential_key = None

    def _get_client(self):
        # STS tokens from the RAM role rotate; rebuild the client when they do
        credential = self.cred_client.get_credential()
        credential_key = (
            credential.access_key_id,
            credential.access_key_secret,
            credential.security_token,
        )
        if self.client is None or credential_key != self._credential_key:
            self.client = LogClient(
                endpoint=self.endpoint,
                accessKeyId=credential.access_key_id,
                accessKey=credential.access_key_secret,
                securityToken=credential.security_token,
            )
            self._credential_key = credential_key
        return self.client

    def _send(self, items):
        request = PutLogsRequest(self.project, self.logstore, self.topic, "", items)
        self._get_client().put_logs(request)

    def flush(self):
        if not self.batch:
            return
        items, self.batch = self.batch, []
        try:
            self._send(items)
        except Exception as e:
            logger.warning(f"SLS batch send failed: {e}")

    def record(self, key, status, duration, size_bytes):
        log_item = LogItem()
        log_item.set_time(int(time.time()))
        log_item.push_back("key", key)
        log_item.push_back("status", status)
        log_item.push_back("duration_sec", str(duration))
        log_item.push_back("size_bytes", str(size_bytes))
        self.batch.append(log_item)

        if len(self.batch) >= BATCH_SIZE:
            self.flush()

    def summary(self, result):
        self.flush()
        failed_keys = ",".join(key for key, _ in result.errors)
        try:
            agg_item = LogItem()
            agg_item.set_time(int(time.time()))
            agg_item.push_back("total_objects", str(result.objects_listed))
            agg_item.push_back("downloaded", str(result.downloaded))
            agg_item.push_back("skipped", str(result.skipped))
            agg_item.push_back("total_errors", str(result.error_count))
            agg_item.push_back("total_bytes", str(result.bytes_transferred))
            agg_item.push_back("outcome", result.outcome)
            agg_item.push_back("run_duration_sec", str(result.duration_sec))
            agg_item.push_back("failed_keys", failed_keys)
            self._send([agg_item])
        except Exception as e:
            logger.warning(f"SLS aggregate send failed: {e}")


def create_reporter(config):
    if not config.sls_enabled:
        return NullReporter()

    logger.info(
        f"Shipping sync records to SLS {config.sls_project}/{config.sls_logstore}"
    )
    return SlsReporter(
        config.sls_endpoint,
        config.sls_project,
        config.sls_logstore,
        build_cred_client(config),
    )
