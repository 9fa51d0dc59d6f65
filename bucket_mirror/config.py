import os
from dataclasses import dataclass

from .errors import ConfigError

# ---- DEFAULTS ----
DEFAULT_PROVIDER = "oss"
DEFAULT_INTERVAL_SEC = 600  # 10 minutes
DEFAULT_CHUNK_BYTES = 1024 * 1024

OSS_ENDPOINT = "oss-eu-central-1.aliyuncs.com"
REGION_ID = "eu-central-1"
S3_REGION = "us-east-1"

SUPPORTED_PROVIDERS = ("oss", "s3")
LOG_FORMATS = ("json", "text")


@dataclass(frozen=True)
class MirrorConfig:
    bucket: str
    local_root: str
    provider: str = DEFAULT_PROVIDER
    interval_sec: float = DEFAULT_INTERVAL_SEC
    run_once: bool = False
    chunk_bytes: int = DEFAULT_CHUNK_BYTES

    oss_endpoint: str = OSS_ENDPOINT
    region_id: str = REGION_ID
    aliyun_access_key_id: str | None = None
    aliyun_access_key_secret: str | None = None

    s3_region: str = S3_REGION
    s3_endpoint_url: str | None = None

    sls_endpoint: str | None = None
    sls_project: str | None = None
    sls_logstore: str | None = None

    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def sls_enabled(self) -> bool:
        return all([self.sls_endpoint, self.sls_project, self.sls_logstore])


def _get_bool(environ, name: str, default: bool = False) -> bool:
    value = environ.get(name)
    if value is None or value == "":
        return default
    return value.lower() in ("1", "true", "yes", "on")


def _get_number(environ, name: str, default, cast):
    value = environ.get(name)
    if value is None or value == "":
        return default
    try:
        number = cast(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return number


def load_config(environ=None) -> MirrorConfig:
    """Build a MirrorConfig from environment variables.

    Raises ConfigError when the bucket is missing or a value is invalid.
    """
    if environ is None:
        environ = os.environ

    bucket = (
        environ.get("MIRROR_BUCKET")
        or environ.get("AWS_S3_BUCKET")
        or environ.get("OSS_BUCKET")
    )
    if not bucket:
        raise ConfigError(
            "MIRROR_BUCKET (or AWS_S3_BUCKET / OSS_BUCKET) must be set in environment"
        )

    provider = environ.get("STORE_PROVIDER", DEFAULT_PROVIDER).lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigError(
            f"Unsupported STORE_PROVIDER {provider!r}, expected one of {SUPPORTED_PROVIDERS}"
        )

    log_format = environ.get("LOG_FORMAT", "json").lower()
    if log_format not in LOG_FORMATS:
        raise ConfigError(f"LOG_FORMAT must be one of {LOG_FORMATS}, got {log_format!r}")

    return MirrorConfig(
        bucket=bucket,
        local_root=environ.get("LOCAL_ROOT") or bucket,
        provider=provider,
        interval_sec=_get_number(
            environ, "SYNC_INTERVAL_SEC", DEFAULT_INTERVAL_SEC, float
        ),
        run_once=_get_bool(environ, "SYNC_RUN_ONCE"),
        chunk_bytes=_get_number(
            environ, "TRANSFER_CHUNK_BYTES", DEFAULT_CHUNK_BYTES, int
        ),
        oss_endpoint=environ.get("OSS_ENDPOINT", OSS_ENDPOINT),
        region_id=environ.get("REGION_ID", REGION_ID),
        aliyun_access_key_id=environ.get("ALIYUN_ACCESS_KEY_ID"),
        aliyun_access_key_secret=environ.get("ALIYUN_ACCESS_KEY_SECRET"),
        s3_region=(
            environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION") or S3_REGION
        ),
        s3_endpoint_url=environ.get("S3_ENDPOINT_URL"),
        sls_endpoint=environ.get("SLS_ENDPOINT"),
        sls_project=environ.get("SLS_PROJECT"),
        sls_logstore=environ.get("SLS_LOGSTORE"),
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        log_format=log_format,
    )
