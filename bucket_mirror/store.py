"""Object-store backends the mirror reads from.

Both backends expose the same two operations: listing the bucket one page at a
time and streaming a single object in chunks. Neither retries on its own
beyond what the underlying SDK does.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator

import boto3
import oss2
from botocore.config import Config

from .config import MirrorConfig
from .credentials import build_oss_auth
from .errors import ConfigError

logger = logging.getLogger(__name__)

OSS_MAX_KEYS = 1000


@dataclass(frozen=True)
class ObjectDescriptor:
    key: str
    size: int


class ObjectStore(ABC):
    bucket_name: str

    @abstractmethod
    def iter_pages(self) -> Iterator[list[ObjectDescriptor]]:
        """Yield the bucket listing one page at a time.

        The next page is requested only when the caller asks for it.
        """

    @abstractmethod
    def iter_object(self, key: str, chunk_size: int) -> Iterator[bytes]:
        """Yield the content of *key* in chunks of at most *chunk_size* bytes."""


class OssObjectStore(ObjectStore):
    def __init__(self, bucket: oss2.Bucket, page_size: int = OSS_MAX_KEYS):
        self.bucket = bucket
        self.bucket_name = bucket.bucket_name
        self.page_size = page_size

    def iter_pages(self):
        token = ""
        while True:
            result = self.bucket.list_objects_v2(
                continuation_token=token, max_keys=self.page_size
            )
            yield [
                ObjectDescriptor(key=obj.key, size=obj.size)
                for obj in result.object_list
            ]
            if not result.is_truncated:
                return
            token = result.next_continuation_token

    def iter_object(self, key, chunk_size):
        obj = self.bucket.get_object(key)
        try:
            while True:
                chunk = obj.read(chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            obj.close()


class S3ObjectStore(ObjectStore):
    """S3-compatible store (AWS S3, MinIO) backed by a boto3 client."""

    def __init__(
        self,
        bucket_name: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        client=None,
    ):
        self.bucket_name = bucket_name
        if client is None:
            kwargs: dict = {
                "config": Config(
                    region_name=region,
                    signature_version="s3v4",
                    retries={"max_attempts": 3, "mode": "standard"},
                ),
            }
            # Credentials come from the default chain (env, profile, instance role)
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **kwargs)
        self.client = client

    def iter_pages(self):
        paginator = self.client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket_name):
            yield [
                ObjectDescriptor(key=obj["Key"], size=obj["Size"])
                for obj in page.get("Contents", [])
            ]

    def iter_object(self, key, chunk_size):
        body = self.client.get_object(Bucket=self.bucket_name, Key=key)["Body"]
        try:
            yield from body.iter_chunks(chunk_size)
        finally:
            body.close()


def create_store(config: MirrorConfig) -> ObjectStore:
    if config.provider == "oss":
        auth = build_oss_auth(config)
        bucket = oss2.Bucket(
            auth, config.oss_endpoint, config.bucket, region=config.region_id
        )
        logger.info(f"Using OSS bucket {config.bucket} at {config.oss_endpoint}")
        return OssObjectStore(bucket)
    if config.provider == "s3":
        logger.info(f"Using S3 bucket {config.bucket} in {config.s3_region}")
        return S3ObjectStore(
            config.bucket,
            region=config.s3_region,
            endpoint_url=config.s3_endpoint_url,
        )
    raise ConfigError(f"Unsupported store provider: {config.provider!r}")
