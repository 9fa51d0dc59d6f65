import logging

import oss2
from alibabacloud_credentials.client import Client as CredClient
from alibabacloud_credentials.models import Config as CredConfig
from oss2 import CredentialsProvider, ProviderAuth
from oss2.credentials import Credentials
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential_jitter,
    before_sleep_log,
)

logger = logging.getLogger(__name__)


class CredentialProviderWrapper(CredentialsProvider):
    """Feeds oss2 with credentials from an alibabacloud_credentials client.

    The ECS metadata endpoint is occasionally slow to answer right after boot,
    so each fetch is retried a few times before giving up.
    """

    def __init__(self, client):
        self.client = client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential_jitter(initial=1, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def get_credentials(self):
        credential = self.client.get_credential()
        return Credentials(
            credential.access_key_id,
            credential.access_key_secret,
            credential.security_token,
        )


def build_cred_client(config):
    if config.aliyun_access_key_id and config.aliyun_access_key_secret:
        return CredClient(
            CredConfig(
                type="access_key",
                access_key_id=config.aliyun_access_key_id,
                access_key_secret=config.aliyun_access_key_secret,
            )
        )
    return CredClient(CredConfig(type="ecs_ram_role"))


def build_oss_auth(config):
    if config.aliyun_access_key_id and config.aliyun_access_key_secret:
        logger.info("Using static Aliyun access key for OSS")
        return oss2.Auth(config.aliyun_access_key_id, config.aliyun_access_key_secret)
    logger.info("Using ECS RAM role credentials for OSS")
    return ProviderAuth(CredentialProviderWrapper(build_cred_client(config)))
