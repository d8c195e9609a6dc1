"""
AWS Secrets Manager credential store.

Looks up AWS credential pairs kept as JSON secrets, e.g.
``{"access_id": "AKIA...", "access_key": "..."}``. Results are cached for a
short time so repeated resolutions during container start do not hit the API.
"""

import json
import time
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from cachetools import TTLCache

from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.utils.errors import ConfigurationError
from aws_toolkit.utils.observability import logger, metrics, tracer

# Secret keys accepted for each credential field, in lookup order
_ACCESS_ID_KEYS = ('access_id', 'aws_access_key_id', 'AccessKeyId')
_ACCESS_KEY_KEYS = ('access_key', 'aws_secret_access_key', 'SecretAccessKey')


class SecretsManagerCredentialStore:
    """
    Credential store backed by AWS Secrets Manager.

    The store key is the secret name or ARN.
    """

    def __init__(
        self,
        region_name: Optional[str] = None,
        cache_ttl_seconds: int = 300,
        max_cache_size: int = 100,
        endpoint_url: Optional[str] = None,
        client: Any = None,
    ):
        """
        Initialize the credential store.

        Args:
            region_name: AWS region name
            cache_ttl_seconds: Cache TTL in seconds (default: 5 minutes), 0 disables caching
            max_cache_size: Maximum number of secrets to cache
            endpoint_url: Custom endpoint URL (for testing)
            client: Preconfigured secretsmanager client
        """
        self.client = client or boto3.client(
            'secretsmanager',
            region_name=region_name,
            endpoint_url=endpoint_url,
        )
        self.enable_caching = cache_ttl_seconds > 0
        self._cache: TTLCache = TTLCache(maxsize=max_cache_size, ttl=max(cache_ttl_seconds, 1))

        logger.debug(
            "Secrets Manager credential store initialized",
            extra={
                "region": region_name,
                "cache_ttl": cache_ttl_seconds,
                "caching_enabled": self.enable_caching,
            }
        )

    @tracer.capture_method
    def lookup(self, trace_id: Optional[str], key: str) -> Optional[ConfigParams]:
        """
        Look up a credential pair stored in a secret.

        Args:
            trace_id: Transaction id used to trace execution through the call chain
            key: Secret name or ARN

        Returns:
            Credential parameters with access_id and access_key, or None if the
            secret does not exist

        Raises:
            ConfigurationError: If the secret cannot be read or has no credentials
        """
        if self.enable_caching and key in self._cache:
            metrics.add_metric(name="CredentialCacheHit", unit="Count", value=1)
            return ConfigParams(self._cache[key])

        start_time = time.time()

        try:
            response = self.client.get_secret_value(SecretId=key)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            if error_code == 'ResourceNotFoundException':
                logger.warning("Credential secret not found", extra={"trace_id": trace_id, "store_key": key})
                return None

            logger.error("Failed to read credential secret", extra={
                "trace_id": trace_id,
                "store_key": key,
                "error_code": error_code,
            })
            raise ConfigurationError(
                message=f"Failed to read credential secret '{key}'",
                error_code='CREDENTIAL_LOOKUP_FAILED',
                trace_id=trace_id,
                details={'store_key': key, 'aws_error_code': error_code},
                cause=e,
            ) from e
        except BotoCoreError as e:
            raise ConfigurationError(
                message=f"Failed to read credential secret '{key}'",
                error_code='CREDENTIAL_LOOKUP_FAILED',
                trace_id=trace_id,
                details={'store_key': key},
                cause=e,
            ) from e

        credential = self._parse_secret_value(trace_id, key, response)

        if self.enable_caching:
            self._cache[key] = dict(credential)

        logger.debug("Credential secret retrieved", extra={
            "trace_id": trace_id,
            "store_key": key,
            "duration_ms": (time.time() - start_time) * 1000,
        })

        return credential

    def clear_cache(self) -> None:
        self._cache.clear()

    def _parse_secret_value(self, trace_id: Optional[str], key: str, response: Dict[str, Any]) -> ConfigParams:
        """Parse credential fields from the secret string."""
        secret_string = response.get('SecretString')

        try:
            value = json.loads(secret_string) if secret_string else None
        except (json.JSONDecodeError, TypeError):
            value = None

        if not isinstance(value, dict):
            raise ConfigurationError(
                message=f"Credential secret '{key}' is not a JSON object",
                error_code='INVALID_CREDENTIAL',
                trace_id=trace_id,
                details={'store_key': key},
            )

        access_id = next((value[name] for name in _ACCESS_ID_KEYS if value.get(name)), None)
        access_key = next((value[name] for name in _ACCESS_KEY_KEYS if value.get(name)), None)

        return ConfigParams({'access_id': access_id, 'access_key': access_key})
