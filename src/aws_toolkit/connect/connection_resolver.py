"""
AWS connection resolver.

Merges explicit configuration, ARN decomposition and optional discovery /
credential-store lookups into one validated AwsConnectionParams. Every client,
container and sink in the toolkit resolves its target through this class.
"""

from typing import Any, Mapping, Optional

from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.connect.connection_params import AwsConnectionParams
from aws_toolkit.connect.discovery import CredentialStore, Discovery
from aws_toolkit.utils.errors import ConfigurationError
from aws_toolkit.utils.observability import logger


class AwsConnectionResolver:
    """
    Resolves AWS connection and credential parameters.

    Configuration parameters:
        connection.discovery_key: (optional) key to resolve the connection through Discovery
        connection.region:        (optional) AWS region, overrides the region inside the arn
        connection.arn:           full ARN of the target, or
        connection.partition, connection.service, connection.account,
        connection.resource_type, connection.resource: parts to compose it from
        credential.store_key:     (optional) key to look up credentials in a CredentialStore
        credential.access_id:     AWS access key id
        credential.access_key:    AWS secret access key
    """

    def __init__(
        self,
        discovery: Optional[Discovery] = None,
        credential_store: Optional[CredentialStore] = None,
        require_credentials: bool = True,
    ):
        """
        Initialize the resolver.

        Args:
            discovery: Optional discovery service used for connection.discovery_key
            credential_store: Optional credential store used for credential.store_key
            require_credentials: Whether resolution fails without a credential pair
        """
        self.discovery = discovery
        self.credential_store = credential_store
        self.require_credentials = require_credentials
        self._config = ConfigParams()

    def configure(self, config: Mapping[str, Any]) -> None:
        self._config = config if isinstance(config, ConfigParams) else ConfigParams(config)

    def set_references(
        self,
        discovery: Optional[Discovery] = None,
        credential_store: Optional[CredentialStore] = None,
    ) -> None:
        if discovery is not None:
            self.discovery = discovery
        if credential_store is not None:
            self.credential_store = credential_store

    def resolve(self, trace_id: Optional[str]) -> AwsConnectionParams:
        """
        Resolve a validated connection.

        Args:
            trace_id: Transaction id used to trace execution through the call chain

        Returns:
            Connection parameters with an ARN and, when required, credentials

        Raises:
            ConfigurationError: If no ARN can be determined, credentials are
                missing, or a configured lookup has no collaborator
        """
        connection = AwsConnectionParams.from_config(self._config)

        if not connection.is_complete(self.require_credentials):
            connection = self._lookup(trace_id, connection)

        # Decompose the arn so region and other parts become available
        explicit_arn = connection.get_as_nullable_string('arn')
        if explicit_arn is not None:
            connection.arn = explicit_arn

        connection.validate(trace_id, self.require_credentials)

        logger.debug("AWS connection resolved", extra={
            "trace_id": trace_id,
            "arn": connection.arn,
            "region": connection.region,
        })

        return connection

    def _lookup(self, trace_id: Optional[str], connection: AwsConnectionParams) -> AwsConnectionParams:
        """Merge discovery and credential-store results under the explicit configuration."""
        result = AwsConnectionParams()

        discovery_key = connection.discovery_key
        if discovery_key is not None:
            if self.discovery is None:
                raise ConfigurationError(
                    message='Discovery is not set to resolve connection.discovery_key',
                    error_code='NO_DISCOVERY',
                    trace_id=trace_id,
                    details={'discovery_key': discovery_key},
                )

            discovered = self.discovery.resolve(trace_id, discovery_key)
            if discovered is not None:
                result.update(discovered)
            else:
                logger.warning("Connection not found in discovery", extra={
                    "trace_id": trace_id,
                    "discovery_key": discovery_key,
                })

        store_key = connection.store_key
        if store_key is not None:
            if self.credential_store is None:
                raise ConfigurationError(
                    message='Credential store is not set to resolve credential.store_key',
                    error_code='NO_CREDENTIAL_STORE',
                    trace_id=trace_id,
                    details={'store_key': store_key},
                )

            credential = self.credential_store.lookup(trace_id, store_key)
            if credential is not None:
                result.update(credential)
            else:
                logger.warning("Credential not found in store", extra={
                    "trace_id": trace_id,
                    "store_key": store_key,
                })

        # Explicit configuration wins over looked-up values
        result.update(connection)
        return result
