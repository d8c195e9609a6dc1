"""
AWS connection parameters.

A flat parameter map holding everything needed to reach a Lambda function,
log group or metrics namespace: the ARN (or its parts) plus the credential pair.
"""

from typing import Any, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.connect.arn import Arn
from aws_toolkit.utils.errors import ConfigurationError

_ARN_PARTS = ('partition', 'service', 'region', 'account', 'resource_type', 'resource')


class AwsConnectionParams(ConfigParams):
    """
    Connection and credential parameters for AWS services.

    Recognized keys: protocol, partition, service, region, account,
    resource_type, resource, arn, access_id, access_key, discovery_key and
    store_key.
    """

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'AwsConnectionParams':
        """
        Collect the ``connection.*`` and ``credential.*`` sections of a config.

        Args:
            config: Component configuration

        Returns:
            Connection parameters; the arn is not decomposed yet
        """
        config = config if isinstance(config, ConfigParams) else ConfigParams(config)
        result = cls()
        result.update(config.get_section('connection'))
        result.update(config.get_section('credential'))
        return result

    @classmethod
    def from_configs(cls, *configs: Mapping[str, Any]) -> 'AwsConnectionParams':
        result = cls()
        for config in configs:
            if config:
                result.update(cls.from_config(config))
        return result

    def _get(self, key: str) -> Optional[str]:
        return self.get_as_nullable_string(key)

    def _set(self, key: str, value: Optional[str]) -> None:
        if value is None:
            self.pop(key, None)
        else:
            self[key] = value

    @property
    def protocol(self) -> Optional[str]:
        return self._get('protocol')

    @protocol.setter
    def protocol(self, value: Optional[str]) -> None:
        self._set('protocol', value)

    @property
    def partition(self) -> str:
        return self._get('partition') or 'aws'

    @partition.setter
    def partition(self, value: Optional[str]) -> None:
        self._set('partition', value)

    @property
    def service(self) -> Optional[str]:
        return self._get('service')

    @service.setter
    def service(self, value: Optional[str]) -> None:
        self._set('service', value)

    @property
    def region(self) -> Optional[str]:
        return self._get('region')

    @region.setter
    def region(self, value: Optional[str]) -> None:
        self._set('region', value)

    @property
    def account(self) -> Optional[str]:
        return self._get('account')

    @account.setter
    def account(self, value: Optional[str]) -> None:
        self._set('account', value)

    @property
    def resource_type(self) -> Optional[str]:
        return self._get('resource_type')

    @resource_type.setter
    def resource_type(self, value: Optional[str]) -> None:
        self._set('resource_type', value)

    @property
    def resource(self) -> Optional[str]:
        return self._get('resource')

    @resource.setter
    def resource(self, value: Optional[str]) -> None:
        self._set('resource', value)

    @property
    def arn(self) -> Optional[str]:
        """The explicit ARN, or one synthesized from its parts when a resource is known."""
        arn = self._get('arn')
        if arn is not None:
            return arn

        resource = self.resource
        if resource is None:
            return None

        try:
            return Arn(
                partition=self.partition,
                service=self.service or '',
                region=self.region or '',
                account=self.account or '',
                resource_type=self.resource_type,
                resource=resource,
            ).to_string()
        except PydanticValidationError as e:
            raise ConfigurationError(
                message=f'Cannot compose an ARN from connection parts: {e}',
                error_code='INVALID_ARN',
                cause=e,
            ) from e

    @arn.setter
    def arn(self, value: Optional[str]) -> None:
        """Store an ARN and fill the parts it carries that are not set explicitly."""
        if value is None:
            self.pop('arn', None)
            return

        parsed = Arn.parse(value)
        self['arn'] = value

        for part in _ARN_PARTS:
            derived = getattr(parsed, part)
            if derived and self._get(part) is None:
                self[part] = derived

    @property
    def access_id(self) -> Optional[str]:
        return self._get('access_id') or self._get('client_id')

    @access_id.setter
    def access_id(self, value: Optional[str]) -> None:
        self._set('access_id', value)

    @property
    def access_key(self) -> Optional[str]:
        return self._get('access_key') or self._get('client_key')

    @access_key.setter
    def access_key(self, value: Optional[str]) -> None:
        self._set('access_key', value)

    @property
    def discovery_key(self) -> Optional[str]:
        return self._get('discovery_key')

    @property
    def store_key(self) -> Optional[str]:
        return self._get('store_key')

    def has_credentials(self) -> bool:
        return self.access_id is not None and self.access_key is not None

    def is_complete(self, require_credentials: bool = True) -> bool:
        """Check whether no lookups are needed to use these parameters."""
        if self.arn is None:
            return False
        return self.has_credentials() or not require_credentials

    def validate(self, trace_id: Optional[str] = None, require_credentials: bool = True) -> None:
        """
        Validate that the parameters identify a target and carry credentials.

        Args:
            trace_id: Transaction id used to trace execution through the call chain
            require_credentials: Whether a missing credential pair is an error

        Raises:
            ConfigurationError: If no ARN can be determined or credentials are missing
        """
        if self.arn is None:
            raise ConfigurationError(
                message='No connection configured: set connection.arn or connection.resource',
                error_code='NO_AWS_CONNECTION',
                trace_id=trace_id,
            )

        if require_credentials and self.access_id is None:
            raise ConfigurationError(
                message='No access_id is configured in AWS credential',
                error_code='NO_ACCESS_ID',
                trace_id=trace_id,
            )

        if require_credentials and self.access_key is None:
            raise ConfigurationError(
                message='No access_key is configured in AWS credential',
                error_code='NO_ACCESS_KEY',
                trace_id=trace_id,
            )
