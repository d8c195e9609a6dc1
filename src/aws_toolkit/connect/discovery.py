"""
Discovery and credential-store collaborators.

The connection resolver only depends on the two protocols below. The memory
implementations cover tests and static deployments; credentials kept in AWS
Secrets Manager are served by SecretsManagerCredentialStore.
"""

from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

from aws_toolkit.config.config_params import ConfigParams
from aws_toolkit.utils.observability import logger


@runtime_checkable
class Discovery(Protocol):
    """Protocol for services that resolve connection parameters by key."""

    def resolve(self, trace_id: Optional[str], key: str) -> Optional[ConfigParams]:
        """Resolve connection parameters registered under a key."""
        ...


@runtime_checkable
class CredentialStore(Protocol):
    """Protocol for stores that look up credential parameters by key."""

    def lookup(self, trace_id: Optional[str], key: str) -> Optional[ConfigParams]:
        """Look up credential parameters stored under a key."""
        ...


class MemoryDiscovery:
    """Discovery service that keeps connections in memory."""

    def __init__(self, items: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self._items: Dict[str, ConfigParams] = {}
        for key, connection in (items or {}).items():
            self._items[key] = ConfigParams(connection)

    @classmethod
    def from_config(cls, config: ConfigParams) -> 'MemoryDiscovery':
        """
        Create a discovery service where every config section is one connection.

        Args:
            config: Parameters like ``my_lambda.arn=...``, ``my_lambda.region=...``

        Returns:
            Populated discovery service
        """
        names = {key.split('.', 1)[0] for key in config.keys() if '.' in key}
        return cls({name: config.get_section(name) for name in names})

    def register(self, trace_id: Optional[str], key: str, connection: Mapping[str, Any]) -> None:
        self._items[key] = ConfigParams(connection)
        logger.debug("Connection registered", extra={"trace_id": trace_id, "discovery_key": key})

    def resolve(self, trace_id: Optional[str], key: str) -> Optional[ConfigParams]:
        connection = self._items.get(key)
        return ConfigParams(connection) if connection is not None else None


class MemoryCredentialStore:
    """Credential store that keeps credentials in memory."""

    def __init__(self, items: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self._items: Dict[str, ConfigParams] = {}
        for key, credential in (items or {}).items():
            self._items[key] = ConfigParams(credential)

    def store(self, trace_id: Optional[str], key: str, credential: Optional[Mapping[str, Any]]) -> None:
        if credential is None:
            self._items.pop(key, None)
        else:
            self._items[key] = ConfigParams(credential)
        logger.debug("Credential stored", extra={"trace_id": trace_id, "store_key": key})

    def lookup(self, trace_id: Optional[str], key: str) -> Optional[ConfigParams]:
        credential = self._items.get(key)
        return ConfigParams(credential) if credential is not None else None
