"""
Amazon Resource Name model.

Parsing is purely lexical: six colon-delimited header segments, followed by a
resource part that is either ``type:resource``, ``type/resource`` or a bare
``resource``. The separator is kept so ``str(Arn.parse(text)) == text``.
"""

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from aws_toolkit.utils.errors import ConfigurationError

ARN_PREFIX = 'arn'


class Arn(BaseModel):
    """Decomposed Amazon Resource Name."""

    model_config = ConfigDict(frozen=True)

    partition: Annotated[str, Field(
        default='aws',
        description='AWS partition',
        examples=['aws', 'aws-cn']
    )] = 'aws'

    service: Annotated[str, Field(
        default='',
        description='Service namespace',
        examples=['lambda', 'logs']
    )] = ''

    region: Annotated[str, Field(
        default='',
        description='Region code, empty for global resources',
        examples=['us-east-1']
    )] = ''

    account: Annotated[str, Field(
        default='',
        description='Account ID without hyphens',
        examples=['123456789012']
    )] = ''

    resource_type: Annotated[Optional[str], Field(
        default=None,
        description='Resource type, absent for bare resources',
        examples=['function', 'log-group']
    )] = None

    resource: Annotated[str, Field(
        default='',
        description='Resource name or path',
        examples=['myFunc']
    )] = ''

    separator: Annotated[Literal[':', '/'], Field(
        default=':',
        description='Separator between resource type and resource'
    )] = ':'

    @model_validator(mode='before')
    @classmethod
    def _normalize_separator(cls, data):
        if isinstance(data, dict) and data.get('resource_type') is None:
            data = {**data, 'separator': ':'}
        return data

    @model_validator(mode='after')
    def _check_segments(self) -> 'Arn':
        for name in ('partition', 'service', 'region', 'account'):
            if ':' in getattr(self, name):
                raise ValueError(f'ARN {name} must not contain ":"')

        if self.resource_type is not None:
            if self.separator == '/' and not self.resource_type:
                raise ValueError('ARN resource type is required before a "/" separator')
            if ':' in self.resource_type or '/' in self.resource_type:
                raise ValueError('ARN resource type must not contain ":" or "/"')
        elif ':' in self.resource or self.resource.find('/') > 0:
            raise ValueError('ARN resource without a type must not contain ":" or an inner "/"')

        return self

    @classmethod
    def parse(cls, text: Optional[str]) -> 'Arn':
        """
        Parse an ARN string into its parts.

        Args:
            text: ARN string, e.g. ``arn:aws:lambda:us-east-1:123456789012:function:myFunc``

        Returns:
            Parsed Arn

        Raises:
            ConfigurationError: If the text is not a well-formed ARN
        """
        items = (text or '').split(':', 6)
        if len(items) < 6 or items[0] != ARN_PREFIX:
            raise ConfigurationError(
                message=f"'{text}' is not a valid ARN",
                error_code='INVALID_ARN',
                details={'arn': text},
            )

        _, partition, service, region, account = items[:5]

        temp = items[5]
        index = temp.find('/')
        if index > 0:
            resource_type, resource, separator = temp[:index], temp[index + 1:], '/'
            if len(items) == 7:
                resource = resource + ':' + items[6]
        elif len(items) == 7:
            resource_type, resource, separator = temp, items[6], ':'
        else:
            resource_type, resource, separator = None, temp, ':'

        try:
            return cls(
                partition=partition,
                service=service,
                region=region,
                account=account,
                resource_type=resource_type,
                resource=resource,
                separator=separator,
            )
        except PydanticValidationError as e:
            raise ConfigurationError(
                message=f"'{text}' is not a valid ARN",
                error_code='INVALID_ARN',
                details={'arn': text},
                cause=e,
            ) from e

    def to_string(self) -> str:
        head = ':'.join([ARN_PREFIX, self.partition, self.service, self.region, self.account])
        if self.resource_type is None:
            return f'{head}:{self.resource}'
        return f'{head}:{self.resource_type}{self.separator}{self.resource}'

    def __str__(self) -> str:
        return self.to_string()
