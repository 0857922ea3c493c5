from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from .exceptions import MissingConfigError

Headers = Dict[str, str]
QueryParams = Dict[str, str]


class Service(Enum):
    """
    Common signing names. S3 is not listed: it needs x-amz-content-sha256
    and un-normalized paths, which this signer does not produce.
    """
    EXECUTE_API = 'execute-api'
    DYNAMODB = 'dynamodb'
    LAMBDA = 'lambda'
    IAM = 'iam'
    STS = 'sts'
    EC2 = 'ec2'


DEFAULT_SERVICE = Service.EXECUTE_API.value

REQUIRED_FIELDS = ('method', 'path', 'region', 'endpoint', 'access_key', 'secret_key')

# Names accepted by SignRequestConfig.from_dict in addition to the field names.
_ALIASES = {
    'accessKey': 'access_key',
    'secretKey': 'secret_key',
    'sessionToken': 'session_token',
    'serviceName': 'service_name',
    'legacyHeaderOrder': 'legacy_header_order',
}


@dataclass(frozen=True)
class SignRequestConfig:
    """
    Everything needed to sign one request.

    All fields default to None so that a partially filled config can be
    built and rejected by ``resolve_config`` with the name of the missing
    property. Instances are never modified by the signer.
    """
    method: Optional[str] = None
    endpoint: Optional[str] = None
    path: Optional[str] = None
    headers: Optional[Mapping[str, str]] = None
    params: Optional[Mapping[str, str]] = None
    data: Any = None
    region: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    session_token: Optional[str] = None
    service_name: Optional[Union[str, Service]] = None
    # Sort canonical headers by original-case name instead of lowercased name.
    legacy_header_order: bool = False

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> 'SignRequestConfig':
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise TypeError(f"unknown config property '{key}'")
            kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class ResolvedConfig:
    """A validated config with defaults filled in and its own header dict."""
    method: str
    endpoint: str
    path: str
    region: str
    access_key: str
    secret_key: str
    service_name: str
    headers: Headers = field(default_factory=dict)
    params: QueryParams = field(default_factory=dict)
    data: Any = None
    session_token: Optional[str] = None
    legacy_header_order: bool = False

    def with_data(self, data: Union[str, bytes]) -> 'ResolvedConfig':
        return replace(self, data=data)


def resolve_config(config: SignRequestConfig) -> ResolvedConfig:
    """
    Validate ``config`` and return a fully populated copy.

    Raises:
        MissingConfigError: if one of the required properties is None.
    """
    for name in REQUIRED_FIELDS:
        if getattr(config, name) is None:
            raise MissingConfigError(name)

    service_name = config.service_name
    if service_name is None:
        service_name = DEFAULT_SERVICE
    elif isinstance(service_name, Service):
        service_name = service_name.value

    return ResolvedConfig(
        method=config.method,
        endpoint=config.endpoint,
        path=config.path,
        region=config.region,
        access_key=config.access_key,
        secret_key=config.secret_key,
        service_name=service_name,
        headers=dict(config.headers or {}),
        params=dict(config.params or {}),
        data=config.data,
        session_token=config.session_token,
        legacy_header_order=config.legacy_header_order,
    )
