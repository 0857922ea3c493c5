"""
AWS Signature Version 4 (AWS4-HMAC-SHA256) for header-based authentication.

The pipeline is split into pure builders that can be used on their own:

    canonical request -> credential scope -> string to sign
        -> signing key -> signature -> Authorization header

``build_signing_parts`` drives them for a ``SignRequestConfig`` and returns
every intermediate value. ``SigV4Signer`` keeps credentials, region and
service together for repeated use.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple, Union
from urllib.parse import unquote, urlsplit

from .config import (
    Headers,
    QueryParams,
    ResolvedConfig,
    Service,
    SignRequestConfig,
    resolve_config,
)
from .encoding import normalize_path, quote_component, quote_path
from .primitives import hex_encode, hmac_sha256, sha256_hex

logger = logging.getLogger(__name__)

ALGORITHM = 'AWS4-HMAC-SHA256'
AWS4 = 'AWS4'
AWS4_REQUEST = 'aws4_request'
SIGV4_TIMESTAMP_FORMAT = '%Y%m%dT%H%M%SZ'

X_AMZ_DATE = 'x-amz-date'
X_AMZ_SECURITY_TOKEN = 'x-amz-security-token'
AUTHORIZATION = 'Authorization'
HOST = 'Host'

Payload = Union[str, bytes]


@dataclass(frozen=True)
class SigningParts:
    config: ResolvedConfig
    headers: Headers
    auth_header: str
    signature: str
    canonical_request: str
    string_to_sign: str
    credential_scope: str
    timestamp: str


# Canonical request
# ------------------------------------

def build_canonical_request(
        method: str,
        path: Optional[str],
        headers: Mapping[str, str],
        params: Optional[Mapping[str, str]] = None,
        payload: Payload = '',
        legacy_header_order: bool = False,
) -> str:
    return '\n'.join([
        method.upper(),
        build_canonical_uri(path),
        build_canonical_query_string(params or {}),
        build_canonical_headers(headers, legacy_header_order),
        build_signed_headers(headers),
        build_hashed_payload(payload),
    ])


def build_canonical_uri(path: Optional[str]) -> str:
    if not path:
        return '/'
    return quote_path(path)


def build_canonical_query_string(params: Mapping[str, str]) -> str:
    pairs = sorted(params.items())
    return '&'.join(f'{quote_component(name)}={quote_component(value)}' for name, value in pairs)


def _trimall(value: str) -> str:
    return ' '.join(value.split())


def build_canonical_headers(headers: Mapping[str, str], legacy_header_order: bool = False) -> str:
    """
    One ``name:value`` line per header, each terminated by a newline.

    Names are lowercased and values trimmed with inner whitespace runs
    collapsed. Entries are ordered by lowercased name, or by the name as
    given when ``legacy_header_order`` is set.
    """
    if legacy_header_order:
        entries = sorted(headers.items())
    else:
        entries = sorted(headers.items(), key=lambda item: (item[0].lower(), item[1]))
    return ''.join(f'{name.lower()}:{_trimall(value)}\n' for name, value in entries)


def build_signed_headers(headers: Mapping[str, str]) -> str:
    return ';'.join(sorted(name.lower() for name in headers))


def build_hashed_payload(payload: Payload) -> str:
    return sha256_hex(payload)


# String to sign
# ------------------------------------

def build_credential_scope(timestamp: str, region: str, service: str) -> str:
    return f'{timestamp[:8]}/{region}/{service}/{AWS4_REQUEST}'


def build_string_to_sign(timestamp: str, credential_scope: str, canonical_request: str) -> str:
    return '\n'.join([ALGORITHM, timestamp, credential_scope, sha256_hex(canonical_request)])


# Signing key
# ------------------------------------

def build_signing_key(secret_key: str, timestamp: str, region: str, service: str) -> bytes:
    k_date = hmac_sha256(AWS4 + secret_key, timestamp[:8])
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, AWS4_REQUEST)


# Signature
# ------------------------------------

def build_signature(signing_key: bytes, string_to_sign: str) -> str:
    return hex_encode(hmac_sha256(signing_key, string_to_sign))


def build_authorization_header(
        access_key: str,
        credential_scope: str,
        headers: Mapping[str, str],
        signature: str,
) -> str:
    return (
        f'{ALGORITHM} Credential={access_key}/{credential_scope}, '
        f'SignedHeaders={build_signed_headers(headers)}, '
        f'Signature={signature}'
    )


# Orchestration
# ------------------------------------

def _find_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    lname = name.lower()
    return next((key for key in headers if key.lower() == lname), None)


def _set_header(headers: Headers, name: str, value: str) -> None:
    """Set ``name``, replacing any header that differs from it only in case."""
    existing = _find_header(headers, name)
    if existing is not None:
        del headers[existing]
    headers[name] = value


def _resolve_timestamp(headers: Headers) -> str:
    existing = _find_header(headers, X_AMZ_DATE)
    if existing is not None:
        return headers[existing]
    timestamp = datetime.now(timezone.utc).strftime(SIGV4_TIMESTAMP_FORMAT)
    headers[X_AMZ_DATE] = timestamp
    return timestamp


def _resolve_path(endpoint: str, path: str) -> str:
    return normalize_path(urlsplit(endpoint + path).path)


def _hostname(endpoint: str) -> str:
    # Malformed endpoints are the caller's problem; hostname may come back None.
    return urlsplit(endpoint).hostname


def _serialize_body(data: Any) -> Payload:
    if data is None:
        return ''
    if isinstance(data, (str, bytes)):
        return data
    return json.dumps(data, separators=(',', ':'), ensure_ascii=False)


def build_signing_parts(config: SignRequestConfig) -> SigningParts:
    """
    Sign the request described by ``config``.

    ``config`` itself is left untouched. The returned parts carry a resolved
    copy of it whose ``headers`` hold the original headers plus
    ``x-amz-date`` (unless one was supplied), ``Host``,
    ``x-amz-security-token`` (when a session token is set) and
    ``Authorization``.

    Raises:
        MissingConfigError: if a required property is missing.
    """
    resolved = resolve_config(config)
    headers = resolved.headers
    # A stale Authorization header from an earlier attempt must not be signed.
    stale = _find_header(headers, AUTHORIZATION)
    if stale is not None:
        del headers[stale]

    timestamp = _resolve_timestamp(headers)
    path = _resolve_path(resolved.endpoint, resolved.path)
    _set_header(headers, HOST, _hostname(resolved.endpoint))
    if resolved.session_token is not None:
        _set_header(headers, X_AMZ_SECURITY_TOKEN, resolved.session_token)

    payload = _serialize_body(resolved.data)
    resolved = resolved.with_data(payload)

    canonical_request = build_canonical_request(
        resolved.method,
        path,
        headers,
        resolved.params,
        payload,
        resolved.legacy_header_order,
    )
    logger.debug('CanonicalRequest:\n%s', canonical_request)
    credential_scope = build_credential_scope(timestamp, resolved.region, resolved.service_name)
    string_to_sign = build_string_to_sign(timestamp, credential_scope, canonical_request)
    logger.debug('StringToSign:\n%s', string_to_sign)
    signing_key = build_signing_key(resolved.secret_key, timestamp, resolved.region, resolved.service_name)
    signature = build_signature(signing_key, string_to_sign)
    logger.debug('Signature:\n%s', signature)
    auth_header = build_authorization_header(resolved.access_key, credential_scope, headers, signature)
    _set_header(headers, AUTHORIZATION, auth_header)

    return SigningParts(
        config=resolved,
        headers=headers,
        auth_header=auth_header,
        signature=signature,
        canonical_request=canonical_request,
        string_to_sign=string_to_sign,
        credential_scope=credential_scope,
        timestamp=timestamp,
    )


def sign(config: SignRequestConfig) -> Headers:
    """Return just the signed headers for ``config``."""
    return build_signing_parts(config).headers


class SigV4Signer:
    """Signs requests with one set of credentials for one region and service."""

    def __init__(
            self,
            access_key: str,
            secret_key: str,
            region: str,
            service: Union[str, Service] = Service.EXECUTE_API,
            session_token: Optional[str] = None,
            legacy_header_order: bool = False,
    ) -> None:
        self.access_key = access_key
        self.secret_key = secret_key
        self.region = region
        self.service = service
        self.session_token = session_token
        self.legacy_header_order = legacy_header_order

    def sign(
            self,
            method: str,
            url: str,
            headers: Optional[Mapping[str, str]] = None,
            data: Any = None,
            params: Optional[Mapping[str, str]] = None,
    ) -> SigningParts:
        """
        Sign a request for ``url``.

        The query string of ``url`` is merged into ``params`` (explicit
        params win) so the URL can be passed as it will be sent.
        """
        endpoint, path, query_params = _split_url(url)
        query_params.update(params or {})
        config = SignRequestConfig(
            method=method,
            endpoint=endpoint,
            path=path,
            headers=headers,
            params=query_params,
            data=data,
            region=self.region,
            access_key=self.access_key,
            secret_key=self.secret_key,
            session_token=self.session_token,
            service_name=self.service,
            legacy_header_order=self.legacy_header_order,
        )
        return build_signing_parts(config)

    def create_headers(
            self,
            method: str,
            url: str,
            headers: Optional[Mapping[str, str]] = None,
            data: Any = None,
            params: Optional[Mapping[str, str]] = None,
    ) -> Headers:
        return self.sign(method, url, headers, data, params).headers


def _split_url(url: str) -> Tuple[str, str, QueryParams]:
    parts = urlsplit(url)
    params = {}
    if parts.query:
        # '+' is a literal plus on the wire, not an encoded space
        for pair in parts.query.split('&'):
            name, _, value = pair.partition('=')
            params[unquote(name)] = unquote(value)
    return f'{parts.scheme}://{parts.netloc}', parts.path, params
