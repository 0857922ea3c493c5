"""
AWS Signature Version 4 - Standalone Header Signing

This package computes AWS Signature Version 4 headers for an HTTP request
without depending on botocore or any HTTP client.

    from awssign import SignRequestConfig, sign

    headers = sign(SignRequestConfig(
        method='GET',
        endpoint='https://abc123.execute-api.us-east-1.amazonaws.com',
        path='/prod/items',
        region='us-east-1',
        access_key='AKIDEXAMPLE',
        secret_key='...',
    ))
"""

from .config import Headers, QueryParams, ResolvedConfig, Service, SignRequestConfig, resolve_config
from .exceptions import MissingConfigError, SigV4Error
from .sigv4 import (
    SigningParts,
    SigV4Signer,
    build_authorization_header,
    build_canonical_request,
    build_credential_scope,
    build_signature,
    build_signed_headers,
    build_signing_key,
    build_signing_parts,
    build_string_to_sign,
    sign,
)

__version__ = "0.1.0"
__all__ = [
    "sign",
    "build_signing_parts",
    "SigV4Signer",
    "SignRequestConfig",
    "ResolvedConfig",
    "SigningParts",
    "Service",
    "Headers",
    "QueryParams",
    "resolve_config",
    "SigV4Error",
    "MissingConfigError",
    "build_canonical_request",
    "build_credential_scope",
    "build_string_to_sign",
    "build_signing_key",
    "build_signature",
    "build_signed_headers",
    "build_authorization_header",
]
