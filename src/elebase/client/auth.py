"""Authorization header signing for Elebase API requests.

Two mutually exclusive schemes are supported:

- Basic: `Basic base64("{user}:{token}")` for a pre-issued API token.
- HMAC: `Elebase {public}:{hmac}:{timestamp}:{user}` for a public/private key
  pair. The HMAC-SHA256 covers the serialized body followed by the Unix
  timestamp (or the timestamp alone when there is no body), so the server can
  bound the replay window.

Example:
    >>> from elebase.client.auth import sign_basic
    >>> sign_basic("secret", user="u1")
    'Basic dTE6c2VjcmV0'
"""
from __future__ import annotations
import base64
import hashlib
import hmac
import json
import time
from typing import Any, Mapping, Optional, Union

from .constants import BASIC_SCHEME, HMAC_SCHEME
from .models import ClientConfig, KeyPairCredential, TokenCredential


def serialize_body(data: Any) -> Optional[str]:
    """Serialize a request body to the compact JSON string that is signed and sent."""
    if data is None:
        return None
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def sign_basic(token: Optional[str], data: Any = None, user: Optional[str] = None) -> str:
    """Build a Basic Authorization header value.

    Args:
        token: API token. An empty or missing token yields an empty string.
        data: Request body. Accepted for signature parity with `sign_hmac`;
            Basic signatures do not cover the body.
        user: User ID or authentication token (default: empty).

    Returns:
        Header value, e.g. `Basic dTE6c2VjcmV0`.
    """
    if not token:
        return ""
    user = user if isinstance(user, str) else ""
    encoded = base64.b64encode(f"{user}:{token}".encode("utf-8")).decode("ascii")
    return f"{BASIC_SCHEME} {encoded}"


def sign_hmac(
    key: Union[KeyPairCredential, Mapping[str, Any], None],
    data: Any = None,
    user: Optional[str] = None,
    *,
    timestamp: Optional[Union[int, str]] = None,
) -> str:
    """Build an HMAC Authorization header value.

    Args:
        key: Public/private key pair, as a credential or a mapping with
            `public` and `private` entries.
        data: Request body to bind into the signature.
        user: User ID or authentication token (omitted when empty).
        timestamp: Unix epoch seconds. Defaults to the current time rounded half up.

    Returns:
        Header value `Elebase {public}:{hmac}:{timestamp}:{user}` with empty
        segments left out, or an empty string when either key half is missing.
    """
    if isinstance(key, KeyPairCredential):
        public, private = key.public, key.private
    elif isinstance(key, Mapping):
        public, private = key.get("public"), key.get("private")
    else:
        public = private = None
    if not public or not private:
        return ""

    body = serialize_body(data)
    user = user if isinstance(user, str) else ""
    stamp = str(timestamp) if timestamp is not None else str(int(time.time() + 0.5))
    message = body + stamp if body is not None else stamp

    digest = hmac.new(
        private.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).hexdigest()

    return f"{HMAC_SCHEME} " + ":".join(part for part in (public, digest, stamp, user) if part)


def authorization_header(config: ClientConfig, data: Any = None, user: Optional[str] = None) -> str:
    """Sign with whichever credential the configuration carries."""
    credential = config.credential
    if isinstance(credential, TokenCredential):
        return sign_basic(credential.token, data, user)
    return sign_hmac(credential, data, user)


__all__ = ["serialize_body", "sign_basic", "sign_hmac", "authorization_header"]
