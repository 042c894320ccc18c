"""HTTP header key names used by API clients.

Key names only; token values belong in the environment or secure storage.
"""

from __future__ import annotations

from enum import StrEnum


class ApiHeaderKey(StrEnum):
    AUTH_TOKEN = "x-auth-token"
    AUTHORIZATION = "authorization"
    CONTENT_TYPE = "content-type"
    ACCEPT = "accept"


API_HEADER_KEYS: dict[str, str] = {
    "auth_token": ApiHeaderKey.AUTH_TOKEN,
    "authorization": ApiHeaderKey.AUTHORIZATION,
    "content_type": ApiHeaderKey.CONTENT_TYPE,
    "accept": ApiHeaderKey.ACCEPT,
}
