"""Access policy for generated endpoints."""

import secrets
from typing import Any, Callable, Coroutine, Optional

from fastapi import Security
from fastapi.security import APIKeyHeader

from autoapi.constants import ErrorMessages
from autoapi.exceptions import AuthenticationError

from .config_groups import AuthConfig

AuthDependency = Callable[..., Coroutine[Any, Any, Optional[str]]]


def build_auth_dependency(auth: AuthConfig) -> Optional[AuthDependency]:
    """Build the FastAPI dependency enforcing the configured policy.

    Args:
        auth: Access policy configuration

    Returns:
        Dependency requiring a valid API key, or None when access is open
    """
    if not auth.auth_enabled:
        return None

    scheme = APIKeyHeader(name=auth.api_key_header, auto_error=False)
    accepted = tuple(key.encode("utf-8") for key in auth.api_keys)

    async def require_api_key(api_key: Optional[str] = Security(scheme)) -> str:
        if not api_key:
            raise AuthenticationError(ErrorMessages.AUTH_REQUIRED)
        candidate = api_key.encode("utf-8")
        if not any(secrets.compare_digest(candidate, key) for key in accepted):
            raise AuthenticationError(ErrorMessages.INVALID_API_KEY)
        return api_key

    return require_api_key
