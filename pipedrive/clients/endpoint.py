"""
Endpoint construction.

Every request carries the API token as a query parameter. The token is
written last, so a caller value under ``api_token`` is always replaced.
"""

from typing import Any, Mapping, Optional

from .encoding import http_build_query

TOKEN_PARAM = 'api_token'


def build_endpoint(base_url: str, api_token: str, method: str,
                   params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Build the full request URL for an API method.

    Args:
        base_url: API root, e.g. ``https://api.pipedrive.com/v1``
        api_token: Token injected as ``api_token``
        method: API method path, e.g. ``persons/find``
        params: Optional query parameters

    Returns:
        ``base_url/method?query`` string
    """
    query = dict(params or {})
    query.pop(TOKEN_PARAM, None)
    query[TOKEN_PARAM] = api_token
    return f"{base_url}/{method}?{http_build_query(query)}"
