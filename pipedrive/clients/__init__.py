"""
HTTP layer: endpoint building, payload encoding, header parsing and
the request executors.
"""

from .endpoint import build_endpoint
from .encoding import EncodedPayload, FileMarker, encode_payload, http_build_query, http_build_multi_query
from .headers import parse_headers, get_header
from .executor import RequestExecutor, AsyncRequestExecutor, RequestDescriptor

__all__ = [
    'build_endpoint',
    'EncodedPayload',
    'FileMarker',
    'encode_payload',
    'http_build_query',
    'http_build_multi_query',
    'parse_headers',
    'get_header',
    'RequestExecutor',
    'AsyncRequestExecutor',
    'RequestDescriptor',
]
