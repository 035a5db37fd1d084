"""
Raw HTTP header parsing.

Turns a header block into a header map where repeated names collect
into a list, folded lines are joined to the header they continue, and
the status line is kept under the key ``0``.
"""

from typing import Any, Dict, Optional, Union, Mapping

import httpx

HeaderMap = Dict[Union[str, int], Any]

STATUS_LINE_KEY = 0


def parse_headers(raw_headers: str) -> HeaderMap:
    """
    Parse a raw header block into a header map.

    Args:
        raw_headers: Header lines in wire order, separated by newlines

    Returns:
        Mapping of header name to a string, or to a list of strings for
        repeated headers
    """
    headers: HeaderMap = {}
    key = ''

    for line in raw_headers.split('\n'):
        name, colon, value = line.partition(':')

        if colon:
            value = value.strip()
            if name not in headers:
                headers[name] = value
            elif isinstance(headers[name], list):
                headers[name].append(value)
            else:
                headers[name] = [headers[name], value]
            key = name
        elif line.startswith('\t') and key:
            folded = '\r\n\t' + line.strip()
            if isinstance(headers[key], list):
                headers[key][-1] += folded
            else:
                headers[key] += folded
        elif not key:
            headers[STATUS_LINE_KEY] = line.strip()

    return headers


def get_header(headers: Mapping, name: str, default: Any = None) -> Any:
    """
    Look up a header by name, ignoring case.

    Args:
        headers: Header map from ``parse_headers``
        name: Header name
        default: Value returned when the header is absent

    Returns:
        Header value (string or list of strings) or default
    """
    wanted = name.lower()
    for key, value in headers.items():
        if isinstance(key, str) and key.lower() == wanted:
            return value
    return default


def raw_header_block(response: httpx.Response) -> str:
    """
    Rebuild the header block of a response as it appeared on the wire.

    Args:
        response: Response returned by the transport

    Returns:
        Status line followed by one ``Name: value`` line per header
    """
    version = response.http_version or 'HTTP/1.1'
    lines = [f"{version} {response.status_code} {response.reason_phrase}".rstrip()]
    for name, value in response.headers.raw:
        lines.append(f"{_text(name)}: {_text(value)}")
    return '\r\n'.join(lines) + '\r\n'


def status_line(headers: Mapping) -> Optional[str]:
    """Return the status line captured by ``parse_headers``, if any."""
    return headers.get(STATUS_LINE_KEY)


def _text(value: Union[str, bytes]) -> str:
    if isinstance(value, bytes):
        return value.decode('latin-1')
    return value
