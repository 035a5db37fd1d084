"""
Request payload encoding.

The API parses bodies the way PHP parses form posts, so nested values
must use bracket notation: ``custom[field]=value`` for associative
containers and ``ids[]=value`` for lists. String values starting with
``@`` are file uploads and turn the request into a multipart post.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Iterable, Tuple
from urllib.parse import quote, quote_plus

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'
FILE_MARKER = '@'


@dataclass(frozen=True)
class FileMarker:
    """A local file to attach to the request; opened by the executor, never here."""
    path: str


@dataclass
class EncodedPayload:
    """Wire-ready request body."""

    content: Optional[str] = None
    fields: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, FileMarker] = field(default_factory=dict)

    @property
    def is_multipart(self) -> bool:
        return bool(self.files)

    @property
    def content_type(self) -> Optional[str]:
        # httpx sets the multipart boundary itself
        return None if self.is_multipart else FORM_CONTENT_TYPE


def is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def is_associative(data: Any) -> bool:
    """A container is associative when at least one of its keys is a string."""
    if isinstance(data, Mapping):
        return any(isinstance(key, str) for key in data)
    return False


def is_multidimensional(data: Mapping) -> bool:
    """True when the body holds at least one non-empty nested container."""
    return any(is_container(value) and len(value) > 0 for value in data.values())


def http_build_query(data: Any, prefix: Optional[str] = None) -> str:
    """
    Build a form-encoded query string.

    Nested containers expand to ``key[sub]=value`` with list items indexed
    by position. ``None`` values are skipped and booleans become 1/0.

    Args:
        data: Mapping (or sequence when called recursively)
        prefix: Bracketed parent key for nested values

    Returns:
        Encoded query string
    """
    pairs = []
    for key, value in _items(data):
        name = str(key) if prefix is None else f"{prefix}[{key}]"
        if is_container(value):
            pairs.append(http_build_query(value, name))
            continue
        text = _scalar(value)
        if text is not None:
            pairs.append(quote_plus(name) + '=' + quote_plus(text))
    return '&'.join(pair for pair in pairs if pair)


def http_build_multi_query(data: Any, key: Optional[str] = None) -> str:
    """
    Build a query string for a multi-dimensional body.

    Args:
        data: Body mapping, or a nested container when recursing
        key: Bracketed name of the container being encoded

    Returns:
        Encoded query string
    """
    if not data:
        return _encode_key(key or '') + '='

    associative = is_associative(data)
    query = []
    for k, value in _items(data):
        if is_container(value):
            nested = str(k) if key is None else f"{key}[{k}]"
            query.append(http_build_multi_query(value, nested))
            continue
        text = _scalar(value)
        if text is None:
            continue
        brackets = f"[{k}]" if associative else '[]'
        name = str(k) if key is None else key + brackets
        query.append(_encode_key(name) + '=' + quote(text, safe=''))
    return '&'.join(part for part in query if part)


def encode_payload(data: Optional[Mapping]) -> EncodedPayload:
    """
    Encode a POST/PUT body.

    Multi-dimensional bodies are sent as a bracket-notation string. Flat
    bodies have empty containers replaced by an empty string and ``@path``
    values replaced by file markers; any file marker makes the payload
    multipart.

    Args:
        data: Body mapping supplied by a resource wrapper

    Returns:
        EncodedPayload ready for the transport
    """
    data = data or {}

    if is_multidimensional(data):
        return EncodedPayload(content=http_build_multi_query(data))

    fields: Dict[str, Any] = {}
    files: Dict[str, FileMarker] = {}
    for key, value in data.items():
        if is_container(value):
            fields[key] = ''
        elif isinstance(value, str) and value.startswith(FILE_MARKER):
            files[key] = FileMarker(value[len(FILE_MARKER):])
        else:
            fields[key] = value

    if files:
        scalars = {key: _scalar(value) for key, value in fields.items()}
        return EncodedPayload(
            fields={key: text for key, text in scalars.items() if text is not None},
            files=files,
        )

    return EncodedPayload(content=http_build_query(fields))


def _items(data: Any) -> Iterable[Tuple[Any, Any]]:
    if isinstance(data, Mapping):
        return data.items()
    return enumerate(data)


def _scalar(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return '1' if value else '0'
    return str(value)


def _encode_key(name: str) -> str:
    return quote_plus(name, safe='[]')
