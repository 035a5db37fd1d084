"""
Tests for endpoint building and payload encoding.
"""

from urllib.parse import parse_qsl, urlsplit

from pipedrive.clients.endpoint import build_endpoint
from pipedrive.clients.encoding import (
    FileMarker,
    encode_payload,
    http_build_query,
    http_build_multi_query,
    is_associative,
    is_multidimensional,
)

BASE_URL = 'https://api.pipedrive.com/v1'


class TestBuildEndpoint:
    """Test build_endpoint."""

    def test_token_only(self):
        """Test the token is appended when no parameters are given."""
        url = build_endpoint(BASE_URL, 'secret', 'deals')

        assert url == 'https://api.pipedrive.com/v1/deals?api_token=secret'

    def test_parameters_are_form_encoded(self):
        """Test query parameters precede the token."""
        url = build_endpoint(BASE_URL, 'secret', 'persons/find', {'term': 'Jane Doe'})

        assert url == 'https://api.pipedrive.com/v1/persons/find?term=Jane+Doe&api_token=secret'

    def test_token_overrides_caller_value(self):
        """Test a caller supplied api_token is replaced by the session token."""
        url = build_endpoint(BASE_URL, 'secret', 'deals', {'api_token': 'other', 'start': 0})

        assert url.count('api_token=') == 1
        assert dict(parse_qsl(urlsplit(url).query)) == {'start': '0', 'api_token': 'secret'}

    def test_caller_params_are_not_mutated(self):
        """Test the caller's mapping is copied."""
        params = {'term': 'x'}

        build_endpoint(BASE_URL, 'secret', 'persons/find', params)

        assert params == {'term': 'x'}

    def test_booleans_and_none(self):
        """Test booleans become 1/0 and None values are skipped."""
        url = build_endpoint(BASE_URL, 't', 'persons/find',
                             {'search_by_email': True, 'archived': False, 'owner': None})

        assert url.endswith('?search_by_email=1&archived=0&api_token=t')

    def test_nested_query_uses_indices(self):
        """Test nested query values expand with bracket notation."""
        url = build_endpoint(BASE_URL, 't', 'deals', {'ids': [4, 5]})

        assert url.endswith('?ids%5B0%5D=4&ids%5B1%5D=5&api_token=t')


class TestMultiQuery:
    """Test bracket-notation encoding of nested bodies."""

    def test_list_uses_empty_brackets(self):
        """Test list-like values append without indices."""
        assert http_build_multi_query({'ids': [1, 2, 3]}) == 'ids[]=1&ids[]=2&ids[]=3'

    def test_mapping_uses_named_brackets(self):
        """Test associative values keep their keys."""
        body = {'custom': {'field1': 'a', 'field2': 'b'}}

        assert http_build_multi_query(body) == 'custom[field1]=a&custom[field2]=b'

    def test_deep_nesting(self):
        """Test nested mappings chain brackets."""
        assert http_build_multi_query({'a': {'b': {'c': 'd'}}}) == 'a[b][c]=d'

    def test_list_of_mappings_indexes_containers(self):
        """Test containers inside a list are addressed by position."""
        body = {'items': [{'id': 1}, {'id': 2}]}

        assert http_build_multi_query(body) == 'items[0][id]=1&items[1][id]=2'

    def test_empty_nested_value_is_assigned(self):
        """Test an empty nested value encodes as key=."""
        body = {'ids': [1], 'tags': []}

        assert http_build_multi_query(body) == 'ids[]=1&tags='

    def test_values_are_raw_encoded(self):
        """Test values are percent-encoded with %20 for spaces."""
        body = {'name': 'Jane Doe', 'notes': ['a b&c']}

        assert http_build_multi_query(body) == 'name=Jane%20Doe&notes[]=a%20b%26c'

    def test_integer_keys_are_list_like(self):
        """Test a mapping with only integer keys is encoded as a list."""
        assert http_build_multi_query({'ids': {0: 'a', 1: 'b'}}) == 'ids[]=a&ids[]=b'

    def test_keys_are_encoded(self):
        """Test reserved characters in keys are escaped but brackets are not."""
        assert http_build_multi_query({'a&b': ['x']}) == 'a%26b[]=x'

    def test_none_leaves_are_dropped(self):
        """Test None values produce no pair."""
        assert http_build_multi_query({'ids': [1, None], 'x': {'y': None}}) == 'ids[]=1'


class TestEncodePayload:
    """Test encode_payload."""

    def test_flat_body(self):
        """Test a flat body is form-encoded."""
        payload = encode_payload({'name': 'Jane Doe', 'org_id': 3, 'active': True})

        assert not payload.is_multipart
        assert payload.content == 'name=Jane+Doe&org_id=3&active=1'
        assert payload.content_type == 'application/x-www-form-urlencoded'

    def test_flat_body_with_empty_value(self):
        """Test an empty nested value in a flat body becomes key=."""
        payload = encode_payload({'name': 'x', 'tags': []})

        assert payload.content == 'name=x&tags='

    def test_multidimensional_body(self):
        """Test nested bodies use bracket notation."""
        payload = encode_payload({'ids': [1, 2, 3]})

        assert payload.content == 'ids[]=1&ids[]=2&ids[]=3'

    def test_file_marker(self):
        """Test @path values become file markers and force multipart."""
        payload = encode_payload({'file': '@/tmp/contract.pdf', 'deal_id': 5, 'tags': {}})

        assert payload.is_multipart
        assert payload.content is None
        assert payload.content_type is None
        assert payload.files == {'file': FileMarker('/tmp/contract.pdf')}
        assert payload.fields == {'deal_id': '5', 'tags': ''}

    def test_empty_body(self):
        """Test an empty body encodes to an empty string."""
        assert encode_payload({}).content == ''
        assert encode_payload(None).content == ''

    def test_flat_encoding_is_reversible(self):
        """Test the remote side reconstructs a flat body."""
        body = {'name': 'Jane Doe', 'email': 'j+d@example.com', 'visible_to': 3}

        decoded = parse_qsl(encode_payload(body).content)

        assert decoded == [(key, str(value)) for key, value in body.items()]


class TestShapeHelpers:
    """Test container classification helpers."""

    def test_is_associative(self):
        assert is_associative({'a': 1})
        assert is_associative({0: 'a', 'b': 2})
        assert not is_associative({0: 'a'})
        assert not is_associative([1, 2])

    def test_is_multidimensional(self):
        assert is_multidimensional({'a': [1]})
        assert not is_multidimensional({'a': [], 'b': 1})
        assert not is_multidimensional({})

    def test_http_build_query_skips_empty_containers(self):
        """Test empty nested query values produce no pair."""
        assert http_build_query({'a': [], 'b': 'c'}) == 'b=c'
