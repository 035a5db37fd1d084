"""
Tests for the resource wrappers and the Pipedrive client.
"""

import pytest
import httpx
from unittest.mock import Mock
from pipedrive import Pipedrive
from pipedrive.config.settings import Settings, set_settings
from pipedrive.core.exceptions import MissingFieldError
from pipedrive.resources import Deals, Organizations, Persons


class TestPersons:
    """Test Persons wrapper."""

    def setup_method(self):
        """Set up test fixtures."""
        self.requester = Mock()
        self.persons = Persons(self.requester)

    def test_get_all(self):
        self.persons.get_all({'start': 0})

        self.requester.get.assert_called_once_with('persons/', {'start': 0})

    def test_get_by_id_and_name(self):
        self.persons.get_by_id(7)
        self.persons.get_by_name('Jane')

        self.requester.get.assert_any_call('persons/7')
        self.requester.get.assert_any_call('persons/find', {'term': 'Jane'})

    def test_add_requires_name(self):
        """Test add refuses a payload without name."""
        with pytest.raises(MissingFieldError) as exc_info:
            self.persons.add({'email': 'jane@example.com'})

        assert str(exc_info.value) == 'You must include a "name" field when inserting a person'
        assert exc_info.value.field == 'name'
        self.requester.post.assert_not_called()

    def test_add(self):
        self.requester.post.return_value = {'data': {'id': 1}}

        result = self.persons.add({'name': 'Jane'})

        assert result == {'data': {'id': 1}}
        self.requester.post.assert_called_once_with('persons', {'name': 'Jane'})

    def test_update_and_delete(self):
        self.persons.update(4, {'name': 'Janet'})
        self.persons.delete(4)

        self.requester.put.assert_called_once_with('persons/4', {'name': 'Janet'})
        self.requester.delete.assert_called_once_with('persons/4')

    def test_get_by_email_matches_case_insensitively(self):
        """Test the first candidate with the same email is returned."""
        self.requester.get.return_value = {'data': [
            {'id': 1, 'email': 'other@example.com'},
            {'id': 2, 'email': 'Jane@Example.com'},
        ]}

        person = self.persons.get_by_email('jane@example.com')

        assert person['id'] == 2
        self.requester.get.assert_called_once_with(
            'persons/find', {'term': 'jane@example.com', 'search_by_email': True}
        )

    def test_get_by_email_without_match(self):
        self.requester.get.return_value = {'data': None}

        assert self.persons.get_by_email('nobody@example.com') == {}

    def test_search(self):
        self.requester.get.return_value = {'data': [{'id': 3}]}

        assert self.persons.search('Jane') == [{'id': 3}]
        self.requester.get.assert_called_once_with('searchResults', {'term': 'Jane', 'item_type': 'person'})

    def test_search_without_results(self):
        self.requester.get.return_value = None

        assert self.persons.search('Jane') == []

    def test_related_collections_require_id(self):
        """Test deals/products/activities need the person id."""
        for operation, relation in [
            (self.persons.deals, 'deals'),
            (self.persons.products, 'products'),
            (self.persons.activities, 'activities'),
        ]:
            with pytest.raises(MissingFieldError) as exc_info:
                operation({})
            assert str(exc_info.value) == f'You must include the "id" of the person when getting {relation}'

        self.requester.get.assert_not_called()

    def test_related_collections(self):
        self.persons.deals({'id': 5})
        self.persons.activities({'id': 5, 'start': 10, 'limit': 50})

        self.requester.get.assert_any_call('persons/5/deals', {})
        self.requester.get.assert_any_call('persons/5/activities', {'start': 10, 'limit': 50})


class TestDealsAndOrganizations:
    """Test Deals and Organizations wrappers."""

    def setup_method(self):
        self.requester = Mock()

    def test_deal_add_requires_title(self):
        deals = Deals(self.requester)

        with pytest.raises(MissingFieldError) as exc_info:
            deals.add({'value': 100})

        assert 'title' in str(exc_info.value)
        deals.add({'title': 'Big deal', 'value': 100})
        self.requester.post.assert_called_once_with('deals', {'title': 'Big deal', 'value': 100})

    def test_deal_products(self):
        Deals(self.requester).products({'id': 8})

        self.requester.get.assert_called_once_with('deals/8/products', {})

    def test_organization_operations(self):
        organizations = Organizations(self.requester)

        organizations.get_by_name('Acme')
        organizations.persons({'id': 3, 'limit': 10})
        organizations.deals({'id': 3})

        self.requester.get.assert_any_call('organizations/find', {'term': 'Acme'})
        self.requester.get.assert_any_call('organizations/3/persons', {'limit': 10})
        self.requester.get.assert_any_call('organizations/3/deals', {})

    def test_organization_add_requires_name(self):
        with pytest.raises(MissingFieldError):
            Organizations(self.requester).add({'owner_id': 1})


class TestPipedriveClient:
    """Test the client wiring resources to one executor."""

    def test_resources_share_executor(self):
        """Test every resource talks through the client's executor."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={'success': True, 'data': {'id': 1}})

        with Pipedrive('tok', 'https://api.test/v1', transport=httpx.MockTransport(handler)) as pipedrive:
            result = pipedrive.persons.get_by_id(1)
            pipedrive.deals.add({'title': 'New'})

            assert pipedrive.persons.requester is pipedrive.executor
            assert pipedrive.organizations.requester is pipedrive.executor

        assert result['data'] == {'id': 1}
        assert requests[0].url.path == '/v1/persons/1'
        assert requests[1].content == b'title=New'
        assert pipedrive.executor.closed

    def test_missing_token(self, monkeypatch):
        """Test a client without token fails fast."""
        monkeypatch.delenv('PIPEDRIVE_API_TOKEN', raising=False)
        set_settings(Settings())
        try:
            with pytest.raises(ValueError):
                Pipedrive()
        finally:
            set_settings(None)

    def test_token_from_settings(self, monkeypatch):
        monkeypatch.setenv('PIPEDRIVE_API_TOKEN', 'from-env')
        monkeypatch.setenv('PIPEDRIVE_URL', 'https://company.pipedrive.com/v1')
        set_settings(Settings())
        try:
            with Pipedrive() as pipedrive:
                assert pipedrive.executor.api_token == 'from-env'
                assert pipedrive.executor.url == 'https://company.pipedrive.com/v1'
        finally:
            set_settings(None)
