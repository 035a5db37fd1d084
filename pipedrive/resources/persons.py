"""
Pipedrive Persons methods.

Persons are your contacts, the customers you are doing Deals with.
Each Person can belong to an Organization. Persons should not be
confused with Users.
"""

from typing import Any, Dict, List, Mapping

from .base import Resource


class Persons(Resource):
    path = 'persons'
    item_name = 'person'
    add_field = 'name'

    def get_by_email(self, email: str) -> Dict[str, Any]:
        """
        Return the person with a specific email.

        Args:
            email: Email address, compared case-insensitively

        Returns:
            The matching person, or an empty dict
        """
        email_list = self.requester.get('persons/find', {'term': email, 'search_by_email': True})
        if not email_list or not email_list.get('data'):
            return {}
        for candidate in email_list['data']:
            if str(candidate.get('email', '')).lower() == email.lower():
                return candidate
        return {}

    def search(self, term: str) -> List[Any]:
        """Return the persons matching a search term, or an empty list."""
        person_list = self.requester.get('searchResults', {'term': term, 'item_type': 'person'})
        if not person_list or not person_list.get('data'):
            return []
        return person_list['data']

    def deals(self, data: Mapping[str, Any]) -> Any:
        return self._related(data, 'deals')

    def products(self, data: Mapping[str, Any]) -> Any:
        return self._related(data, 'products')

    def activities(self, data: Mapping[str, Any]) -> Any:
        return self._related(data, 'activities')
