"""
Base class for resource wrappers.

A resource maps its operations onto the four request primitives of an
executor; it holds no state of its own.
"""

from typing import Any, Dict, Mapping, Optional

from ..core.interfaces import IRequester
from ..validators.field_validator import RequiredFieldValidator


class Resource:
    """
    Common operations of a Pipedrive collection.

    Subclasses set ``path``, ``item_name`` and ``add_field``.
    """

    path = ''
    item_name = 'item'
    add_field = 'name'

    def __init__(self, requester: IRequester):
        self.requester = requester
        self.add_validator = RequiredFieldValidator(
            self.add_field,
            f'You must include a "{self.add_field}" field when inserting a {self.item_name}',
        )

    def get_all(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Return all items, filtered by optional query parameters."""
        return self.requester.get(f"{self.path}/", params or {})

    def get_by_id(self, item_id: Any) -> Any:
        return self.requester.get(f"{self.path}/{item_id}")

    def get_by_name(self, name: str) -> Any:
        """Return the items whose name matches a search term."""
        return self.requester.get(f"{self.path}/find", {'term': name})

    def add(self, data: Mapping[str, Any]) -> Any:
        """
        Add an item.

        Raises:
            MissingFieldError: If the required field is missing
        """
        self.add_validator.require(data)
        return self.requester.post(self.path, data)

    def update(self, item_id: Any, data: Optional[Mapping[str, Any]] = None) -> Any:
        return self.requester.put(f"{self.path}/{item_id}", data or {})

    def delete(self, item_id: Any) -> Any:
        return self.requester.delete(f"{self.path}/{item_id}")

    def _related(self, data: Mapping[str, Any], relation: str) -> Any:
        """List items of another collection associated with one item."""
        RequiredFieldValidator(
            'id',
            f'You must include the "id" of the {self.item_name} when getting {relation}',
        ).require(data)
        return self.requester.get(f"{self.path}/{data['id']}/{relation}", _paging(data))


def _paging(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: data[key] for key in ('start', 'limit') if key in data}
