"""
Pipedrive Deals methods.

Deals are ongoing, won or lost sales made to an Organization or to a
Person.
"""

from typing import Any, Mapping

from .base import Resource


class Deals(Resource):
    path = 'deals'
    item_name = 'deal'
    add_field = 'title'

    def products(self, data: Mapping[str, Any]) -> Any:
        """Lists products attached to a deal."""
        return self._related(data, 'products')
