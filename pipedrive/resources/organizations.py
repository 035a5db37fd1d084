"""
Pipedrive Organizations methods.

Organizations are companies and other kinds of organizations you are
making Deals with. Persons can be related to Organizations.
"""

from typing import Any, Mapping

from .base import Resource


class Organizations(Resource):
    path = 'organizations'
    item_name = 'organization'
    add_field = 'name'

    def persons(self, data: Mapping[str, Any]) -> Any:
        return self._related(data, 'persons')

    def deals(self, data: Mapping[str, Any]) -> Any:
        return self._related(data, 'deals')
