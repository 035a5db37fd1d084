"""
Resource wrappers for the Pipedrive collections.
"""

from .base import Resource
from .persons import Persons
from .deals import Deals
from .organizations import Organizations

__all__ = [
    'Resource',
    'Persons',
    'Deals',
    'Organizations',
]
