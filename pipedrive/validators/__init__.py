"""
Validators module for resource payloads.
"""

from .field_validator import RequiredFieldValidator

__all__ = [
    'RequiredFieldValidator',
]
