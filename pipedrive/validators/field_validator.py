"""
Required Field Validator.

Checks a resource payload before it is sent to the API.
"""

from typing import Any, Mapping
from ..core.logging_config import get_logger
from ..core.interfaces import IValidator
from ..core.exceptions import MissingFieldError

logger = get_logger(__name__)


class RequiredFieldValidator(IValidator):
    """
    Validates that a payload contains a field.

    ``validate`` answers the question; ``require`` raises MissingFieldError
    with the wrapper's message when the answer is no.
    """

    def __init__(self, field: str, message: str):
        """
        Args:
            field: Name of the required field
            message: Error message raised when the field is missing
        """
        self.field = field
        self.message = message

    def validate(self, data: Any) -> bool:
        if not isinstance(data, Mapping):
            return False
        return data.get(self.field) is not None

    def require(self, data: Any) -> Mapping:
        """
        Ensure the field is present.

        Args:
            data: Resource payload

        Returns:
            The payload, unchanged

        Raises:
            MissingFieldError: If the field is missing or None
        """
        if not self.validate(data):
            logger.warning(f"Missing required field: {self.field}")
            raise MissingFieldError(self.message, field=self.field)
        return data
