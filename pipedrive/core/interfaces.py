"""
Interface definitions using Python Protocols.

IRequester is the contract resource wrappers rely on: the four verb
primitives of a request executor. IValidator is the contract of the
precondition checks wrappers run before calling it.

Example usage:
    class RecordingRequester:
        def get(self, method, params=None):
            return {'data': []}
        ...

    # RecordingRequester satisfies IRequester without inheriting from it
    persons = Persons(RecordingRequester())
"""

from typing import Protocol, Any, Mapping, Optional, runtime_checkable


@runtime_checkable
class IValidator(Protocol):
    """
    Protocol defining the contract for validator classes.

    Implementations:
    - RequiredFieldValidator: checks a resource payload holds a field
    """

    def validate(self, data: Any) -> bool:
        """
        Validate data according to the validator's rules.

        Args:
            data: The data to validate

        Returns:
            True if the data is valid, False otherwise
        """
        ...


@runtime_checkable
class IRequester(Protocol):
    """
    Protocol for the four request primitives.

    Each returns the decoded response envelope (a mapping with at least
    ``data``) or raises TransportError / ApiError.

    Implementations:
    - RequestExecutor
    """

    def get(self, method: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        ...

    def post(self, method: str, data: Mapping[str, Any]) -> Any:
        ...

    def put(self, method: str, data: Mapping[str, Any]) -> Any:
        ...

    def delete(self, method: str) -> Any:
        ...
