"""
This submodule contains the result types returned by toggle evaluation.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """
    Why an evaluation fell back to the caller's default value.
    """

    FLAG_NOT_FOUND = 'FLAG_NOT_FOUND'
    """
    The key was not a valid slug, or no toggle with that slug exists in the current snapshot.
    """

    GENERAL = 'GENERAL'
    """
    An unexpected error occurred during evaluation. Details are in the log.
    """


class EvaluationResult:
    """
    The outcome of resolving a boolean toggle, including whether the caller's default was used
    because of an error.
    """

    __slots__ = ['__value', '__error_kind', '__message']

    def __init__(self, value: bool, error_kind: Optional[ErrorKind] = None, message: Optional[str] = None):
        """Constructs an instance."""
        self.__value = value
        self.__error_kind = error_kind
        self.__message = message

    @property
    def value(self) -> bool:
        """The result of the evaluation, or the default value if ``error_kind`` is set."""
        return self.__value

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        """The kind of error that occurred, or None for a normal result (including a disabled toggle)."""
        return self.__error_kind

    @property
    def message(self) -> Optional[str]:
        """A human-readable description of the error, if any."""
        return self.__message

    def is_error(self) -> bool:
        return self.__error_kind is not None

    def __eq__(self, other) -> bool:
        return isinstance(other, EvaluationResult) and self.value == other.value and self.error_kind == other.error_kind and self.message == other.message

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    def __str__(self) -> str:
        return "(value=%s, error_kind=%s, message=%s)" % (self.value, self.error_kind, self.message)

    def __repr__(self) -> str:
        return self.__str__()


def error_result(default_value: bool, error_kind: ErrorKind, message: Optional[str] = None) -> EvaluationResult:
    return EvaluationResult(default_value, error_kind, message)
