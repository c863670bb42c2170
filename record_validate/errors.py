"""
Error types and the per-session error latch.

Two kinds of error come out of a validation pass:

- RuleViolation: the input data failed a rule. Safe to show to an end user.
- ConfigurationError: the validator definition itself is wrong (unknown rule,
  undefined scene, bad binding type...). Its message carries the record's
  system-error prefix so callers can route it to logs instead of users.
"""

from typing import Any, Optional


class ValidationError(Exception):
    """Base class for everything a validation pass can report."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class RuleViolation(ValidationError):
    """A rule predicate rejected a value."""


class ConfigurationError(ValidationError):
    """The validator definition is wrong and should be fixed by the developer."""


class EmptyNameError(ConfigurationError):
    """A rule was registered without a name."""


class DuplicateRuleError(ConfigurationError):
    """A rule name was registered twice on a registry that forbids overwriting."""


def with_prefix(message: str, prefix: str) -> str:
    """Prepend prefix to message unless it is already there."""
    if prefix and not message.startswith(prefix):
        return prefix + message
    return message


def is_system_error(error: Optional[BaseException], prefix: Optional[str] = None) -> bool:
    """
    Tell whether error came from a misconfigured validator.

    Args:
        error: Error returned by a check, or None
        prefix: System-error prefix of the record; when omitted only the type is checked

    Returns:
        True for configuration errors, False for violations and None
    """
    if error is None:
        return False
    if prefix is not None:
        return str(error).startswith(prefix)
    return isinstance(error, ConfigurationError)


def to_message(violation: Any) -> Optional[str]:
    """
    Normalize whatever a rule returned into a message, or None for a pass.

    Rules may return None, "" or a bool (all passes), a message string, or an
    exception instance.
    """
    if violation is None or isinstance(violation, bool):
        return None
    if isinstance(violation, BaseException):
        return str(violation) or type(violation).__name__
    message = str(violation)
    return message or None


class ErrorLatch:
    """
    Holds at most one error.

    The first error set wins; later calls leave it untouched and hand back
    the error already held.
    """

    def __init__(self):
        self._error: Optional[ValidationError] = None

    @property
    def error(self) -> Optional[ValidationError]:
        return self._error

    def is_set(self) -> bool:
        return self._error is not None

    def set(self, error: ValidationError) -> ValidationError:
        if self._error is not None:
            return self._error
        self._error = error
        return error

    def clear(self) -> None:
        self._error = None
