"""
record-validate: declarative record validation with scenes

This library validates structured records (API payloads, form data) against
rules declared on the record type itself:
- Pipe-delimited rule chains ("required|between:18,65") backed by a rule registry
- Closures and record rule methods for custom checks
- Scenes selecting which fields a given use case validates
- Two-way sync between typed record fields and a plain data map
- First-error-wins reporting, with configuration errors told apart from violations

Example:
    from record_validate import Field, Validator

    class Signup(Validator):
        age = Field("age", int, default=0)

        def define_rules(self):
            return {"age": "required|between:18,65"}

    error = Signup(age=70).check()
"""

from .api import check_var
from .definition import DefinitionValidator
from .errors import (
    ConfigurationError,
    DuplicateRuleError,
    EmptyNameError,
    RuleViolation,
    ValidationError,
    is_system_error,
)
from .evaluator import Session
from .field_binder import Field
from .rule_registry import Rule, RuleRegistry, get_registry
from .rule_spec import MethodRef, rule_method
from .validator import Validator

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DefinitionValidator",
    "DuplicateRuleError",
    "EmptyNameError",
    "Field",
    "MethodRef",
    "Rule",
    "RuleRegistry",
    "RuleViolation",
    "Session",
    "ValidationError",
    "Validator",
    "check_var",
    "get_registry",
    "is_system_error",
    "rule_method",
]
