"""
Rule Registry - Named Rule Predicates

Maps rule names used in rule chains ("required", "between", ...) to predicate
functions with the signature:

    check(value, param, datas, title) -> violation or None

A violation is a message string (or an exception instance); None or "" means
the value passed.

Registries are plain objects and can be passed around explicitly. For
convenience there is also a lazily built process default:

    from record_validate.rule_registry import get_registry

    registry = get_registry()

    @registry.rule("evenNumber")
    def even_number(value, param, datas, title):
        if value % 2:
            return f"{title} must be even"

The default registry is pre-loaded with the built-in rules and any provider
modules listed under rule_modules in the engine config. Registration is not
synchronized: register everything before validating from several threads.

**Testing:**
```python
from record_validate.rule_registry import reset_registry

reset_registry()
```
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .errors import DuplicateRuleError, EmptyNameError

logger = logging.getLogger(__name__)

RuleCheck = Callable[[Any, str, Dict[str, Any], str], Any]


@dataclass(frozen=True)
class Rule:
    """A named rule predicate. Immutable once registered."""

    name: str
    check: RuleCheck

    def __call__(self, value: Any, param: str, datas: Dict[str, Any], title: str) -> Any:
        return self.check(value, param, datas, title)


class RuleRegistry:
    """Name -> Rule lookup table."""

    def __init__(self, rules: Union[Mapping[str, RuleCheck], Iterable] = None,
                 allow_overwrite: bool = True):
        """
        Initialize rule registry.

        Args:
            rules: Optional rules to register straight away (see register_many)
            allow_overwrite: Whether registering an existing name replaces it.
                When False, a second registration raises DuplicateRuleError.
        """
        self.allow_overwrite = allow_overwrite
        self._rules: Dict[str, Rule] = {}
        if rules:
            self.register_many(rules)

    def register(self, name: str, check: RuleCheck) -> Rule:
        """
        Register a rule predicate under name.

        Raises:
            EmptyNameError: If name is empty
            DuplicateRuleError: If name is taken and overwriting is not allowed
        """
        if not name:
            raise EmptyNameError("rule name is empty")
        if not callable(check):
            raise TypeError(f"rule [{name}] check must be callable, got {type(check).__name__}")
        if name in self._rules and not self.allow_overwrite:
            raise DuplicateRuleError(f"rule [{name}] is already registered")

        rule = Rule(name, check)
        self._rules[name] = rule
        return rule

    def register_many(self, rules: Union[Mapping[str, RuleCheck], Iterable]) -> List[Rule]:
        """
        Register several rules in order, stopping at the first failure.

        Rules registered before the failure stay registered.

        Args:
            rules: Mapping of name -> check, or iterable of Rule objects / (name, check) pairs
        """
        if isinstance(rules, Mapping):
            rules = rules.items()

        registered = []
        for entry in rules:
            if isinstance(entry, Rule):
                name, check = entry.name, entry.check
            else:
                name, check = entry
            registered.append(self.register(name, check))
        return registered

    def rule(self, name: str = None) -> Callable[[RuleCheck], RuleCheck]:
        """Decorator registering a function, under its own name unless name is given."""
        def decorator(check: RuleCheck) -> RuleCheck:
            self.register(name or check.__name__, check)
            return check
        return decorator

    def lookup(self, name: str) -> Optional[Rule]:
        return self._rules.get(name)

    def names(self) -> List[str]:
        return list(self._rules)

    def __contains__(self, name: str) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleRegistry({len(self._rules)} rules)"


_registry: Optional[RuleRegistry] = None


def build_default_registry(config=None) -> RuleRegistry:
    """
    Build a registry holding the built-in rules plus configured provider modules.

    Args:
        config: ConfigLoader instance (defaults to the process config)
    """
    from .builtin_rules import BUILTIN_RULES
    from .config_loader import get_config
    from .rule_loader import register_module_rules

    config = config or get_config()
    registry = RuleRegistry(BUILTIN_RULES, allow_overwrite=config.get_allow_rule_overwrite())
    for module_ref in config.get_rule_modules():
        register_module_rules(registry, module_ref)

    logger.info(
        "Default rule registry built",
        extra={'rule_count': len(registry), 'rule_modules': config.get_rule_modules()}
    )
    return registry


def get_registry() -> RuleRegistry:
    """Get or initialize the process default RuleRegistry."""
    global _registry
    if _registry is None:
        _registry = build_default_registry()
    return _registry


def reset_registry():
    """Reset the default registry (for testing)."""
    global _registry
    _registry = None
