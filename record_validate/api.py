"""
Standalone checks outside a record's scene system.

Example:
    from record_validate import check_var

    error = check_var(page_size, "required|integer|between:1,100", "page size")
    if error:
        raise error
"""

import logging
from typing import Any, Mapping, Optional

from .config_loader import get_config
from .errors import ConfigurationError, RuleViolation, ValidationError, with_prefix
from .evaluator import outcome
from .rule_chain import is_empty, parse_chain
from .rule_registry import get_registry

logger = logging.getLogger(__name__)


def check_var(value: Any, rule: str, title: str = "", messages: Optional[Mapping[str, str]] = None,
              registry=None) -> Optional[ValidationError]:
    """
    Validate a single value against a rule chain.

    Only registered rules are available (there is no record to hold rule
    methods). Rule predicates receive an empty datas map.

    Args:
        value: Value to validate
        rule: Rule chain, e.g. "required|number"
        title: Display name used in violation messages (defaults to "value")
        messages: Optional rule name -> message overrides
        registry: RuleRegistry to use (defaults to the process registry)

    Returns:
        The first error, or None when the value passes
    """
    registry = registry if registry is not None else get_registry()
    messages = messages or {}
    title = title or "value"
    prefix = get_config().get_check_var_prefix()

    chain = parse_chain(rule)
    if not chain.requires_value and is_empty(value):
        return None

    for item in chain.items:
        found = registry.lookup(item.name)
        if found is None:
            return ConfigurationError(with_prefix(f"rule [{item.name}] is not defined", prefix))
        try:
            error = outcome(found.check(value, item.param, {}, title))
        except (RuleViolation, ConfigurationError) as e:
            error = e

        if isinstance(error, ConfigurationError):
            return type(error)(with_prefix(str(error), prefix))
        if error is not None:
            if messages.get(item.name):
                error = RuleViolation(messages[item.name])
            logger.debug(f"Value '{title}' failed rule '{item.name}': {error}")
            return error
    return None
