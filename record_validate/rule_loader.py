"""
Rule Loader - Pluggable Rule Provider Modules

Rules beyond the built-in table come from provider modules. A provider is any
Python module exposing a RULES mapping of rule name -> check function:

    # my_rules.py
    def even(value, param, datas, title):
        if value % 2:
            return f"{title} must be even"

    RULES = {"even": even}

A provider is referenced either by dotted module name ("myapp.validation.rules")
or by path to a .py file ("./rules/my_rules.py"). Providers listed under
rule_modules in the engine config are loaded into the default registry.
"""

import hashlib
import importlib
import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import List

logger = logging.getLogger(__name__)

RULES_ATTR = "RULES"


def load_rule_module(module_ref: str) -> ModuleType:
    """
    Import a rule provider module.

    Args:
        module_ref: Dotted module name, or path to a .py file

    Returns:
        Loaded Python module

    Raises:
        ImportError: If the module cannot be found or loaded
    """
    if module_ref.endswith(".py"):
        rule_path = Path(module_ref).resolve()
        if not rule_path.exists():
            raise ImportError(f"Rule provider file not found: {rule_path}")

        # Derive a stable module name from the path so reloading the same file is idempotent
        path_key = hashlib.sha256(str(rule_path).encode()).hexdigest()[:12]
        module_name = f"record_validate.providers.{rule_path.stem}_{path_key}"
        spec = importlib.util.spec_from_file_location(module_name, rule_path)
        if spec is None or spec.loader is None:
            raise ImportError(
                f"Cannot create module spec for rule provider at {rule_path}"
            )
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    return importlib.import_module(module_ref)


def register_module_rules(registry, module_ref: str) -> List[str]:
    """
    Load a provider module and register every rule in its RULES mapping.

    Args:
        registry: RuleRegistry to register into
        module_ref: Dotted module name or .py path

    Returns:
        Names of the registered rules

    Raises:
        AttributeError: If the module has no RULES mapping
    """
    module = load_rule_module(module_ref)
    if not hasattr(module, RULES_ATTR):
        raise AttributeError(
            f"Rule provider '{module_ref}' has no '{RULES_ATTR}' mapping. "
            f"All providers must define {RULES_ATTR} = {{name: check}}."
        )

    rules = getattr(module, RULES_ATTR)
    registered = registry.register_many(rules)
    names = [rule.name for rule in registered]
    logger.info(f"Loaded {len(names)} rules from provider {module_ref}", extra={'rules': names})
    return names
