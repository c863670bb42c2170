"""
Validators defined in YAML instead of code.

A definition file holds the same four tables a Validator subclass defines:

    # user.yaml
    rules:
      username: required|alphaNum
      password: required|length:6,32
    titles:
      username: User name
    messages:
      username.required: Please enter a user name
    scenes:
      login: [username, password]

    validator = DefinitionValidator("user.yaml", datas=payload)
    error = validator.check_scene("login")

Definitions are schema-checked on load. Only chain strings can be expressed;
closures and rule methods need a Validator subclass (which may itself extend
DefinitionValidator).
"""

import os
from typing import Any, Dict, List, Mapping, Union

from .config_loader import check_schema, get_config
from .schemas import DEFINITION_SCHEMA
from .validator import Validator


class DefinitionValidator(Validator):
    """Validator whose rules, titles, messages and scenes come from a definition."""

    def __init__(self, definition: Union[str, os.PathLike, Mapping[str, Any]],
                 datas: Mapping[str, Any] = None, registry=None, config=None, **fields):
        """
        Args:
            definition: Definition dict, or path / URI of a YAML definition
            datas: Initial data map
            registry: RuleRegistry (defaults to the process registry)
            config: ConfigLoader (defaults to the process config)

        Raises:
            ConfigurationError: If the definition does not match the definition schema
        """
        config = config or get_config()
        if isinstance(definition, Mapping):
            definition = dict(definition)
            check_schema(definition, DEFINITION_SCHEMA, "validator definition")
        else:
            definition = config.load_definition(definition)

        self.definition: Dict[str, Any] = definition
        if definition.get("err_prefix"):
            self.err_prefix = definition["err_prefix"]
        super().__init__(datas=datas, registry=registry, config=config, **fields)

    def define_rules(self) -> Dict[str, Any]:
        return dict(self.definition.get("rules") or {})

    def define_titles(self) -> Dict[str, str]:
        return dict(self.definition.get("titles") or {})

    def define_messages(self) -> Dict[str, str]:
        return dict(self.definition.get("messages") or {})

    def define_scenes(self) -> Dict[str, List[str]]:
        return dict(self.definition.get("scenes") or {})
