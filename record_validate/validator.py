"""
Validator base class - the record contract.

A record subclasses Validator, declares its bound fields with Field and
describes its rules through the define_* methods:

    class UserParams(Validator):
        username = Field("username", str, default="")
        password = Field("password", str, default="")
        user_id = Field("user_id", int, default=0)

        def define_rules(self):
            return {
                "username": "required|alphaNum",
                "password": "required|length:6,32",
                "user_id": "required|gt:0",
            }

        def define_titles(self):
            return {"username": "User name"}

        def define_scenes(self):
            return {"login": ["username", "password"], "info": ["user_id"]}

    params = UserParams(username="admin", password="secret1")
    error = params.check_scene("login")

define_rules/define_titles/define_messages/define_scenes are merged along the
class hierarchy: a subclass only lists what it adds or overrides. They are
evaluated once, at construction.

An instance holds no per-call state: each check builds its own Session.
Concurrent checks on one instance still race on the final write-back, so keep
one in-flight check per instance.
"""

from typing import Any, Dict, List, Mapping, Optional

from .config_loader import get_config
from .errors import ValidationError
from .evaluator import Evaluator, Session
from .field_binder import field_table, from_map, to_map
from .rule_registry import get_registry


class Validator:
    """Base class for validated records."""

    # Prefix marking configuration errors; derived from the class when unset
    err_prefix: Optional[str] = None
    # Empty scene policy ("none" / "all"); the engine config decides when unset
    empty_scene: Optional[str] = None

    def __init__(self, datas: Mapping[str, Any] = None, registry=None, config=None, **fields):
        """
        Bind the record to the engine.

        Args:
            datas: Initial data map; keys with a declared Field are also
                assigned to the record
            registry: RuleRegistry to resolve rule names (defaults to the process registry)
            config: ConfigLoader (defaults to the process config)
            **fields: Initial values for declared fields, by attribute name

        Raises:
            TypeError: If a keyword is not a declared field or has the wrong type
            ConfigurationError: If a datas value does not fit its field
        """
        self.config = config or get_config()
        self.registry = registry if registry is not None else get_registry()

        declared = {f.name for f in field_table(type(self)).values()}
        for name, value in fields.items():
            if name not in declared:
                raise TypeError(f"{type(self).__name__} has no field '{name}'")
            setattr(self, name, value)

        self.rules: Dict[str, Any] = self._merge_definitions("define_rules")
        self.titles: Dict[str, str] = self._merge_definitions("define_titles")
        self.messages: Dict[str, str] = self._merge_definitions("define_messages")
        self.scenes: Dict[str, List[str]] = {
            name: list(keys or []) for name, keys in self._merge_definitions("define_scenes").items()
        }

        self.datas: Dict[str, Any] = to_map(self)
        if datas:
            self.set_datas(datas)

    def _merge_definitions(self, method_name: str) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for klass in reversed(type(self).__mro__):
            define = vars(klass).get(method_name)
            if define is not None:
                merged.update(define(self) or {})
        return merged

    # Record contract, overridden by subclasses

    def define_rules(self) -> Dict[str, Any]:
        """Field key -> chain string, closure (value, datas, title) or MethodRef."""
        return {}

    def define_titles(self) -> Dict[str, str]:
        """Field key -> display name used in messages."""
        return {}

    def define_messages(self) -> Dict[str, str]:
        """Messages keyed "field.rule", replacing that rule's violation message."""
        return {}

    def define_scenes(self) -> Dict[str, List[str]]:
        """Scene name -> ordered field keys validated in that scene."""
        return {}

    def handle_datas(self, datas: Dict[str, Any], scene: str) -> Any:
        """
        Post-validation hook, called after every field passed.

        May change datas in place (changes are written back onto the record's
        fields) or return a violation to fail the check late.
        """
        return None

    # Explicit append operations

    def add_rules(self, rules: Mapping[str, Any]) -> None:
        self.rules.update(rules)

    def add_titles(self, titles: Mapping[str, str]) -> None:
        self.titles.update(titles)

    def add_messages(self, messages: Mapping[str, str]) -> None:
        self.messages.update(messages)

    def add_scenes(self, scenes: Mapping[str, List[str]]) -> None:
        self.scenes.update({name: list(keys) for name, keys in scenes.items()})

    # Data binding

    def set_datas(self, datas: Mapping[str, Any]) -> None:
        """
        Merge datas into the data map and onto the matching fields.

        Raises:
            ConfigurationError: If a value does not fit its field; nothing is changed
        """
        from_map(self, datas)
        self.datas.update(datas)

    def set_data(self, key: str, value: Any) -> None:
        self.set_datas({key: value})

    def error_prefix(self) -> str:
        if self.err_prefix:
            return self.err_prefix
        configured = self.config.get_system_error_prefix()
        if configured:
            return configured
        cls = type(self)
        return f"validator {cls.__module__}.{cls.__qualname__}: "

    def get_empty_scene(self) -> str:
        return self.empty_scene or self.config.get_empty_scene_policy()

    # Entry points

    def run(self, scene: str = "") -> Session:
        """Validate and return the whole Session."""
        return Evaluator(self).run(scene)

    def check(self) -> Optional[ValidationError]:
        """Validate every rule; return the first error or None."""
        return self.run("").error

    def check_scene(self, scene: str) -> Optional[ValidationError]:
        """Validate the fields of one scene; return the first error or None."""
        return self.run(scene).error

    def validate(self, scene: str = "") -> Dict[str, Any]:
        """
        Validate and raise the first error.

        Returns:
            The validated data map

        Raises:
            RuleViolation: If the data failed a rule
            ConfigurationError: If the validator is misconfigured
        """
        session = self.run(scene)
        if session.error is not None:
            raise session.error
        return session.data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(datas={self.datas!r})"
