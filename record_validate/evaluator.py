"""
Evaluator - One Validation Pass Over a Record

Walks the check rules of the requested scene in order and stops at the first
error. Every pass gets its own Session (scene, check rules, data snapshot and
error latch); nothing about the pass is stored on the record until it has
succeeded and the data is written back.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .errors import (
    ConfigurationError,
    ErrorLatch,
    RuleViolation,
    ValidationError,
    to_message,
    with_prefix,
)
from .field_binder import from_map
from .rule_chain import is_empty
from .rule_spec import InlineClosure, MethodRef, NamedChain, rule_method_table, to_rule_spec
from .scene_resolver import resolve_scene

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """State of one validation call."""

    scene: str
    data: Dict[str, Any]
    prefix: str = ""
    check_rules: Dict[str, Any] = field(default_factory=dict)
    latch: ErrorLatch = field(default_factory=ErrorLatch)

    @property
    def error(self) -> Optional[ValidationError]:
        return self.latch.error

    @property
    def ok(self) -> bool:
        return not self.latch.is_set()

    def set_error(self, error: Any) -> ValidationError:
        """Latch a violation (or route a ConfigurationError to set_system_error)."""
        if isinstance(error, ConfigurationError):
            return self.set_system_error(error)
        if not isinstance(error, RuleViolation):
            error = RuleViolation(to_message(error) or "unknown error")
        return self.latch.set(error)

    def set_system_error(self, error: Any) -> ValidationError:
        """Latch a configuration error, prefixed with the record's system-error tag."""
        if self.latch.is_set():
            return self.latch.error
        error_cls = type(error) if isinstance(error, ConfigurationError) else ConfigurationError
        return self.latch.set(error_cls(with_prefix(str(error), self.prefix)))


def outcome(result: Any) -> Optional[ValidationError]:
    """Turn what a rule, closure or hook returned into an error, or None for a pass."""
    if isinstance(result, ValidationError):
        return result
    message = to_message(result)
    if message is None:
        return None
    return RuleViolation(message)


class Evaluator:
    """Runs rule chains of a bound record, first error wins."""

    def __init__(self, validator):
        """
        Args:
            validator: Validator instance supplying rules, titles, messages,
                scenes, the data snapshot, the registry and the hook
        """
        self.validator = validator
        self.registry = validator.registry
        self.rule_methods = rule_method_table(type(validator))

    def run(self, scene: str = "") -> Session:
        """
        Execute one validation pass.

        Args:
            scene: Scene to validate; empty validates every rule

        Returns:
            The finished Session; session.error is None when everything passed
        """
        v = self.validator
        session = Session(scene=scene or "", data=dict(v.datas), prefix=v.error_prefix())

        try:
            session.check_rules = resolve_scene(
                session.scene, v.rules, v.scenes, v.get_empty_scene()
            )
            for key, spec in session.check_rules.items():
                self._check_field(session, key, spec)
                if not session.ok:
                    break
            else:
                self._finish(session)
        except ConfigurationError as e:
            session.set_system_error(e)

        if not session.ok and isinstance(session.error, ConfigurationError):
            logger.warning(
                f"Validator misconfigured: {session.error}",
                extra={'validator': type(v).__name__, 'scene': session.scene}
            )
        return session

    def title(self, key: str) -> str:
        return self.validator.titles.get(key) or key

    def _check_field(self, session: Session, key: str, raw_spec: Any) -> None:
        spec = to_rule_spec(raw_spec)
        value = session.data.get(key)
        title = self.title(key)

        if isinstance(spec, NamedChain):
            if not spec.requires_value and (key not in session.data or is_empty(value)):
                logger.debug(f"Field '{key}' is empty and optional, skipped")
                return
            for item in spec.items:
                check = self._resolve(item.name)
                error = self._call(check, value, item.param, session.data, title)
                if error is not None:
                    self._fail(session, key, item.name, error)
                    return

        elif isinstance(spec, InlineClosure):
            error = self._call(spec.func, value, session.data, title)
            if error is not None:
                self._fail(session, key, None, error)

        elif isinstance(spec, MethodRef):
            check = self._resolve_method(spec.name)
            error = self._call(check, value, "", session.data, title)
            if error is not None:
                self._fail(session, key, spec.name, error)

    def _resolve(self, name: str) -> Callable:
        """Registry first, then the record's rule methods."""
        rule = self.registry.lookup(name)
        if rule is not None:
            return rule.check
        return self._resolve_method(name)

    def _resolve_method(self, name: str) -> Callable:
        method = self.rule_methods.get(name)
        if method is None:
            raise ConfigurationError(f"rule [{name}] is not defined")
        return method.__get__(self.validator, type(self.validator))

    def _call(self, func: Callable, *args) -> Optional[ValidationError]:
        try:
            return outcome(func(*args))
        except RuleViolation as e:
            return e

    def _fail(self, session: Session, key: str, rule_name: Optional[str],
              error: ValidationError) -> None:
        if isinstance(error, RuleViolation) and rule_name:
            override = self.validator.messages.get(f"{key}.{rule_name}")
            if override:
                error = RuleViolation(override)
        logger.debug(
            f"Field '{key}' failed rule '{rule_name or 'closure'}': {error}",
            extra={'validator': type(self.validator).__name__, 'scene': session.scene}
        )
        session.set_error(error)

    def _finish(self, session: Session) -> None:
        """
        Run the post-validation hook, then write the data back onto the record.

        While the hook runs, the session data is the record's live data map, so
        changes made through set_data/set_datas and changes made to the datas
        argument land in the same map. A late failure restores the map held
        before the pass.
        """
        v = self.validator
        previous = v.datas
        v.datas = session.data
        try:
            error = self._call(v.handle_datas, session.data, session.scene)
        except Exception:
            v.datas = previous
            raise
        if error is not None:
            v.datas = previous
            session.set_error(error)
            return

        try:
            from_map(v, session.data)
        except ConfigurationError:
            v.datas = previous
            raise
