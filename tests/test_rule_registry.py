"""
Tests for RuleRegistry
"""
import pytest

from record_validate import DuplicateRuleError, EmptyNameError, Rule, RuleRegistry
from record_validate.rule_registry import get_registry, reset_registry


def always_pass(value, param, datas, title):
    return None


def always_fail(value, param, datas, title):
    return f"{title} failed"


class TestRegister:
    """Test register() and its name policy."""

    def test_register_and_lookup(self):
        """A registered rule can be looked up by name."""
        registry = RuleRegistry()
        rule = registry.register("ok", always_pass)

        assert isinstance(rule, Rule)
        assert registry.lookup("ok") is rule
        assert "ok" in registry

    def test_lookup_unknown_returns_none(self):
        """Looking up an unknown name returns None instead of raising."""
        assert RuleRegistry().lookup("missing") is None

    def test_empty_name_rejected(self):
        """An empty rule name raises EmptyNameError."""
        with pytest.raises(EmptyNameError):
            RuleRegistry().register("", always_pass)

    def test_non_callable_rejected(self):
        """A check that is not callable is refused."""
        with pytest.raises(TypeError):
            RuleRegistry().register("bad", "not callable")

    def test_overwrite_allowed_by_default(self):
        """Re-registering a name replaces the previous rule."""
        registry = RuleRegistry()
        registry.register("r", always_pass)
        registry.register("r", always_fail)

        assert registry.lookup("r").check is always_fail

    def test_overwrite_forbidden(self):
        """A registry built with allow_overwrite=False rejects duplicates."""
        registry = RuleRegistry(allow_overwrite=False)
        registry.register("r", always_pass)

        with pytest.raises(DuplicateRuleError):
            registry.register("r", always_fail)
        assert registry.lookup("r").check is always_pass

    def test_rule_is_immutable(self):
        """Rules are frozen once created."""
        rule = RuleRegistry().register("ok", always_pass)
        with pytest.raises(AttributeError):
            rule.name = "other"

    def test_rule_is_callable(self):
        """Calling a Rule delegates to its check."""
        rule = Rule("fail", always_fail)
        assert rule("x", "", {}, "Name") == "Name failed"


class TestRegisterMany:
    """Test register_many()."""

    def test_mapping(self):
        """A mapping of name -> check is registered in order."""
        registry = RuleRegistry()
        registry.register_many({"a": always_pass, "b": always_fail})
        assert registry.names() == ["a", "b"]

    def test_pairs_and_rules(self):
        """Pairs and Rule objects can be mixed."""
        registry = RuleRegistry()
        registry.register_many([("a", always_pass), Rule("b", always_fail)])
        assert len(registry) == 2

    def test_stops_at_first_failure_without_rollback(self):
        """The first failure is raised; earlier registrations remain."""
        registry = RuleRegistry()
        with pytest.raises(EmptyNameError):
            registry.register_many([("a", always_pass), ("", always_pass), ("c", always_pass)])

        assert "a" in registry
        assert "c" not in registry


class TestDecorator:
    """Test the rule() decorator."""

    def test_registers_under_function_name(self):
        registry = RuleRegistry()

        @registry.rule()
        def even(value, param, datas, title):
            if value % 2:
                return f"{title} must be even"

        assert registry.lookup("even").check is even

    def test_registers_under_explicit_name(self):
        registry = RuleRegistry()

        @registry.rule("isEven")
        def even(value, param, datas, title):
            return None

        assert "isEven" in registry
        assert "even" not in registry


class TestDefaultRegistry:
    """Test the process default registry."""

    def test_singleton(self):
        """get_registry() returns the same instance until reset."""
        assert get_registry() is get_registry()

    def test_reset_builds_new_instance(self):
        first = get_registry()
        reset_registry()
        assert get_registry() is not first

    def test_preloaded_with_builtins(self):
        """The default registry already knows the built-in rules."""
        registry = get_registry()
        for name in ("required", "between", "alphaNum", "arrayIn"):
            assert name in registry
