"""
Tests for check_var()
"""
from record_validate import ConfigurationError, RuleViolation, check_var, is_system_error


class TestCheckVar:
    """Test the standalone single-value check."""

    def test_pass(self):
        assert check_var(12, "required|integer|between:1,100", "page size") is None

    def test_violation_uses_title(self):
        error = check_var(500, "required|integer|between:1,100", "page size")

        assert isinstance(error, RuleViolation)
        assert str(error) == "page size must be between 1 and 100"

    def test_default_title(self):
        assert str(check_var("", "required")) == "value is required"

    def test_optional_empty_value_skipped(self):
        assert check_var("", "email") is None
        assert check_var(None, "number|between:1,2") is None

    def test_message_override_by_rule_name(self):
        error = check_var("abc", "required|number", "age", {"number": "age must be digits"})
        assert str(error) == "age must be digits"

    def test_unknown_rule_is_prefixed_configuration_error(self):
        error = check_var(1, "required|noSuchRule")

        assert isinstance(error, ConfigurationError)
        assert is_system_error(error, "validate: ")
        assert "noSuchRule" in str(error)

    def test_bad_parameter_is_prefixed_configuration_error(self):
        error = check_var(5, "between:oops")

        assert isinstance(error, ConfigurationError)
        assert str(error).startswith("validate: ")

    def test_predicates_get_empty_datas(self, registry):
        seen = []
        registry.register("spy", lambda value, param, datas, title: seen.append(datas))

        assert check_var(1, "spy", registry=registry) is None
        assert seen == [{}]

    def test_custom_registry(self, registry):
        registry.register("even", lambda value, param, datas, title: None if value % 2 == 0 else f"{title} must be even")

        assert check_var(4, "even", registry=registry) is None
        assert str(check_var(3, "even", "n", registry=registry)) == "n must be even"

    def test_array_rule(self):
        assert check_var(["12", "23"], "arrayIn:12,23,34") is None
        assert isinstance(check_var(["99"], "arrayIn:12,23,34"), RuleViolation)
