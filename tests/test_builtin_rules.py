"""
Tests for the built-in rule predicates

Each rule is called directly with the registry signature
check(value, param, datas, title).
"""
from datetime import date

import pytest

from record_validate import ConfigurationError
from record_validate.builtin_rules import BUILTIN_RULES, resolve_operand, to_date, to_number


def run(rule, value, param="", datas=None, title="field"):
    return BUILTIN_RULES[rule](value, param, datas or {}, title)


def passes(rule, value, param="", datas=None):
    return run(rule, value, param, datas) is None


class TestTypeRules:
    """number, integer, float, boolean."""

    def test_number(self):
        assert passes("number", "12345")
        assert passes("number", 7)
        assert not passes("number", "12a")
        assert not passes("number", -1)
        assert not passes("number", True)

    def test_integer(self):
        assert passes("integer", "-12")
        assert passes("integer", 3)
        assert not passes("integer", "1.5")

    def test_float(self):
        assert passes("float", "1.5")
        assert passes("float", 2)
        assert not passes("float", "abc")

    def test_boolean(self):
        for value in (True, 0, 1, "true", "False", "0"):
            assert passes("boolean", value), value
        assert not passes("boolean", "yes")


class TestPatternRules:
    """Character class rules."""

    def test_alpha_num(self):
        assert passes("alphaNum", "abc123")
        assert not passes("alphaNum", "abc 123")
        assert not passes("alphaNum", 123)

    def test_alpha_dash(self):
        assert passes("alphaDash", "user_name-1")
        assert not passes("alphaDash", "user.name")

    def test_chs(self):
        assert passes("chs", "中文")
        assert not passes("chs", "中文a")

    def test_chs_dash_char(self):
        """chsDashChar also accepts half and full width brackets."""
        assert passes("chsDashChar", "名称_(一)【二】")
        assert not passes("chsDashChar", "名称!")

    def test_email(self):
        assert passes("email", "someone@example.com")
        assert not passes("email", "someone@")

    def test_mobile(self):
        assert passes("mobile", "13812345678")
        assert not passes("mobile", "12812345678")

    def test_url(self):
        assert passes("url", "https://example.com/path")
        assert not passes("url", "example.com")

    def test_ip(self):
        assert passes("ip", "10.0.0.1")
        assert passes("ip", "::1", "ipv6")
        assert not passes("ip", "::1", "ipv4")
        assert not passes("ip", "300.1.1.1")

    def test_regex_full_match(self):
        assert passes("regex", "abc", "[a-z]+")
        assert not passes("regex", "abc1", "[a-z]+")


class TestSetAndRangeRules:
    """in, notIn, between, length, min, max, arrayIn."""

    def test_in(self):
        assert passes("in", "b", "a,b,c")
        assert passes("in", 2, "1,2")
        assert run("in", "d", "a,b,c") == "field must be one of a,b,c"

    def test_not_in(self):
        assert passes("notIn", "d", "a,b")
        assert not passes("notIn", "a", "a,b")

    def test_between(self):
        assert passes("between", 18, "18,65")
        assert passes("between", "65", "18,65")
        assert run("between", 70, "18,65", title="age") == "age must be between 18 and 65"

    def test_between_bad_parameter(self):
        with pytest.raises(ConfigurationError):
            run("between", 1, "18")

    def test_not_between(self):
        assert passes("notBetween", 5, "10,20")
        assert not passes("notBetween", 15, "10,20")

    def test_length(self):
        assert passes("length", "abcd", "4")
        assert passes("length", [1, 2], "1,3")
        assert not passes("length", "abcdef", "1,3")

    def test_length_bad_parameter(self):
        with pytest.raises(ConfigurationError):
            run("length", "abc", "x")

    def test_min_max(self):
        assert passes("min", "abc", "3")
        assert not passes("min", "ab", "3")
        assert passes("max", "abc", "3")
        assert not passes("max", "abcd", "3")

    def test_array_in(self):
        """arrayIn needs every element to be an allowed value."""
        assert passes("arrayIn", ["12", 23], "12,23,34")
        assert run("arrayIn", ["12", "99"], "12,23,34") == "field items must be within 12,23,34"
        assert not passes("arrayIn", "12", "12,23")


class TestComparisonRules:
    """eq, neq, gt, egt, lt, elt, confirm, different."""

    def test_literal_comparisons(self):
        assert passes("eq", "5", "5.0")
        assert passes("neq", "a", "b")
        assert passes("gt", 3, "2")
        assert passes("egt", 2, "2")
        assert passes("lt", 1, "2")
        assert passes("elt", 2, "2")
        assert not passes("gt", 2, "2")

    def test_non_numeric_ordering_fails(self):
        assert not passes("gt", "abc", "1")

    def test_sibling_field_operand(self):
        datas = {"min_age": 18}
        assert passes("gt", 20, "min_age", datas)
        assert run("gt", 10, "min_age", datas, title="age") == "age must be greater than 18"

    def test_confirm_and_different(self):
        datas = {"password": "secret"}
        assert passes("confirm", "secret", "password", datas)
        assert not passes("confirm", "other", "password", datas)
        assert passes("different", "other", "password", datas)
        assert not passes("different", "secret", "password", datas)


class TestDateRules:
    def test_date(self):
        assert passes("date", "2024-02-29")
        assert passes("date", "29/02/2024", "%d/%m/%Y")
        assert not passes("date", "2023-02-29")

    def test_after_before(self):
        assert passes("after", "2024-03-01", "2024-01-01")
        assert passes("before", date(2023, 12, 31), "2024-01-01")
        assert not passes("after", "2023-01-01", "start", {"start": "2024-01-01"})


class TestHelpers:
    def test_to_number(self):
        assert to_number("1.5") == 1.5
        assert to_number(3) == 3
        assert to_number(True) is None
        assert to_number("x") is None

    def test_to_date(self):
        assert to_date("2024-01-02").day == 2
        assert to_date(5) is None

    def test_resolve_operand(self):
        assert resolve_operand("other", {"other": 1}) == 1
        assert resolve_operand("5", {}) == "5"


class TestRequired:
    def test_required(self):
        assert run("required", "", title="name") == "name is required"
        assert passes("required", 0)
        assert passes("required", False)
        assert not passes("required", [])
