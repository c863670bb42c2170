"""
Built-in rule predicates.

Every rule has the registry signature check(value, param, datas, title) and
returns a message on violation, None otherwise. Parameters with several
values are comma separated ("between:18,65", "in:a,b,c").

Comparison rules (eq, gt, confirm, after, ...) accept either a literal or the
key of a sibling field in datas as their parameter.
"""

import ipaddress
import re
from collections.abc import Sized
from datetime import date, datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from .errors import ConfigurationError
from .rule_chain import is_empty, split_param

ALPHA = re.compile(r"^[A-Za-z]+$")
ALPHA_NUM = re.compile(r"^[A-Za-z0-9]+$")
ALPHA_DASH = re.compile(r"^[A-Za-z0-9_\-]+$")
CHS = re.compile(r"^[一-龥]+$")
CHS_ALPHA = re.compile(r"^[一-龥A-Za-z]+$")
CHS_ALPHA_NUM = re.compile(r"^[一-龥A-Za-z0-9]+$")
CHS_DASH = re.compile(r"^[一-龥A-Za-z0-9_\-]+$")
# chsDash plus half and full width brackets
CHS_DASH_CHAR = re.compile(r"^[一-龥A-Za-z0-9_\-()（）\[\]【】]+$")
DIGITS = re.compile(r"^\d+$")
INTEGER = re.compile(r"^[+-]?\d+$")
FLOAT = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
EMAIL = re.compile(r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9\-]+(\.[A-Za-z0-9\-]+)*\.[A-Za-z]{2,}$")
MOBILE = re.compile(r"^1[3-9]\d{9}$")

BOOLEAN_VALUES = {"0", "1", "true", "false"}
URL_SCHEMES = {"http", "https", "ftp", "ftps"}


def to_number(value: Any) -> Optional[float]:
    """Numeric value of an int, float or numeric string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and FLOAT.match(value.strip()):
        return float(value)
    return None


def to_date(value: Any, fmt: str = "") -> Optional[datetime]:
    """Parse value into a datetime using fmt (strftime style) or ISO 8601."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    try:
        if fmt:
            return datetime.strptime(value, fmt)
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def resolve_operand(param: str, datas: Dict[str, Any]) -> Any:
    """A comparison parameter names a sibling field when datas has that key."""
    if datas and param in datas:
        return datas[param]
    return param


def _matches(pattern, value: Any) -> bool:
    return isinstance(value, str) and bool(pattern.match(value))


def _size(value: Any) -> Optional[int]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return len(str(value))
    if isinstance(value, Sized):
        return len(value)
    return None


def _int_param(param: str, rule: str) -> int:
    try:
        return int(param)
    except ValueError:
        raise ConfigurationError(f"rule [{rule}] expects an integer parameter, got {param!r}")


def _pattern_rule(pattern, description: str):
    def check(value, param, datas, title):
        if not _matches(pattern, value):
            return f"{title} {description}"
    return check


def required(value, param, datas, title):
    if is_empty(value):
        return f"{title} is required"


def number(value, param, datas, title):
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return None
    if not _matches(DIGITS, value):
        return f"{title} must be a number"


def integer(value, param, datas, title):
    if isinstance(value, int) and not isinstance(value, bool):
        return None
    if not _matches(INTEGER, value):
        return f"{title} must be an integer"


def float_(value, param, datas, title):
    if to_number(value) is None:
        return f"{title} must be a float"


def boolean(value, param, datas, title):
    if isinstance(value, bool) or value in (0, 1):
        return None
    if not (isinstance(value, str) and value.lower() in BOOLEAN_VALUES):
        return f"{title} must be a boolean"


def email(value, param, datas, title):
    if not _matches(EMAIL, value):
        return f"{title} must be a valid email address"


def mobile(value, param, datas, title):
    if not _matches(MOBILE, value):
        return f"{title} must be a valid mobile number"


def url(value, param, datas, title):
    if isinstance(value, str):
        parsed = urlparse(value)
        if parsed.scheme in URL_SCHEMES and parsed.netloc:
            return None
    return f"{title} must be a valid URL"


def ip(value, param, datas, title):
    if not isinstance(value, str):
        return f"{title} must be a valid IP address"
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        return f"{title} must be a valid IP address"
    if param == "ipv4" and address.version != 4:
        return f"{title} must be a valid IPv4 address"
    if param == "ipv6" and address.version != 6:
        return f"{title} must be a valid IPv6 address"


def date_(value, param, datas, title):
    if to_date(value, param) is None:
        return f"{title} must be a valid date"


def regex(value, param, datas, title):
    if value is None or not re.fullmatch(param, str(value)):
        return f"{title} has an invalid format"


def in_(value, param, datas, title):
    if str(value) not in split_param(param):
        return f"{title} must be one of {param}"


def not_in(value, param, datas, title):
    if str(value) in split_param(param):
        return f"{title} must not be one of {param}"


def _bounds(param: str, rule: str):
    values = split_param(param)
    low, high = (to_number(v) for v in values) if len(values) == 2 else (None, None)
    if low is None or high is None:
        raise ConfigurationError(f"rule [{rule}] expects a 'min,max' parameter, got {param!r}")
    return values, low, high


def between(value, param, datas, title):
    values, low, high = _bounds(param, "between")
    n = to_number(value)
    if n is None or not low <= n <= high:
        return f"{title} must be between {values[0]} and {values[1]}"


def not_between(value, param, datas, title):
    values, low, high = _bounds(param, "notBetween")
    n = to_number(value)
    if n is None or low <= n <= high:
        return f"{title} must not be between {values[0]} and {values[1]}"


def length(value, param, datas, title):
    size = _size(value)
    values = split_param(param)
    if len(values) == 2:
        low, high = _int_param(values[0], "length"), _int_param(values[1], "length")
        if size is None or not low <= size <= high:
            return f"{title} length must be between {low} and {high}"
    elif size is None or size != _int_param(param, "length"):
        return f"{title} length must be {param}"


def min_(value, param, datas, title):
    size = _size(value)
    if size is None or size < _int_param(param, "min"):
        return f"{title} length must be at least {param}"


def max_(value, param, datas, title):
    size = _size(value)
    if size is None or size > _int_param(param, "max"):
        return f"{title} length must be at most {param}"


def _compare(value, param, datas):
    """Return (left, right) as numbers when both are numeric, else as strings."""
    other = resolve_operand(param, datas)
    left, right = to_number(value), to_number(other)
    if left is not None and right is not None:
        return left, right, other
    return None, None, other


def eq(value, param, datas, title):
    left, right, other = _compare(value, param, datas)
    if left is not None:
        if left != right:
            return f"{title} must be equal to {other}"
    elif str(value) != str(other):
        return f"{title} must be equal to {other}"


def neq(value, param, datas, title):
    left, right, other = _compare(value, param, datas)
    if left is not None:
        if left == right:
            return f"{title} must not be equal to {other}"
    elif str(value) == str(other):
        return f"{title} must not be equal to {other}"


def _ordering_rule(op, description: str):
    def check(value, param, datas, title):
        left, right, other = _compare(value, param, datas)
        if left is None or not op(left, right):
            return f"{title} must be {description} {other}"
    return check


gt = _ordering_rule(lambda a, b: a > b, "greater than")
egt = _ordering_rule(lambda a, b: a >= b, "greater than or equal to")
lt = _ordering_rule(lambda a, b: a < b, "less than")
elt = _ordering_rule(lambda a, b: a <= b, "less than or equal to")


def confirm(value, param, datas, title):
    if value != (datas or {}).get(param):
        return f"{title} must match {param}"


def different(value, param, datas, title):
    if value == (datas or {}).get(param):
        return f"{title} must be different from {param}"


def _date_order_rule(op, description: str):
    def check(value, param, datas, title):
        other = resolve_operand(param, datas)
        left, right = to_date(value), to_date(other)
        if left is None or right is None or not op(left, right):
            return f"{title} must be {description} {other}"
    return check


after = _date_order_rule(lambda a, b: a > b, "after")
before = _date_order_rule(lambda a, b: a < b, "before")


def array_in(value, param, datas, title):
    allowed = set(split_param(param))
    if not isinstance(value, (list, tuple, set, frozenset)):
        return f"{title} must be a list"
    for item in value:
        if str(item) not in allowed:
            return f"{title} items must be within {param}"


BUILTIN_RULES = {
    "required": required,
    "number": number,
    "integer": integer,
    "float": float_,
    "boolean": boolean,
    "alpha": _pattern_rule(ALPHA, "must contain letters only"),
    "alphaNum": _pattern_rule(ALPHA_NUM, "must contain letters and digits only"),
    "alphaDash": _pattern_rule(ALPHA_DASH, "must contain letters, digits, underscores and dashes only"),
    "chs": _pattern_rule(CHS, "must contain Chinese characters only"),
    "chsAlpha": _pattern_rule(CHS_ALPHA, "must contain Chinese characters and letters only"),
    "chsAlphaNum": _pattern_rule(CHS_ALPHA_NUM, "must contain Chinese characters, letters and digits only"),
    "chsDash": _pattern_rule(CHS_DASH, "must contain Chinese characters, letters, digits, underscores and dashes only"),
    "chsDashChar": _pattern_rule(CHS_DASH_CHAR, "contains unsupported characters"),
    "email": email,
    "mobile": mobile,
    "url": url,
    "ip": ip,
    "date": date_,
    "regex": regex,
    "in": in_,
    "notIn": not_in,
    "between": between,
    "notBetween": not_between,
    "length": length,
    "min": min_,
    "max": max_,
    "eq": eq,
    "neq": neq,
    "gt": gt,
    "egt": egt,
    "lt": lt,
    "elt": elt,
    "confirm": confirm,
    "different": different,
    "after": after,
    "before": before,
    "arrayIn": array_in,
}
