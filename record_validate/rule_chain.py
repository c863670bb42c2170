"""Rule-chain parsing: "required|between:18,65" -> ordered rule items."""

import dataclasses
from collections.abc import Mapping
from typing import Any, List, NamedTuple

from .field_binder import field_table

REQUIRED = "required"
ITEM_SEPARATOR = "|"
PARAM_SEPARATOR = ":"


class RuleItem(NamedTuple):
    name: str
    param: str


class ParsedChain(NamedTuple):
    items: List[RuleItem]
    requires_value: bool


def parse_rule_item(item: str) -> RuleItem:
    """Split one chain item on its first colon into (name, param)."""
    name, _, param = item.partition(PARAM_SEPARATOR)
    return RuleItem(name.strip(), param)


def parse_chain(chain: str) -> ParsedChain:
    """
    Parse a rule chain.

    Items are separated by "|", a rule name is separated from its parameter
    by the first ":". Empty items are skipped. When the first item of the raw
    chain is "required", the field is checked even when its value is empty;
    otherwise empty or absent values skip the whole chain.

    Args:
        chain: Rule chain string, e.g. "required|length:3,20|alphaNum"

    Returns:
        ParsedChain with the ordered items and the requires_value flag
    """
    raw_items = chain.split(ITEM_SEPARATOR)
    requires_value = raw_items[0].strip() == REQUIRED
    items = [parse_rule_item(raw) for raw in raw_items if raw.strip()]
    return ParsedChain(items, requires_value)


def split_param(param: str) -> List[str]:
    """Split a rule parameter into its comma separated sub-values."""
    if param == "":
        return []
    return [p.strip() for p in param.split(",")]


def is_empty(value: Any) -> bool:
    """
    Decide whether a value counts as empty for optional-field skipping.

    Empty: None, "", empty sequences/sets/mappings, and records (Field based
    or dataclasses) whose fields are all empty, recursively. Numbers and
    booleans are never empty.
    """
    if value is None:
        return True
    if isinstance(value, (str, bytes)):
        return len(value) == 0
    if isinstance(value, (bool, int, float, complex)):
        return False
    if isinstance(value, Mapping):
        return len(value) == 0
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0

    fields = field_table(type(value))
    if fields:
        return all(is_empty(getattr(value, f.name)) for f in fields.values())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(is_empty(getattr(value, f.name)) for f in dataclasses.fields(value))
    return False
