"""JSON schemas for the engine config and for declarative validator definitions."""

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "empty_scene": {"enum": ["none", "all"]},
        "allow_rule_overwrite": {"type": "boolean"},
        "system_error_prefix": {"type": ["string", "null"]},
        "check_var_prefix": {"type": "string"},
        "rule_modules": {
            "type": ["array", "null"],
            "items": {"type": "string", "minLength": 1},
        },
        "cache_dir": {"type": ["string", "null"]},
        "request_timeout_seconds": {"type": "number", "exclusiveMinimum": 0},
    },
    "additionalProperties": False,
}

_STRING_MAP = {
    "type": "object",
    "additionalProperties": {"type": "string"},
}

DEFINITION_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        # only chain strings can be expressed declaratively
        "rules": _STRING_MAP,
        "titles": _STRING_MAP,
        "messages": _STRING_MAP,
        "scenes": {
            "type": "object",
            "additionalProperties": {
                "type": "array",
                "items": {"type": "string"},
            },
        },
        "err_prefix": {"type": "string"},
    },
    "required": ["rules"],
    "additionalProperties": False,
}
