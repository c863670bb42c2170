"""Scene resolution: which fields (and their rules) a validation pass covers."""

import logging
from typing import Any, Dict, List, Mapping

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

EMPTY_SCENE_NONE = "none"
EMPTY_SCENE_ALL = "all"
EMPTY_SCENE_POLICIES = (EMPTY_SCENE_NONE, EMPTY_SCENE_ALL)


def resolve_scene(
    scene: str,
    rules: Mapping[str, Any],
    scenes: Mapping[str, List[str]],
    empty_scene: str = EMPTY_SCENE_NONE,
) -> Dict[str, Any]:
    """
    Compute the check rules for a scene.

    Args:
        scene: Scene name; empty means every rule
        rules: Full rule set, field key -> rule specification
        scenes: Scene name -> ordered list of field keys
        empty_scene: What a defined scene listing no fields validates:
            "none" (nothing) or "all" (the full rule set)

    Returns:
        Ordered dict of field key -> rule specification, in scene order

    Raises:
        ConfigurationError: If the scene is undefined, lists a field without rules,
            or empty_scene is not a known policy
    """
    if empty_scene not in EMPTY_SCENE_POLICIES:
        raise ConfigurationError(f"empty_scene must be one of {EMPTY_SCENE_POLICIES}, got {empty_scene!r}")

    if not scene:
        return dict(rules)

    if scene not in scenes:
        raise ConfigurationError(f"scene [{scene}] is not defined")

    check_rules: Dict[str, Any] = {}
    for key in scenes[scene] or []:
        if key not in rules:
            raise ConfigurationError(f"scene [{scene}] field [{key}] has no rules defined")
        check_rules.setdefault(key, rules[key])

    if not check_rules and empty_scene == EMPTY_SCENE_ALL:
        logger.debug(f"Scene '{scene}' lists no fields, falling back to the full rule set")
        return dict(rules)

    logger.debug(f"Scene '{scene}' resolved to fields {list(check_rules)}")
    return check_rules
