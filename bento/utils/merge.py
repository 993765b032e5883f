"""Deep merge and environment overlay for nested configuration mappings.

Mappings merge key by key, recursively. Lists and scalars on the override
side replace the base value wholesale.
"""

from typing import Any, Dict, Mapping, Optional


def deep_merge(base: Mapping[str, Any], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Recursively merge two mappings without mutating either input.

    Args:
        base: Lower priority mapping
        override: Higher priority mapping

    Returns:
        New merged dictionary

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = {
        key: copy_tree(value) for key, value in base.items()
    }
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = copy_tree(value)
    return result


def copy_tree(value: Any) -> Any:
    """Copy nested mappings so merged results never share dicts with inputs.

    Leaves (including lists and loaded module objects) are shared as-is.
    """
    if isinstance(value, Mapping):
        return {key: copy_tree(item) for key, item in value.items()}
    return value


def apply_environment(config: Mapping[str, Any], env: Optional[str]) -> Dict[str, Any]:
    """Merge the section named after the active environment over the root.

    The environment section itself stays in the result.

    Args:
        config: Aggregated top-level mapping
        env: Active environment name (e.g. "production")

    Returns:
        Merged mapping, or an unchanged copy when no section matches
    """
    env_section = config.get(env) if env else None

    if not isinstance(env_section, Mapping) or not env_section:
        return dict(config)

    return deep_merge(config, env_section)


__all__ = ["deep_merge", "copy_tree", "apply_environment"]
