"""
Injection of configured fallback values into outgoing requests.

These functions never mutate their inputs and never override a value the
caller supplied explicitly.
"""
from typing import Any, Dict, Optional

from .models import BuilderDefaults, TokenLayerDefaults


def resolve_builder_defaults(defaults: Optional[TokenLayerDefaults]) -> Optional[Dict[str, Any]]:
    """Return the ``{code, fee}`` builder to inject, or None if no code is configured"""
    builder: Optional[BuilderDefaults] = defaults.builder if defaults else None
    if builder is None or not builder.code:
        return None
    return {
        "code": builder.code,
        "fee": builder.fee if isinstance(builder.fee, int) else 0,
    }


def with_builder_defaults(action: Dict[str, Any], defaults: Optional[TokenLayerDefaults]) -> Dict[str, Any]:
    """
    Inject the default builder into a createToken action that has none.

    Args:
        action: createToken action payload
        defaults: Client defaults

    Returns:
        The action itself when nothing is injected, otherwise a new dict
    """
    if action.get("builder"):
        return action

    builder = resolve_builder_defaults(defaults)
    if builder is None:
        return action

    return {**action, "builder": builder}


def with_builder_code_default(query: Dict[str, Any], defaults: Optional[TokenLayerDefaults]) -> Dict[str, Any]:
    """Inject the default builder code into a getTokensV2 query that has none"""
    if query.get("builder_code"):
        return query

    builder = defaults.builder if defaults else None
    if builder is None or not builder.code:
        return query

    return {**query, "builder_code": builder.code}
