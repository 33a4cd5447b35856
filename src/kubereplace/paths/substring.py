#!/usr/bin/env python3
"""
KUBEREPLACE SUBSTRING SUBSTITUTION
----------------------------------
Replaces the parts of a string field (or of every string in a sequence) that
match a regular expression, instead of overwriting the whole field.

The replacement text is inserted literally. Group references such as `$1`,
`${name}` or `\\1` are NOT expanded, so values copied from other resources
(passwords, URLs with `$`) land unchanged.

Author: KubeReplace Team
Date: 2026-10-19
"""

from typing import Any, Pattern

from kubereplace.core.errors import (
    PatternReplacementInvalidError,
    PatternTargetInvalidError,
)
from kubereplace.core.models import NodeKind, node_kind


def replacement_string(replacement: Any) -> str:
    """Numbers are stringified; anything but str/int/float is rejected."""
    if isinstance(replacement, (str, int, float)) and not isinstance(replacement, bool):
        return str(replacement)
    raise PatternReplacementInvalidError(
        "pattern-based substitution can only be applied with string or numeric replacement values"
    )


def _substitute(value: str, pattern: Pattern[str], replacement: str) -> str:
    # A callable replacement is inserted verbatim, no backreference expansion
    result = pattern.sub(lambda _: replacement, value)
    # Keep ruamel scalar styles (quoted, literal block) on the rewritten string
    if type(value) is not str:
        return type(value)(result)
    return result


def apply_substring_pattern(current: Any, pattern: Pattern[str], replacement: Any) -> Any:
    """
    Returns the value to store for `current` after replacing every match of
    `pattern`. Sequences are rewritten in place and returned.
    """
    text = replacement_string(replacement)

    kind = node_kind(current)
    if kind is NodeKind.SCALAR and isinstance(current, str):
        return _substitute(current, pattern, text)

    if kind is NodeKind.SEQUENCE:
        for item in current:
            if not isinstance(item, str):
                raise PatternTargetInvalidError(
                    f"pattern-based substitution expects a sequence of strings, found item {item!r}"
                )
        for i, item in enumerate(current):
            current[i] = _substitute(item, pattern, text)
        return current

    raise PatternTargetInvalidError(
        "pattern-based substitution can only be applied to string or array of strings target fields"
    )
