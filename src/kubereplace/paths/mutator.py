#!/usr/bin/env python3
"""
KUBEREPLACE TREE MUTATOR
------------------------
Walks a manifest tree along a parsed field path and performs the terminal
write. Missing map fields on the way are created as empty maps; containers
addressed by an array predicate must already exist.

A predicate that matches no element is a silent no-op, while structural
problems (scalars in the way, nulls, bad indexes) raise.

Author: KubeReplace Team
Date: 2026-10-19
"""

import copy
import logging
import re
from typing import Any, Sequence, Union

from ruamel.yaml.comments import CommentedMap

from kubereplace.core.errors import (
    IndexOutOfBoundError,
    PatternTargetInvalidError,
    TypeMismatchError,
)
from kubereplace.core.models import NodeKind, node_kind
from kubereplace.paths.parser import FieldPath, Segment, parse_field_path
from kubereplace.paths.substring import apply_substring_pattern

logger = logging.getLogger("kubereplace.mutator")

INDEX_PATTERN = re.compile(r"-?\d+")


def update_field(node: Any, path: Union[str, FieldPath], value: Any) -> None:
    """
    Writes `value` at `path` inside `node`. When the path carries a substring
    pattern, the addressed value is rewritten instead of overwritten.
    """
    field_path = parse_field_path(path) if isinstance(path, str) else path
    if field_path.is_empty:
        return
    _update(node, field_path.segments, field_path, value)


def _render(current: Any, field_path: FieldPath, value: Any) -> Any:
    if field_path.pattern is None:
        # One value may be written to many places; never share the object
        return copy.deepcopy(value)
    return apply_substring_pattern(current, field_path.pattern, value)


def _new_map(like: Any) -> Any:
    return CommentedMap() if isinstance(like, CommentedMap) else {}


def _update(node: Any, segments: Sequence[Segment], field_path: FieldPath, value: Any) -> None:
    kind = node_kind(node)
    if kind is NodeKind.MAP:
        _update_map(node, segments, field_path, value)
    elif kind is NodeKind.SEQUENCE:
        _update_sequence(node, segments, field_path, value)
    else:
        raise TypeMismatchError(node, "is not expected be a primitive type")


def _update_map(mapping: Any, segments: Sequence[Segment], field_path: FieldPath, value: Any) -> None:
    segment = segments[0]

    if segment.field not in mapping:
        if segment.is_predicate:
            raise TypeMismatchError(
                None, f"is not expected for field '{segment.field}' addressed by [{segment.match_key}="
                      f"{segment.match_value}]; an existing sequence of maps is required"
            )
        if len(segments) == 1 and field_path.pattern is not None:
            raise PatternTargetInvalidError(
                f"pattern-based substitution target '{segment.field}' does not exist"
            )
        mapping[segment.field] = _new_map(mapping)

    current = mapping[segment.field]
    if current is None:
        raise TypeMismatchError(current, f"is not expected be nil (field '{segment.field}')")

    if not segment.is_predicate:
        if len(segments) == 1:
            mapping[segment.field] = _render(current, field_path, value)
            return
        _update(current, segments[1:], field_path, value)
        return

    if node_kind(current) is not NodeKind.SEQUENCE:
        raise TypeMismatchError(current, f"is expected to be a sequence (field '{segment.field}')")
    _update_matching(current, segments, field_path, value)


def _update_matching(items: Any, segments: Sequence[Segment], field_path: FieldPath, value: Any) -> None:
    segment = segments[0]
    for i, item in enumerate(items):
        if node_kind(item) is not NodeKind.MAP:
            raise TypeMismatchError(item, "is expected to be a map")
        if not segment.matches(item):
            continue
        if len(segments) == 1:
            items[i] = _render(item, field_path, value)
        else:
            _update(item, segments[1:], field_path, value)
        return
    logger.debug(f"No element of '{segment.field}' matches [{segment.match_key}="
                 f"{segment.match_value}] in path '{field_path}'; nothing replaced")


def _update_sequence(items: Any, segments: Sequence[Segment], field_path: FieldPath, value: Any) -> None:
    segment = segments[0]
    if segment.is_predicate:
        _update_matching(items, segments, field_path, value)
        return

    if not INDEX_PATTERN.fullmatch(segment.field):
        raise TypeMismatchError(items, f"cannot be indexed by non-integer segment '{segment.field}'")
    index = int(segment.field)
    if index < 0 or index >= len(items):
        raise IndexOutOfBoundError(index, len(items))

    if len(segments) == 1:
        items[index] = _render(items[index], field_path, value)
        return
    _update(items[index], segments[1:], field_path, value)
