#!/usr/bin/env python3
"""
KUBEREPLACE FIELD LOOKUP
------------------------
Read-only counterpart of the mutator: resolves a field path against a tree
and returns the node found there. Used to extract replacement values from
source resources.

Author: KubeReplace Team
Date: 2026-10-19
"""

from typing import Any, Union

from kubereplace.core.errors import (
    FieldNotFoundError,
    IndexOutOfBoundError,
    InvalidFieldPathError,
    TypeMismatchError,
)
from kubereplace.core.models import NodeKind, node_kind
from kubereplace.paths.mutator import INDEX_PATTERN
from kubereplace.paths.parser import FieldPath, parse_field_path


def get_field_value(node: Any, path: Union[str, FieldPath]) -> Any:
    """
    Returns the node addressed by `path`. The returned object is the live
    node of the tree, not a copy.
    """
    field_path = parse_field_path(path) if isinstance(path, str) else path
    if field_path.pattern is not None:
        raise InvalidFieldPathError(field_path.raw, "substring patterns are only allowed on target paths")
    if field_path.is_empty:
        raise InvalidFieldPathError(field_path.raw, "path is empty")

    current = node
    for segment in field_path.segments:
        kind = node_kind(current)

        if kind is NodeKind.MAP and not segment.is_predicate:
            if segment.field not in current:
                raise FieldNotFoundError(field_path.raw, segment.field)
            current = current[segment.field]
            continue

        if kind is NodeKind.MAP:
            if segment.field not in current:
                raise FieldNotFoundError(field_path.raw, segment.field)
            current = current[segment.field]
            kind = node_kind(current)
            if kind is not NodeKind.SEQUENCE:
                raise TypeMismatchError(current, f"is expected to be a sequence (field '{segment.field}')")

        if kind is not NodeKind.SEQUENCE:
            raise TypeMismatchError(current, f"cannot be traversed by segment '{segment}'")

        if segment.is_predicate:
            for item in current:
                if node_kind(item) is not NodeKind.MAP:
                    raise TypeMismatchError(item, "is expected to be a map")
                if segment.matches(item):
                    current = item
                    break
            else:
                raise FieldNotFoundError(field_path.raw, str(segment))
            continue

        if not INDEX_PATTERN.fullmatch(segment.field):
            raise TypeMismatchError(current, f"cannot be indexed by non-integer segment '{segment.field}'")
        index = int(segment.field)
        if index < 0 or index >= len(current):
            raise IndexOutOfBoundError(index, len(current))
        current = current[index]

    return current
