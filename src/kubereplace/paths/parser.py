#!/usr/bin/env python3
"""
KUBEREPLACE FIELD PATH PARSER
-----------------------------
Turns a field path string into an ordered list of segments.

Grammar (informal):
    path      := segment ('.' segment)* ['%' regex '%']
    segment   := name | index | name '[' key '=' value ']'

Examples:
    metadata.labels.owner
    spec.containers[name=nginx].image
    spec.ip[tag=10.0.0.1].value          (dots inside brackets are kept)
    spec.template.ip%10\\.0\\.0\\.\\d+%   (trailing substring pattern)

Whether a plain segment is a map key or a sequence index is decided by the
mutator when it sees the container.

Author: KubeReplace Team
Date: 2026-10-19
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, Optional, Pattern, Tuple

from kubereplace.core.errors import InvalidFieldPathError


@dataclass(frozen=True)
class Segment:
    """
    One step of a field path. A predicate segment (`field[key=value]`)
    addresses the element of the sequence `field` whose `key` equals `value`.
    """
    field: str
    match_key: Optional[str] = None
    match_value: Optional[str] = None

    @property
    def is_predicate(self) -> bool:
        return self.match_key is not None

    def matches(self, element: Mapping[str, Any]) -> bool:
        """True if the map element carries `match_key` equal to `match_value`."""
        if self.match_key not in element:
            return False
        actual = element[self.match_key]
        # bool is an int subclass; 'true' must not match via str(True)
        if isinstance(actual, bool) or actual is None:
            return False
        if isinstance(actual, str):
            return actual == self.match_value
        if isinstance(actual, int):
            return str(actual) == self.match_value
        return False

    def __str__(self) -> str:
        if self.is_predicate:
            return f"{self.field}[{self.match_key}={self.match_value}]"
        return self.field


@dataclass(frozen=True)
class FieldPath:
    raw: str
    segments: Tuple[Segment, ...] = ()
    pattern: Optional[Pattern[str]] = None   # Compiled substring pattern, if any

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def __str__(self) -> str:
        joined = ".".join(str(s) for s in self.segments)
        if self.pattern is not None:
            joined += f"%{self.pattern.pattern}%"
        return joined


class FieldPathParser:
    """
    Stateless parser; the compiled expressions below are read-only.
    """

    # Group 1: container field, Group 2: match key, Group 3: match value
    PREDICATE_PATTERN = re.compile(r"([^\[\]\s]+)\[([^=\[\]\s]+)=([^\]\s]+)\]")
    # Substring patterns are appended to paths as ...%REGEX%
    SUBSTRING_PATTERN = re.compile(r"(.+)%(\S+)%")
    BRACKET_PATTERN = re.compile(r"\[[^\]]*\]")
    DOT_PLACEHOLDER = "\x00"

    def parse(self, path: str) -> FieldPath:
        raw = path
        path = self._strip_jsonpath(path.strip())
        if not path:
            return FieldPath(raw=raw)

        path, pattern = self._extract_substring_pattern(path)

        # Protect dots inside [...] so predicate values like IPs survive the split
        protected = self.BRACKET_PATTERN.sub(
            lambda m: m.group(0).replace(".", self.DOT_PLACEHOLDER), path
        )
        tokens = [t.replace(self.DOT_PLACEHOLDER, ".") for t in protected.split(".")]

        segments = tuple(self._parse_segment(token) for token in tokens)
        return FieldPath(raw=raw, segments=segments, pattern=pattern)

    def _strip_jsonpath(self, path: str) -> str:
        # kyaml style: {.metadata.name}
        if path.startswith("{") and path.endswith("}"):
            path = path[1:-1].strip()
            if path.startswith("."):
                path = path[1:]
        return path

    def _extract_substring_pattern(self, path: str) -> Tuple[str, Optional[Pattern[str]]]:
        match = self.SUBSTRING_PATTERN.fullmatch(path)
        if not match:
            return path, None
        rest, expression = match.groups()
        try:
            return rest, re.compile(expression)
        except re.error as e:
            raise InvalidFieldPathError(path, f"bad substring pattern '{expression}': {e}")

    def _parse_segment(self, token: str) -> Segment:
        match = self.PREDICATE_PATTERN.fullmatch(token)
        if not match:
            return Segment(field=token)
        container, key, value = match.groups()
        return Segment(field=container, match_key=key, match_value=value)


_parser = FieldPathParser()


@lru_cache(maxsize=512)
def parse_field_path(path: str) -> FieldPath:
    """Parses `path`; results are immutable and memoized per path string."""
    return _parser.parse(path)
