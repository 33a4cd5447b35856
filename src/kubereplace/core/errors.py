#!/usr/bin/env python3
"""
KUBEREPLACE ERRORS
------------------
Every failure the engine can report. Errors are raised where the problem is
detected and propagate untouched to the caller of the engine; the runner and
CLI are the only layers that turn them into reports.

Author: KubeReplace Team
Date: 2026-10-19
"""

from typing import Any, Optional, Sequence


class ReplacementError(Exception):
    """Base class for all replacement failures."""


class BadConfigurationError(ReplacementError):
    """Raised when a replacement rule or transformer document is malformed."""


class InvalidFieldPathError(BadConfigurationError):
    """Raised when a field path cannot be parsed or is used where it is not allowed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"invalid field path '{path}': {reason}")


class ManifestParseError(BadConfigurationError):
    """Raised when a manifest stream is not valid YAML."""


class SourceNotFoundError(ReplacementError):
    def __init__(self, obj_ref: Any):
        self.obj_ref = obj_ref
        super().__init__(f"failed to find any source resources identified by {obj_ref}")


class TargetNotFoundError(ReplacementError):
    def __init__(self, obj_ref: Any):
        self.obj_ref = obj_ref
        super().__init__(f"failed to find any target resources identified by {obj_ref}")


class AmbiguousSourceError(ReplacementError):
    """Raised when a source selector matches more than one resource."""

    def __init__(self, obj_ref: Any, matches: Optional[Sequence[Any]] = None):
        self.obj_ref = obj_ref
        self.matches = list(matches or [])
        found = ", ".join(str(m) for m in self.matches)
        super().__init__(
            f"found more than one resource matching {obj_ref}: [{found}]"
        )


class FieldNotFoundError(ReplacementError):
    def __init__(self, path: str, segment: str):
        self.path = path
        self.segment = segment
        super().__init__(f"field '{segment}' of path '{path}' not found")


class TypeMismatchError(ReplacementError):
    """Raised when a traversal step meets a node of the wrong kind."""

    def __init__(self, actual: Any, expectation: str):
        self.actual = actual
        self.expectation = expectation
        super().__init__(f"{actual!r} {expectation}")


class IndexOutOfBoundError(ReplacementError):
    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"index {index} is out of bound for sequence of length {length}")


class PatternSubstringError(ReplacementError):
    """Base for substring substitution failures."""


class PatternTargetInvalidError(PatternSubstringError):
    pass


class PatternReplacementInvalidError(PatternSubstringError):
    pass
