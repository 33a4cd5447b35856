#!/usr/bin/env python3
"""
KUBEREPLACE CORE MODELS
-----------------------
Defines the fundamental data structures used across the KubeReplace engine:
resource identity, the document wrapper around a parsed manifest tree,
node classification and the replacement rule types.

Author: KubeReplace Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

DEFAULT_SOURCE_FIELD = "metadata.name"


class NodeKind(Enum):
    """Tag for a node of a manifest tree."""
    MAP = "map"
    SEQUENCE = "sequence"
    SCALAR = "scalar"
    NULL = "null"


def node_kind(value: Any) -> NodeKind:
    """
    Classifies a tree node. ruamel's CommentedMap/CommentedSeq subclass
    dict/list, so both plain and round-trip trees are covered.
    """
    if value is None:
        return NodeKind.NULL
    if isinstance(value, dict):
        return NodeKind.MAP
    if isinstance(value, list):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


def split_api_version(api_version: str) -> Tuple[str, str]:
    """'apps/v1' -> ('apps', 'v1'); core 'v1' -> ('', 'v1')."""
    if not api_version:
        return "", ""
    if "/" in api_version:
        group, version = api_version.split("/", 1)
        return group, version
    return "", api_version


@dataclass(frozen=True)
class ObjectRef:
    """
    A partial resource identity. Empty fields act as wildcards when the
    reference is used for selection.
    """
    group: str = ""
    version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""
    api_version: str = ""   # Alternative to group/version, e.g. 'apps/v1'

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ObjectRef":
        return cls(
            group=str(data.get("group") or ""),
            version=str(data.get("version") or ""),
            kind=str(data.get("kind") or ""),
            name=str(data.get("name") or ""),
            namespace=str(data.get("namespace") or ""),
            api_version=str(data.get("apiVersion") or ""),
        )

    def __str__(self) -> str:
        parts = []
        for label, value in (("apiVersion", self.api_version), ("group", self.group),
                             ("version", self.version), ("kind", self.kind),
                             ("name", self.name), ("namespace", self.namespace)):
            if value:
                parts.append(f"{label}={value}")
        return "{" + ", ".join(parts) + "}"


@dataclass
class Document:
    """
    One Kubernetes resource. The identity is read from the tree on every
    access so that rules observe renames made by earlier rules.
    """
    root: Any                              # CommentedMap (or plain dict) of the resource
    source_path: Optional[str] = None      # File the document was loaded from, if any

    def _metadata(self) -> Mapping[str, Any]:
        metadata = self.root.get("metadata") if isinstance(self.root, dict) else None
        return metadata if isinstance(metadata, dict) else {}

    @property
    def api_version(self) -> str:
        return str(self.root.get("apiVersion") or "")

    @property
    def group(self) -> str:
        return split_api_version(self.api_version)[0]

    @property
    def version(self) -> str:
        return split_api_version(self.api_version)[1]

    @property
    def kind(self) -> str:
        return str(self.root.get("kind") or "")

    @property
    def name(self) -> str:
        return str(self._metadata().get("name") or "")

    @property
    def namespace(self) -> str:
        return str(self._metadata().get("namespace") or "")

    def identity(self) -> ObjectRef:
        return ObjectRef(group=self.group, version=self.version, kind=self.kind,
                         name=self.name, namespace=self.namespace)

    def __str__(self) -> str:
        gvk = "/".join(p for p in (self.group, self.version, self.kind) if p)
        if self.namespace:
            return f"{gvk} {self.namespace}/{self.name}"
        return f"{gvk} {self.name}"


@dataclass
class ReplSource:
    """Where a replacement value comes from: a field of a resource or a literal."""
    obj_ref: Optional[ObjectRef] = None
    field_ref: str = ""
    value: Any = None                      # None means "no literal configured"

    @property
    def is_literal(self) -> bool:
        return self.value is not None


@dataclass
class ReplTarget:
    """The resources to mutate and the field paths to write inside each one."""
    obj_ref: ObjectRef
    field_refs: List[str] = field(default_factory=list)


@dataclass
class Replacement:
    """A single declarative replacement rule."""
    source: ReplSource
    target: ReplTarget
