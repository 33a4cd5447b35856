#!/usr/bin/env python3
"""
KUBEREPLACE TRANSFORMER CONFIG
------------------------------
Builds validated replacement rules from a ReplacementTransformer document:

    apiVersion: airshipit.org/v1alpha1
    kind: ReplacementTransformer
    metadata:
      name: example
    replacements:
    - source:
        objref: {kind: ConfigMap, name: settings}
        fieldref: data.image
      target:
        objref: {kind: Deployment}
        fieldrefs:
        - spec.template.spec.containers[name=app].image

Author: KubeReplace Team
Date: 2026-10-19
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Union

from ruamel.yaml import YAML, YAMLError

from kubereplace.core.errors import BadConfigurationError
from kubereplace.core.models import ObjectRef, Replacement, ReplSource, ReplTarget

logger = logging.getLogger("kubereplace.config")

TRANSFORMER_KIND = "ReplacementTransformer"


@dataclass
class TransformerConfig:
    name: str = ""
    replacements: List[Replacement] = field(default_factory=list)


def _parse_obj_ref(data: Any, where: str) -> ObjectRef:
    if not isinstance(data, Mapping):
        raise BadConfigurationError(f"`objref` of {where} must be a map")
    return ObjectRef.from_dict(data)


def _parse_source(data: Any, index: int) -> ReplSource:
    if not isinstance(data, Mapping):
        raise BadConfigurationError(f"`from` must be specified in replacement #{index}")

    obj_ref = data.get("objref")
    value = data.get("value")
    if obj_ref is not None and value is not None:
        raise BadConfigurationError(
            f"only one of fieldref and value is allowed in replacement #{index}"
        )
    if obj_ref is None and value is None:
        raise BadConfigurationError(
            f"one of fieldref and value must be specified in replacement #{index}"
        )

    field_ref = data.get("fieldref") or ""
    if not isinstance(field_ref, str):
        raise BadConfigurationError(f"`fieldref` of replacement #{index} must be a string")

    if value is not None:
        return ReplSource(value=value)
    return ReplSource(obj_ref=_parse_obj_ref(obj_ref, f"source #{index}"), field_ref=field_ref)


def _parse_target(data: Any, index: int) -> ReplTarget:
    if not isinstance(data, Mapping):
        raise BadConfigurationError(f"`to` must be specified in replacement #{index}")
    if data.get("objref") is None:
        raise BadConfigurationError(f"`objref` must be specified for the target of replacement #{index}")

    field_refs = data.get("fieldrefs") or []
    if not isinstance(field_refs, list) or not all(isinstance(f, str) for f in field_refs):
        raise BadConfigurationError(f"`fieldrefs` of replacement #{index} must be a list of strings")

    return ReplTarget(obj_ref=_parse_obj_ref(data["objref"], f"target #{index}"),
                      field_refs=list(field_refs))


def load_transformer(data: Mapping[str, Any]) -> TransformerConfig:
    """Validates a transformer document and returns its rules in declaration order."""
    if not isinstance(data, Mapping):
        raise BadConfigurationError("transformer configuration must be a map")

    kind = data.get("kind")
    if kind and kind != TRANSFORMER_KIND:
        raise BadConfigurationError(f"expected kind {TRANSFORMER_KIND}, got '{kind}'")

    entries = data.get("replacements") or []
    if not isinstance(entries, list):
        raise BadConfigurationError("`replacements` must be a list")

    replacements = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise BadConfigurationError(f"replacement #{index} must be a map")
        replacements.append(Replacement(
            source=_parse_source(entry.get("source"), index),
            target=_parse_target(entry.get("target"), index),
        ))

    metadata = data.get("metadata") or {}
    name = str(metadata.get("name") or "") if isinstance(metadata, Mapping) else ""
    logger.debug(f"Loaded transformer '{name}' with {len(replacements)} replacement(s)")
    return TransformerConfig(name=name, replacements=replacements)


def load_transformer_file(path: Union[str, Path]) -> TransformerConfig:
    yaml = YAML(typ="safe")
    try:
        data = yaml.load(Path(path).read_text(encoding="utf-8-sig"))
    except YAMLError as e:
        raise BadConfigurationError(f"unable to parse transformer config {path}: {e}")
    if data is None:
        raise BadConfigurationError(f"transformer config {path} is empty")
    return load_transformer(data)
