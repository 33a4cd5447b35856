#!/usr/bin/env python3
"""
KUBEREPLACE ENGINE - The Rule Orchestrator
------------------------------------------
Applies replacement rules to a document set strictly in declaration order.
For each rule the engine resolves the source value (a literal, or a field of
exactly one source resource), selects the target resources and writes the
value into every configured field path of every target.

Later rules observe the mutations of earlier ones. The first error aborts
the run; documents already mutated stay mutated.

Author: KubeReplace Team
Date: 2026-10-19
"""

import copy
import logging
from typing import Any, Iterable, List, Mapping

from kubereplace.config.transformer import load_transformer
from kubereplace.core.errors import (
    AmbiguousSourceError,
    BadConfigurationError,
    SourceNotFoundError,
    TargetNotFoundError,
)
from kubereplace.core.models import DEFAULT_SOURCE_FIELD, Document, Replacement, ReplSource
from kubereplace.manifest.exporter import KubeExporter
from kubereplace.manifest.loader import ManifestLoader
from kubereplace.paths.lookup import get_field_value
from kubereplace.paths.mutator import update_field
from kubereplace.paths.parser import parse_field_path
from kubereplace.selection.selector import DocumentSelector

logger = logging.getLogger("kubereplace.engine")


class ReplacementEngine:
    """
    Principal orchestrator. Holds only the rules; document sets are passed
    per call and mutated in place.
    """

    def __init__(self, replacements: Iterable[Replacement]):
        self.replacements = list(replacements)
        for index, replacement in enumerate(self.replacements):
            self._check_rule(replacement, index)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ReplacementEngine":
        """Builds an engine from a ReplacementTransformer document."""
        return cls(load_transformer(config).replacements)

    @staticmethod
    def _check_rule(replacement: Replacement, index: int):
        source = replacement.source
        if source is None:
            raise BadConfigurationError(f"`from` must be specified in replacement #{index}")
        if replacement.target is None or replacement.target.obj_ref is None:
            raise BadConfigurationError(f"`to` must be specified in replacement #{index}")
        if source.obj_ref is not None and source.is_literal:
            raise BadConfigurationError(
                f"only one of fieldref and value is allowed in replacement #{index}"
            )
        if source.obj_ref is None and not source.is_literal:
            raise BadConfigurationError(
                f"one of fieldref and value must be specified in replacement #{index}"
            )

    def transform(self, documents: List[Document]) -> List[Document]:
        """Applies every rule to `documents` in order and returns the same list."""
        for index, replacement in enumerate(self.replacements):
            value = self._resolve_source(documents, replacement.source)
            targets = self._select_targets(documents, replacement)
            logger.debug(f"Replacement #{index}: writing into {len(targets)} target(s)")
            for target in targets:
                for field_ref in replacement.target.field_refs:
                    update_field(target.root, parse_field_path(field_ref), value)
        logger.info(f"Applied {len(self.replacements)} replacement(s) to {len(documents)} document(s)")
        return documents

    def transform_text(self, text: str) -> str:
        """Loads a YAML stream, applies the rules and renders the result."""
        documents = ManifestLoader().load(text)
        self.transform(documents)
        return KubeExporter().export(documents)

    def _resolve_source(self, documents: List[Document], source: ReplSource) -> Any:
        if source.is_literal:
            return source.value

        ref = source.obj_ref
        sources = DocumentSelector().by_ref(ref).filter(documents)
        if len(sources) > 1:
            raise AmbiguousSourceError(ref, sources)
        if not sources:
            raise SourceNotFoundError(ref)

        # Detach from the source tree; later writes may touch the same nodes
        return copy.deepcopy(get_field_value(sources[0].root, source.field_ref or DEFAULT_SOURCE_FIELD))

    def _select_targets(self, documents: List[Document], replacement: Replacement) -> List[Document]:
        ref = replacement.target.obj_ref
        targets = DocumentSelector().by_ref(ref).filter(documents)
        if not targets:
            raise TargetNotFoundError(ref)
        return targets


def apply_all(documents: List[Document], replacements: Iterable[Replacement]) -> List[Document]:
    return ReplacementEngine(replacements).transform(documents)
