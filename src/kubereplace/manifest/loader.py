#!/usr/bin/env python3
"""
KUBEREPLACE MANIFEST LOADER
---------------------------
Parses a multi-document YAML stream into Documents using ruamel.yaml in
round-trip mode, so comments and quoting survive the transformation.

Author: KubeReplace Team
Date: 2026-10-19
"""

from typing import List, Optional

from ruamel.yaml import YAML, YAMLError

from kubereplace.core.errors import BadConfigurationError, ManifestParseError
from kubereplace.core.models import Document


class ManifestLoader:

    def __init__(self):
        self.yaml = YAML(typ="rt")
        self.yaml.preserve_quotes = True

    def load(self, text: str, source_path: Optional[str] = None) -> List[Document]:
        where = source_path or "<stream>"
        try:
            raw_docs = list(self.yaml.load_all(text))
        except YAMLError as e:
            raise ManifestParseError(f"unable to parse manifests from {where}: {e}")

        documents = []
        for i, doc in enumerate(raw_docs):
            # Empty documents (stray '---') carry nothing to replace
            if doc is None:
                continue
            if not isinstance(doc, dict):
                raise BadConfigurationError(
                    f"document #{i} of {where} is not a map but {type(doc).__name__}"
                )
            documents.append(Document(root=doc, source_path=source_path))
        return documents
