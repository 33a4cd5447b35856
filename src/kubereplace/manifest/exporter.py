#!/usr/bin/env python3
"""
KUBEREPLACE EXPORTER - High-Fidelity Round-Trip
-----------------------------------------------
Author: KubeReplace Team
Date: 2026-10-19
"""

import io
from typing import Iterable

from ruamel.yaml import YAML

from kubereplace.core.models import Document


class KubeExporter:
    """
    Converts (mutated) Documents back to a YAML stream.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')
        self.yaml.preserve_quotes = True
        # Standard K8s: 2 spaces, but sequences are indented 4 (offset 2)
        # for maximum readability in IDEs.
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096

    def export(self, documents: Iterable[Document]) -> str:
        """
        Exports documents into a single string with explicit separators.
        """
        stream = io.StringIO()
        for i, doc in enumerate(documents):
            if i > 0:
                stream.write("---\n")
            self.yaml.dump(doc.root, stream)
        return stream.getvalue()
