#!/usr/bin/env python3
"""
KUBEREPLACE SELECTOR
--------------------
A chainable filter that narrows a document set by apiVersion, group/version/
kind, name and namespace. Each call returns a new selector, so a partially
built selector can be reused safely.

Author: KubeReplace Team
Date: 2026-10-19
"""

from typing import Callable, Iterable, List, Tuple

from kubereplace.core.models import Document, ObjectRef

DocumentCheck = Callable[[Document], bool]


class DocumentSelector:
    """
    Selection never fails: an empty or oversized result is for the caller
    to judge.
    """

    def __init__(self, predicates: Tuple[DocumentCheck, ...] = ()):
        self._predicates = predicates

    def _with(self, predicate: DocumentCheck) -> "DocumentSelector":
        return DocumentSelector(self._predicates + (predicate,))

    def by_api_version(self, api_version: str) -> "DocumentSelector":
        if not api_version:
            return self
        # Exact match: 'v1' must not select 'apps/v1'
        return self._with(lambda doc: doc.api_version == api_version)

    def by_gvk(self, group: str, version: str, kind: str) -> "DocumentSelector":
        selector = self
        if group:
            selector = selector._with(lambda doc: doc.group == group)
        if version:
            selector = selector._with(lambda doc: doc.version == version)
        if kind:
            selector = selector._with(lambda doc: doc.kind == kind)
        return selector

    def by_name(self, name: str) -> "DocumentSelector":
        if not name:
            return self
        return self._with(lambda doc: doc.name == name)

    def by_namespace(self, namespace: str) -> "DocumentSelector":
        if not namespace:
            return self
        return self._with(lambda doc: doc.namespace == namespace)

    def by_ref(self, obj_ref: ObjectRef) -> "DocumentSelector":
        return (self.by_api_version(obj_ref.api_version)
                .by_gvk(obj_ref.group, obj_ref.version, obj_ref.kind)
                .by_name(obj_ref.name)
                .by_namespace(obj_ref.namespace))

    def filter(self, documents: Iterable[Document]) -> List[Document]:
        return [doc for doc in documents if all(p(doc) for p in self._predicates)]
