"""
KUBEREPLACE SELECTOR & MODEL TESTS
----------------------------------
Identity extraction from documents and chainable selection.
"""

import pytest

from kubereplace.core.models import (
    Document,
    NodeKind,
    ObjectRef,
    node_kind,
    split_api_version,
)
from kubereplace.selection.selector import DocumentSelector


def make(api_version, kind, name, namespace=None):
    metadata = {"name": name}
    if namespace:
        metadata["namespace"] = namespace
    return Document(root={"apiVersion": api_version, "kind": kind, "metadata": metadata})


@pytest.fixture
def documents():
    return [
        make("apps/v1", "Deployment", "web", "prod"),
        make("v1", "Service", "web", "prod"),
        make("apps/v1", "Deployment", "api", "dev"),
        make("v1", "ConfigMap", "web"),
    ]


@pytest.mark.parametrize("api_version,expected", [
    ("apps/v1", ("apps", "v1")),
    ("v1", ("", "v1")),
    ("cluster.x-k8s.io/v1beta1", ("cluster.x-k8s.io", "v1beta1")),
    ("", ("", "")),
])
def test_split_api_version(api_version, expected):
    assert split_api_version(api_version) == expected


@pytest.mark.parametrize("value,kind", [
    ({}, NodeKind.MAP), ([], NodeKind.SEQUENCE), ("s", NodeKind.SCALAR),
    (3, NodeKind.SCALAR), (False, NodeKind.SCALAR), (None, NodeKind.NULL),
])
def test_node_kind(value, kind):
    assert node_kind(value) is kind


def test_document_identity():
    doc = make("apps/v1", "Deployment", "web", "prod")
    assert doc.identity() == ObjectRef(group="apps", version="v1", kind="Deployment",
                                       name="web", namespace="prod")
    assert str(doc) == "apps/v1/Deployment prod/web"


def test_document_without_metadata():
    doc = Document(root={"kind": "List"})
    assert (doc.name, doc.namespace, doc.group, doc.version) == ("", "", "", "")


def test_object_ref_from_dict():
    ref = ObjectRef.from_dict({"apiVersion": "apps/v1", "kind": "Deployment", "name": "web"})
    assert ref.api_version == "apps/v1"
    assert str(ref) == "{apiVersion=apps/v1, kind=Deployment, name=web}"


def test_by_kind(documents):
    selected = DocumentSelector().by_gvk("", "", "Deployment").filter(documents)
    assert [d.name for d in selected] == ["web", "api"]


def test_by_api_version_is_exact(documents):
    selected = DocumentSelector().by_api_version("v1").filter(documents)
    assert [d.kind for d in selected] == ["Service", "ConfigMap"]


def test_filter_order_does_not_matter(documents):
    a = DocumentSelector().by_name("web").by_namespace("prod").filter(documents)
    b = DocumentSelector().by_namespace("prod").by_name("web").filter(documents)
    assert a == b
    assert len(a) == 2


def test_empty_ref_matches_everything(documents):
    assert DocumentSelector().by_ref(ObjectRef()).filter(documents) == documents


def test_by_ref(documents):
    ref = ObjectRef(group="apps", kind="Deployment", name="api")
    assert [str(d) for d in DocumentSelector().by_ref(ref).filter(documents)] == ["apps/v1/Deployment dev/api"]


def test_selectors_are_immutable(documents):
    base = DocumentSelector().by_gvk("", "", "Deployment")
    base.by_name("api")
    assert len(base.filter(documents)) == 2


def test_selection_sees_renames(documents):
    documents[0].root["metadata"]["name"] = "frontend"
    assert DocumentSelector().by_name("frontend").filter(documents) == [documents[0]]
