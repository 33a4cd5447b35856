"""
KUBEREPLACE CONFIG TESTS
------------------------
Loading and validation of ReplacementTransformer documents.
"""

import pytest

from kubereplace.config.transformer import load_transformer, load_transformer_file
from kubereplace.core.errors import BadConfigurationError
from kubereplace.core.models import ObjectRef

TRANSFORMER_YAML = """\
apiVersion: airshipit.org/v1alpha1
kind: ReplacementTransformer
metadata:
  name: images
replacements:
- source:
    objref:
      kind: ConfigMap
      name: settings
    fieldref: data.image
  target:
    objref:
      apiVersion: apps/v1
      kind: Deployment
    fieldrefs:
    - spec.template.spec.containers[name=nginx].image
- source:
    value: 3
  target:
    objref:
      kind: Deployment
    fieldrefs:
    - spec.replicas
"""


def entry(source=None, target=None):
    data = {}
    if source is not None:
        data["source"] = source
    if target is not None:
        data["target"] = target
    return {"kind": "ReplacementTransformer", "replacements": [data]}


TARGET = {"objref": {"kind": "Deployment"}, "fieldrefs": ["spec.replicas"]}


def test_load_transformer_file(tmp_path):
    path = tmp_path / "transformer.yaml"
    path.write_text(TRANSFORMER_YAML)

    config = load_transformer_file(path)

    assert config.name == "images"
    first, second = config.replacements
    assert first.source.obj_ref == ObjectRef(kind="ConfigMap", name="settings")
    assert first.source.field_ref == "data.image"
    assert first.target.obj_ref.api_version == "apps/v1"
    assert first.target.field_refs == ["spec.template.spec.containers[name=nginx].image"]
    assert second.source.is_literal and second.source.value == 3


def test_literal_false_is_a_value():
    config = load_transformer(entry({"value": False}, TARGET))
    assert config.replacements[0].source.value is False


@pytest.mark.parametrize("data,message", [
    (entry(target=TARGET), "`from` must be specified"),
    (entry({"value": "x"}), "`to` must be specified"),
    (entry({"value": "x", "objref": {"kind": "A"}}, TARGET), "only one of fieldref and value"),
    (entry({"fieldref": "data.x"}, TARGET), "one of fieldref and value must be specified"),
    (entry({"value": "x"}, {"fieldrefs": ["a"]}), "`objref` must be specified"),
    (entry({"value": "x"}, {"objref": {"kind": "A"}, "fieldrefs": "a.b"}), "must be a list of strings"),
    (entry({"objref": "ConfigMap"}, TARGET), "must be a map"),
    ({"kind": "PatchTransformer"}, "expected kind ReplacementTransformer"),
    ({"replacements": {"a": 1}}, "`replacements` must be a list"),
])
def test_invalid_configurations(data, message):
    with pytest.raises(BadConfigurationError, match=message):
        load_transformer(data)


def test_empty_file_is_rejected(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    with pytest.raises(BadConfigurationError):
        load_transformer_file(path)


def test_unparseable_file_is_rejected(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("replacements: [unclosed\n")
    with pytest.raises(BadConfigurationError):
        load_transformer_file(path)
