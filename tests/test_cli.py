"""
KUBEREPLACE CLI TESTS
---------------------
The replace and version commands end to end, plus version reporting with a
fake cluster API.
"""

import io
from types import SimpleNamespace

import pytest
from kubernetes.client.rest import ApiException

from kubereplace.cli import main as cli_main
from kubereplace.cli.main import KubeReplaceCLI
from kubereplace.cli.version import (
    NO_CLUSTER_MESSAGE,
    SERVER_ERROR_MESSAGE,
    client_version,
    print_versions,
)

TRANSFORMER = """\
kind: ReplacementTransformer
replacements:
- source:
    value: nginx:9.9
  target:
    objref:
      kind: Deployment
    fieldrefs:
    - spec.template.spec.containers[name=nginx].image
"""

MANIFEST = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
spec:
  template:
    spec:
      containers:
        - name: nginx
          image: nginx:1.0
"""


class FakeVersionApi:
    def __init__(self, error=None):
        self.error = error

    def get_code(self):
        if self.error:
            raise self.error
        return SimpleNamespace(git_version="v1.31.2")


def test_client_version_format():
    assert client_version().startswith("v")


def test_versions_are_tab_aligned():
    out = io.StringIO()
    print_versions(out, FakeVersionApi())

    client_line, server_line = out.getvalue().splitlines()
    assert client_line.startswith("client:")
    assert server_line == "kubernetes server: v1.31.2"
    assert client_line.index("v") == server_line.index("v1.31.2")


def test_versions_without_cluster():
    out = io.StringIO()
    print_versions(out, None)
    assert out.getvalue().splitlines()[1].endswith(NO_CLUSTER_MESSAGE)


def test_versions_when_server_fails():
    out = io.StringIO()
    print_versions(out, FakeVersionApi(ApiException(status=500, reason="boom")))
    assert out.getvalue() == f"{SERVER_ERROR_MESSAGE}\n"


def test_version_command(monkeypatch, capsys):
    monkeypatch.setattr(cli_main, "build_version_client", lambda kubeconfig, context: None)
    assert KubeReplaceCLI().run(["version"]) == 0
    assert NO_CLUSTER_MESSAGE in capsys.readouterr().out


@pytest.fixture
def files(tmp_path):
    config = tmp_path / "transformer.yaml"
    config.write_text(TRANSFORMER)
    manifest = tmp_path / "manifests" / "deploy.yaml"
    manifest.parent.mkdir()
    manifest.write_text(MANIFEST)
    return config, manifest


def test_replace_prints_stream(files, capsys):
    config, manifest = files
    assert KubeReplaceCLI().run(["replace", str(config), str(manifest)]) == 0
    assert "image: nginx:9.9" in capsys.readouterr().out
    assert manifest.read_text() == MANIFEST


def test_replace_to_output_file(files, tmp_path):
    config, manifest = files
    output = tmp_path / "out.yaml"
    assert KubeReplaceCLI().run(["replace", str(config), str(manifest.parent), "-o", str(output)]) == 0
    assert "image: nginx:9.9" in output.read_text()


def test_replace_in_place(files):
    config, manifest = files
    assert KubeReplaceCLI().run(["replace", str(config), str(manifest), "--in-place", "--no-backup"]) == 0
    assert "image: nginx:9.9" in manifest.read_text()


def test_replace_reports_errors(files, tmp_path):
    _, manifest = files
    bad = tmp_path / "bad.yaml"
    bad.write_text("kind: ReplacementTransformer\nreplacements:\n- target:\n    objref: {kind: A}\n")
    assert KubeReplaceCLI().run(["replace", str(bad), str(manifest)]) == 1


def test_replace_missing_target(files, tmp_path):
    config, _ = files
    other = tmp_path / "svc.yaml"
    other.write_text("apiVersion: v1\nkind: Service\nmetadata:\n  name: web\n")
    assert KubeReplaceCLI().run(["replace", str(config), str(other)]) == 1
