#!/usr/bin/env python3
"""
KUBEREPLACE VERSION COMMAND
---------------------------
Reports the versions of the kubereplace client and, when reachable, of the
Kubernetes API server.

Author: KubeReplace Team
Date: 2026-10-19
"""

import sys
import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Optional, TextIO

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

logger = logging.getLogger("kubereplace.version")

FALLBACK_CLIENT_VERSION = "v0.1.0"
NO_CLUSTER_MESSAGE = "could not connect to a kubernetes cluster"
SERVER_ERROR_MESSAGE = "Could not get kubernetes version"


def client_version() -> str:
    try:
        return f"v{version('kubereplace')}"
    except PackageNotFoundError:
        return FALLBACK_CLIENT_VERSION


def build_version_client(kubeconfig: Optional[str] = None,
                         context: Optional[str] = None) -> Optional[Any]:
    """
    Returns a VersionApi for the configured cluster, or None when no
    kubeconfig (or in-cluster config) is available.
    """
    try:
        config.load_kube_config(config_file=kubeconfig, context=context)
    except (ConfigException, OSError) as e:
        logger.debug(f"kubeconfig unavailable ({e}); trying in-cluster config")
        try:
            config.load_incluster_config()
        except ConfigException:
            return None
    return client.VersionApi()


def kube_version(api: Optional[Any]) -> str:
    if api is None:
        return NO_CLUSTER_MESSAGE
    return api.get_code().git_version


def print_versions(out: TextIO = sys.stdout, api: Optional[Any] = None):
    """
    Prints 'client' and 'kubernetes server' lines, tab-aligned. A server that
    cannot be queried yields a fixed message instead of an error.
    """
    try:
        server = kube_version(api)
    except (ApiException, HTTPError, OSError) as e:
        logger.debug(f"Server version query failed: {e}")
        out.write(f"{SERVER_ERROR_MESSAGE}\n")
        return

    rows = [("client:", client_version()), ("kubernetes server:", server)]
    width = max(len(label) for label, _ in rows)
    for label, value in rows:
        out.write(f"{label:<{width}} {value}\n")
