"""
Shared helpers for the Kubernetes Python client.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional

from kubernetes import client, config as kube_config


class KubernetesConfigurationError(RuntimeError):
    """Raised when the Kubernetes client cannot be configured."""


def configure_kube_client(
    logger: Optional[logging.Logger] = None,
) -> Literal["in-cluster", "kubeconfig"]:
    """
    Load in-cluster credentials, or the default kubeconfig when running outside a pod.

    Returns the source that was used.
    """
    log = logger or logging.getLogger(__name__)
    try:
        kube_config.load_incluster_config()
    except kube_config.ConfigException as incluster_error:
        log.debug("No in-cluster configuration: %s", incluster_error)
    else:
        log.info("Using in-cluster Kubernetes configuration.")
        return "in-cluster"

    try:
        kube_config.load_kube_config()
    except kube_config.ConfigException as e:
        message = "Could not load in-cluster credentials or a kubeconfig."
        log.error("%s %s", message, e)
        raise KubernetesConfigurationError(message) from e
    log.info("Using local kubeconfig.")
    return "kubeconfig"


def to_plain_dict(obj: Any, api_client: client.ApiClient) -> Dict[str, Any]:
    """
    Convert a kubernetes client model (e.g. V1ConfigMap) into its wire-format dict.

    Plain dicts are returned unchanged.
    """
    if isinstance(obj, dict):
        return obj
    return api_client.sanitize_for_serialization(obj)
