"""
Kubernetes operator for Web custom resources.

This module contains the operator-wide Kopf handlers. The Web handlers are
kept thin and delegate to specialized modules for:
- Naming of dependents (naming.py)
- Desired-state resolution (resolver.py)
- Cluster access (store.py)
- Reconciliation (reconciler.py)
"""
import logging
from typing import Any

import kopf

from ..utils.kube import KubernetesConfigurationError, configure_kube_client
# NOTE: This is what registers our operator's functions with kopf so that
#       `kopf run -m weboperator.operator` can work. If you add more handler
#       modules to the operator, you must import them here.
# ruff: noqa: F401
from . import web
from .config import config as operator_config


@kopf.on.startup()
async def on_startup(
    settings: kopf.OperatorSettings, logger: logging.Logger, **kwargs: Any
) -> None:
    """
    Handle the startup of the operator.

    This configures the kubernetes client and sets operator-wide settings.
    """
    try:
        configure_kube_client(logger)
    except KubernetesConfigurationError as exc:
        raise kopf.PermanentError(str(exc)) from exc

    logger.info("Operator started.")
    logger.info(f"Default web image: {operator_config.default_image}")

    # The default worker limit is unbounded which means you can EASILY flood
    # your API server on restart unless you limit it.
    settings.batching.worker_limit = operator_config.worker_limit

    # All logs by default go to the k8s event api. Disable event posting to
    # reduce API load.
    settings.posting.enabled = operator_config.posting_enabled
