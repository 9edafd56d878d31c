import logging
from typing import Any, Dict, Optional

import kopf

from .reconciler import ReconcileResult, reconcile_web
from .resolver import DependentSettings
from ..config import config as operator_config
from ...crds.const import CRD_GROUP, CRD_KIND_WEB, CRD_PLURAL_WEB, CRD_VERSION


def dependent_settings() -> DependentSettings:
    return DependentSettings(
        default_image=operator_config.default_image,
        content_mount_path=operator_config.content_mount_path,
        content_file_name=operator_config.content_file_name,
    )


def raise_for_result(result: ReconcileResult, retry: int) -> None:
    """
    Hand a failed or requeued pass back to kopf, which re-invokes the handler later.
    """
    if result.cause is not None:
        delay = operator_config.retry_delay(retry)
        raise kopf.TemporaryError(
            f"Reconciliation failed, retrying in {delay:.0f}s: {result.cause}",
            delay=delay,
        ) from result.cause
    if result.delay is not None:
        raise kopf.TemporaryError("Reconciliation requeued.", delay=result.delay)


@kopf.on.create(CRD_GROUP, CRD_VERSION, CRD_PLURAL_WEB)
@kopf.on.update(CRD_GROUP, CRD_VERSION, CRD_PLURAL_WEB)
@kopf.on.resume(CRD_GROUP, CRD_VERSION, CRD_PLURAL_WEB)
async def reconcile_web_handler(
    name: str,
    namespace: str,
    logger: logging.Logger,
    retry: int,
    **kwargs: Any,
) -> None:
    """
    Handle the creation, update, or operator-restart pickup of a Web resource.
    """
    logger.info(f"Reconciling Web '{name}' in namespace '{namespace}'...")
    result = await reconcile_web(name, namespace, logger, settings=dependent_settings())
    raise_for_result(result, retry)


def web_owner_reference(meta: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the controller owner reference pointing at a Web, if there is one."""
    for ref in meta.get("ownerReferences") or []:
        if (
            ref.get("controller")
            and ref.get("kind") == CRD_KIND_WEB
            and ref.get("apiVersion") == f"{CRD_GROUP}/{CRD_VERSION}"
        ):
            return ref
    return None


def is_owned_by_web(meta: Dict[str, Any], **_: Any) -> bool:
    return web_owner_reference(meta) is not None


@kopf.on.event("v1", "configmaps", when=is_owned_by_web)
@kopf.on.event("apps", "v1", "deployments", when=is_owned_by_web)
async def dependent_event_handler(
    event: Dict[str, Any],
    meta: Dict[str, Any],
    namespace: str,
    logger: logging.Logger,
    **kwargs: Any,
) -> None:
    """
    Re-run the owning Web's reconciliation when one of its dependents changes.

    Deleting a dependent by hand is repaired this way. Event handlers are not
    retried by kopf, so a failed pass is logged here and retried by the
    periodic resync of the Web.
    """
    owner = web_owner_reference(meta)
    if owner is None:
        return
    logger.debug(
        f"{event.get('type') or 'Existing'} event for dependent of Web '{owner['name']}'."
    )
    result = await reconcile_web(owner["name"], namespace, logger, settings=dependent_settings())
    if result.cause is not None:
        logger.error(f"Reconciliation of Web '{owner['name']}' failed: {result.cause}")



@kopf.timer(
    CRD_GROUP,
    CRD_VERSION,
    CRD_PLURAL_WEB,
    interval=operator_config.resync_interval,
    idle=operator_config.resync_interval,
)
async def resync_web(
    name: str,
    namespace: str,
    logger: logging.Logger,
    retry: int = 0,
    **kwargs: Any,
) -> None:
    """
    Periodically re-run the reconciliation of a Web that has been left alone.

    This recovers passes that failed outside the Web's own handlers, such as
    those triggered by dependent events. Failures are raised to kopf, which
    retries the timer with backoff.
    """
    logger.debug(f"Resyncing Web '{name}' in namespace '{namespace}'.")
    result = await reconcile_web(name, namespace, logger, settings=dependent_settings())
    raise_for_result(result, retry)


@kopf.on.delete(CRD_GROUP, CRD_VERSION, CRD_PLURAL_WEB, optional=True)
async def delete_web(
    name: str, namespace: str, logger: logging.Logger, **kwargs: Any
) -> None:
    """
    Handle the deletion of a Web resource.

    The ConfigMap and Deployment are owned by the Web via owner references
    and are garbage collected by the cluster.
    """
    logger.info(f"Web '{name}' in namespace '{namespace}' is being deleted.")
    logger.info("Associated ConfigMap and Deployment will be garbage collected.")
