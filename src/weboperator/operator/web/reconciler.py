"""
Convergence of a Web towards its owned ConfigMap and Deployment.

A pass is stateless: everything it needs is re-read from the cluster, and a
failed or cancelled pass leaves behind only fully created objects, which the
next pass recognises and skips.

Existing dependents are never updated. Drift between a Web's spec and its
already-created ConfigMap or Deployment is not corrected.
"""
import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...crds.const import CRD_KIND_WEB
from ...crds.web import Web
from .errors import AlreadyExistsError, NotFoundError, OwnershipError, StoreError
from .naming import DEFAULT_NAMING, NamingStrategy
from .resolver import DependentSettings, resolve_dependents
from .store import KubeStateStore, StateStore


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconciliation pass: done, error(cause), or requeue_after(delay)."""

    cause: Optional[Exception] = None
    delay: Optional[float] = None

    @classmethod
    def done(cls) -> "ReconcileResult":
        return cls()

    @classmethod
    def error(cls, cause: Exception) -> "ReconcileResult":
        return cls(cause=cause)

    @classmethod
    def requeue_after(cls, delay: float) -> "ReconcileResult":
        return cls(delay=delay)

    @property
    def is_done(self) -> bool:
        return self.cause is None and self.delay is None


def _is_controlled_by(obj: Dict[str, Any], owner: Dict[str, Any]) -> bool:
    owner_uid = owner.get("metadata", {}).get("uid")
    refs = obj.get("metadata", {}).get("ownerReferences") or []
    return any(ref.get("controller") and ref.get("uid") == owner_uid for ref in refs)


class WebReconciler:
    """
    Creates the ConfigMap and Deployment of a Web when they are missing.

    Retries are left to the caller: a failed pass reports its cause and stops.
    """

    def __init__(
        self,
        store: StateStore,
        naming: NamingStrategy = DEFAULT_NAMING,
        settings: DependentSettings = DependentSettings(),
    ):
        self.store = store
        self.naming = naming
        self.settings = settings

    async def reconcile(
        self, name: str, namespace: str, logger: logging.Logger
    ) -> ReconcileResult:
        try:
            web_body = await self.store.get(CRD_KIND_WEB, name, namespace)
        except NotFoundError:
            logger.info(
                f"Web '{name}' not found in namespace '{namespace}'. "
                "Ignoring since it must have been deleted."
            )
            return ReconcileResult.done()
        except StoreError as e:
            logger.error(f"Unable to fetch Web '{name}': {e}")
            return ReconcileResult.error(e)

        web = Web.from_dict(web_body)
        desired = resolve_dependents(web, self.naming, self.settings)

        for kind, body in desired.in_creation_order():
            try:
                await self._ensure_dependent(kind, body, web_body, logger)
            except StoreError as e:
                return ReconcileResult.error(e)

        return ReconcileResult.done()

    async def _ensure_dependent(
        self,
        kind: str,
        desired: Dict[str, Any],
        owner: Dict[str, Any],
        logger: logging.Logger,
    ) -> bool:
        """
        Create ``desired`` if it is absent.

        Returns True when this call created the object.
        """
        name = desired["metadata"]["name"]
        namespace = desired["metadata"]["namespace"]

        try:
            existing = await self.store.get(kind, name, namespace)
        except NotFoundError:
            existing = None
        except StoreError as e:
            logger.error(f"Unable to get {kind} '{name}': {e}")
            raise

        if existing is not None:
            if not _is_controlled_by(existing, owner):
                logger.warning(
                    f"{kind} '{name}' exists but is not controlled by Web "
                    f"'{owner['metadata']['name']}'; leaving it untouched."
                )
            return False

        body = copy.deepcopy(desired)
        try:
            self.store.set_owner(body, owner)
        except OwnershipError as e:
            logger.error(f"Unable to set owner reference on {kind} '{name}': {e}")
            raise

        try:
            await self.store.create(body)
        except AlreadyExistsError:
            logger.info(f"{kind} '{name}' was created concurrently.")
            return False
        except StoreError as e:
            logger.error(f"Unable to create {kind} '{name}' for Web: {e}")
            raise

        logger.info(f"{kind} '{name}' has been created.")
        return True


async def reconcile_web(
    name: str,
    namespace: str,
    logger: logging.Logger,
    store: Optional[StateStore] = None,
    naming: NamingStrategy = DEFAULT_NAMING,
    settings: DependentSettings = DependentSettings(),
) -> ReconcileResult:
    """
    Run one reconciliation pass for the Web identified by (name, namespace).

    Args:
        name: Name of the Web
        namespace: Namespace of the Web
        logger: Logger instance
        store: State store; defaults to the live cluster

    Returns:
        The outcome of the pass
    """
    reconciler = WebReconciler(store or KubeStateStore(), naming, settings)
    return await reconciler.reconcile(name, namespace, logger)
