"""
Typed access to the cluster objects a Web reconciliation reads and writes.
"""
import asyncio
import functools
from typing import Any, Callable, Dict, Optional, Protocol

import kopf
import urllib3
from kubernetes import client

from ...crds.const import CRD_GROUP, CRD_KIND_WEB, CRD_PLURAL_WEB, CRD_VERSION
from ...utils.kube import to_plain_dict
from .errors import AlreadyExistsError, NotFoundError, OwnershipError, StoreError


class StateStore(Protocol):
    async def get(self, kind: str, name: str, namespace: str) -> Dict[str, Any]:
        """Return the object, or raise NotFoundError."""

    async def create(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Create the object, raising AlreadyExistsError if it is already there."""

    def set_owner(self, child: Dict[str, Any], parent: Dict[str, Any]) -> None:
        """Mark ``child`` as controlled by ``parent`` for cascading deletion."""


def set_controller_reference(child: Dict[str, Any], parent: Dict[str, Any]) -> None:
    """
    Attach a controller owner reference from ``child`` to ``parent``.

    The parent must already be stored: its uid is what the garbage collector
    follows when the parent is deleted.
    """
    metadata = parent.get("metadata") or {}
    if not metadata.get("uid"):
        raise OwnershipError(
            f"{parent.get('kind', 'Object')} '{metadata.get('name')}' has no uid; "
            "refusing to create an unowned dependent."
        )
    try:
        kopf.adopt(child, owner=parent)
    except (LookupError, TypeError, ValueError) as e:
        raise OwnershipError(f"Unable to set owner reference: {e}") from e


def _api_error(action: str, kind: str, name: str, e: client.ApiException) -> StoreError:
    if e.status == 404:
        return NotFoundError(f"{kind} '{name}' not found.", status=e.status)
    if e.status == 409:
        return AlreadyExistsError(f"{kind} '{name}' already exists.", status=e.status)
    return StoreError(f"Failed to {action} {kind} '{name}': {e.reason}", status=e.status)


class KubeStateStore:
    """
    StateStore backed by the official kubernetes client.

    The client is blocking, so every call goes through ``asyncio.to_thread``.
    """

    def __init__(
        self,
        core_v1: Optional[client.CoreV1Api] = None,
        apps_v1: Optional[client.AppsV1Api] = None,
        custom_objects_api: Optional[client.CustomObjectsApi] = None,
        api_client: Optional[client.ApiClient] = None,
    ) -> None:
        self.api_client = api_client or client.ApiClient()
        self.core_v1 = core_v1 or client.CoreV1Api(self.api_client)
        self.apps_v1 = apps_v1 or client.AppsV1Api(self.api_client)
        self.custom_objects_api = custom_objects_api or client.CustomObjectsApi(self.api_client)

        self._readers: Dict[str, Callable[..., Any]] = {
            CRD_KIND_WEB: functools.partial(
                self.custom_objects_api.get_namespaced_custom_object,
                CRD_GROUP,
                CRD_VERSION,
                plural=CRD_PLURAL_WEB,
            ),
            "ConfigMap": self.core_v1.read_namespaced_config_map,
            "Deployment": self.apps_v1.read_namespaced_deployment,
        }
        self._creators: Dict[str, Callable[..., Any]] = {
            "ConfigMap": self.core_v1.create_namespaced_config_map,
            "Deployment": self.apps_v1.create_namespaced_deployment,
        }

    async def get(self, kind: str, name: str, namespace: str) -> Dict[str, Any]:
        reader = self._readers[kind]
        try:
            obj = await asyncio.to_thread(reader, name=name, namespace=namespace)
        except client.ApiException as e:
            raise _api_error("get", kind, name, e) from e
        except urllib3.exceptions.HTTPError as e:
            raise StoreError(f"Failed to get {kind} '{name}': {e}") from e
        return to_plain_dict(obj, self.api_client)

    async def create(self, body: Dict[str, Any]) -> Dict[str, Any]:
        kind = body["kind"]
        name = body["metadata"]["name"]
        creator = self._creators[kind]
        try:
            obj = await asyncio.to_thread(
                creator, namespace=body["metadata"]["namespace"], body=body
            )
        except client.ApiException as e:
            raise _api_error("create", kind, name, e) from e
        except urllib3.exceptions.HTTPError as e:
            raise StoreError(f"Failed to create {kind} '{name}': {e}") from e
        return to_plain_dict(obj, self.api_client)

    def set_owner(self, child: Dict[str, Any], parent: Dict[str, Any]) -> None:
        set_controller_reference(child, parent)
