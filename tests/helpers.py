"""
Shared helpers for the tests: manifests and an in-memory state store.
"""
import asyncio
import copy
from typing import Any, Dict, List, Optional, Tuple

from weboperator.crds.const import CRD_GROUP, CRD_KIND_WEB, CRD_VERSION
from weboperator.operator.web.errors import AlreadyExistsError, NotFoundError
from weboperator.operator.web.store import set_controller_reference


def build_web_body(
    name: str = "site",
    namespace: str = "ns",
    uid: Optional[str] = "uid-site",
    size: Optional[int] = 2,
    container_port: Optional[int] = 80,
    image: Optional[str] = "nginx:1.25",
    html_content: Optional[str] = "<h1>hi</h1>",
) -> Dict[str, Any]:
    """Builds a Web as the API server would return it."""
    metadata: Dict[str, Any] = {"name": name, "namespace": namespace}
    if uid is not None:
        metadata["uid"] = uid
    spec = {
        "size": size,
        "containerPort": container_port,
        "image": image,
        "htmlContent": html_content,
    }
    return {
        "apiVersion": f"{CRD_GROUP}/{CRD_VERSION}",
        "kind": CRD_KIND_WEB,
        "metadata": metadata,
        "spec": {k: v for k, v in spec.items() if v is not None},
    }


class FakeStateStore:
    """
    In-memory StateStore.

    Every call yields to the event loop once, so overlapping passes interleave
    the way they would against a real API server. Create is atomic: exactly one
    of several racing creators wins.
    """

    def __init__(self, *bodies: Dict[str, Any]) -> None:
        self.objects: Dict[Tuple[str, str, str], Dict[str, Any]] = {}
        self.created: List[Tuple[str, str]] = []
        self.conflicts: List[Tuple[str, str]] = []
        self.get_failures: Dict[str, Exception] = {}
        self.create_failures: Dict[str, Exception] = {}
        self.owner_failure: Optional[Exception] = None
        for body in bodies:
            self.add(body)

    @staticmethod
    def _key(kind: str, name: str, namespace: str) -> Tuple[str, str, str]:
        return kind, namespace, name

    def add(self, body: Dict[str, Any]) -> None:
        meta = body["metadata"]
        self.objects[self._key(body["kind"], meta["name"], meta["namespace"])] = copy.deepcopy(body)

    def remove(self, kind: str, name: str, namespace: str) -> None:
        del self.objects[self._key(kind, name, namespace)]

    def lookup(self, kind: str, name: str, namespace: str) -> Optional[Dict[str, Any]]:
        return self.objects.get(self._key(kind, name, namespace))

    async def get(self, kind: str, name: str, namespace: str) -> Dict[str, Any]:
        await asyncio.sleep(0)
        if kind in self.get_failures:
            raise self.get_failures[kind]
        try:
            return copy.deepcopy(self.objects[self._key(kind, name, namespace)])
        except KeyError:
            raise NotFoundError(f"{kind} '{name}' not found.", status=404) from None

    async def create(self, body: Dict[str, Any]) -> Dict[str, Any]:
        await asyncio.sleep(0)
        kind = body["kind"]
        name = body["metadata"]["name"]
        if kind in self.create_failures:
            raise self.create_failures[kind]
        key = self._key(kind, name, body["metadata"]["namespace"])
        if key in self.objects:
            self.conflicts.append((kind, name))
            raise AlreadyExistsError(f"{kind} '{name}' already exists.", status=409)
        self.objects[key] = copy.deepcopy(body)
        self.created.append((kind, name))
        return copy.deepcopy(body)

    def set_owner(self, child: Dict[str, Any], parent: Dict[str, Any]) -> None:
        if self.owner_failure is not None:
            raise self.owner_failure
        set_controller_reference(child, parent)


def find_keys(obj: Any, key: str) -> List[Any]:
    """Collects every value stored under ``key`` anywhere in a nested body."""
    found = []
    if isinstance(obj, dict):
        for k, v in obj.items():
            if k == key:
                found.append(v)
            found.extend(find_keys(v, key))
    elif isinstance(obj, list):
        for item in obj:
            found.extend(find_keys(item, key))
    return found
