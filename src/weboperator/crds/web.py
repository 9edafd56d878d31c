from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from kubernetes import client

from .base import BaseCustomResource, ObjectMeta
from .const import CRD_GROUP, CRD_KIND_WEB, CRD_PLURAL_WEB, CRD_VERSION

MIN_SIZE = 1
MAX_SIZE = 5


@dataclass
class WebSpec:
    """
    Desired state of a Web.

    ``size`` is part of the user-facing schema but is not propagated into the
    workload; the Deployment is created without a replica count.
    """

    size: Optional[int] = None
    container_port: Optional[int] = None
    image: Optional[str] = None
    html_content: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "WebSpec":
        data = data or {}
        return cls(
            size=data.get("size"),
            container_port=data.get("containerPort"),
            image=data.get("image"),
            html_content=data.get("htmlContent") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "size": self.size,
            "containerPort": self.container_port,
            "image": self.image,
            "htmlContent": self.html_content,
        }
        return {k: v for k, v in body.items() if v is not None and v != ""}


@dataclass
class Condition:
    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_transition_time: Optional[str] = None
    observed_generation: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Condition":
        return cls(
            type=data["type"],
            status=data["status"],
            reason=data.get("reason", ""),
            message=data.get("message", ""),
            last_transition_time=data.get("lastTransitionTime"),
            observed_generation=data.get("observedGeneration"),
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "type": self.type,
            "status": self.status,
            "reason": self.reason,
            "message": self.message,
        }
        if self.last_transition_time is not None:
            body["lastTransitionTime"] = self.last_transition_time
        if self.observed_generation is not None:
            body["observedGeneration"] = self.observed_generation
        return body


@dataclass
class WebStatus:
    # Reported shape only; the controller does not write conditions.
    conditions: List[Condition] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "WebStatus":
        data = data or {}
        return cls(
            conditions=[Condition.from_dict(c) for c in data.get("conditions") or []]
        )

    def to_dict(self) -> Dict[str, Any]:
        if not self.conditions:
            return {}
        return {"conditions": [c.to_dict() for c in self.conditions]}


class Web(BaseCustomResource):
    group = CRD_GROUP
    version = CRD_VERSION
    plural = CRD_PLURAL_WEB
    kind = CRD_KIND_WEB

    def __init__(
        self,
        metadata: ObjectMeta,
        spec: WebSpec,
        status: Optional[WebStatus] = None,
        api: Optional[client.CustomObjectsApi] = None,
    ) -> None:
        super().__init__(api)
        self.metadata = metadata
        self.spec = spec
        self.status = status or WebStatus()

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], api: Optional[client.CustomObjectsApi] = None
    ) -> "Web":
        return cls(
            metadata=ObjectMeta.from_dict(data["metadata"]),
            spec=WebSpec.from_dict(data.get("spec")),
            status=WebStatus.from_dict(data.get("status")),
            api=api,
        )

    def to_dict(self) -> Dict[str, Any]:
        body = {
            "apiVersion": self.api_version(),
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
        }
        # The API server ignores status on create; it is kept so that bodies round-trip.
        status = self.status.to_dict()
        if status:
            body["status"] = status
        return body

    @property
    def identifier(self) -> Tuple[str, Optional[str]]:
        return self.metadata.name, self.metadata.namespace
