"""
Desired state of the resources owned by a Web.

Everything here is pure: the same Web always resolves to equal bodies, so
repeated reconciliation passes compare against the same target.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ...crds.web import Web
from ..config import (
    DEFAULT_CONTENT_FILE_NAME,
    DEFAULT_CONTENT_MOUNT_PATH,
    DEFAULT_IMAGE,
)
from .naming import DEFAULT_NAMING, NamingStrategy
from .resources.configmap import build_content_configmap
from .resources.deployment import build_deployment

CONFIGMAP_KIND = "ConfigMap"
DEPLOYMENT_KIND = "Deployment"


@dataclass(frozen=True)
class DependentSettings:
    default_image: str = DEFAULT_IMAGE
    content_mount_path: str = DEFAULT_CONTENT_MOUNT_PATH
    content_file_name: str = DEFAULT_CONTENT_FILE_NAME


@dataclass(frozen=True)
class DesiredDependents:
    configmap: Dict[str, Any]
    deployment: Dict[str, Any]

    def in_creation_order(self) -> List[Tuple[str, Dict[str, Any]]]:
        """The Deployment mounts the ConfigMap, so the ConfigMap always comes first."""
        return [
            (CONFIGMAP_KIND, self.configmap),
            (DEPLOYMENT_KIND, self.deployment),
        ]


def resolve_dependents(
    web: Web,
    naming: NamingStrategy = DEFAULT_NAMING,
    settings: DependentSettings = DependentSettings(),
) -> DesiredDependents:
    """
    Map a Web onto the exact ConfigMap and Deployment bodies it should own.

    Owner references are not part of the desired shape; they are attached by
    the state store right before creation.
    """
    name = web.metadata.name
    namespace = web.metadata.namespace
    configmap_name = naming.content_holder(name)

    configmap = build_content_configmap(
        configmap_name,
        namespace,
        file_name=settings.content_file_name,
        content=web.spec.html_content,
    )
    deployment = build_deployment(
        naming.workload(name),
        namespace,
        app_label=name,
        image=web.spec.image or settings.default_image,
        configmap_name=configmap_name,
        mount_path=settings.content_mount_path,
        container_port=web.spec.container_port,
    )
    return DesiredDependents(configmap=configmap, deployment=deployment)
