from typing import Any, Dict, Optional

CONTAINER_NAME = "web-container"
CONTENT_VOLUME_NAME = "html"


def build_deployment(
    name: str,
    namespace: str,
    app_label: str,
    image: str,
    configmap_name: str,
    mount_path: str,
    container_port: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Builds the Deployment serving the content ConfigMap.

    No replica count is written; the API server defaults it.
    """
    container: Dict[str, Any] = {
        "name": CONTAINER_NAME,
        "image": image,
        "volumeMounts": [
            {"name": CONTENT_VOLUME_NAME, "mountPath": mount_path},
        ],
    }
    if container_port:
        container["ports"] = [{"containerPort": container_port}]

    deployment_spec = {
        "selector": {"matchLabels": {"app": app_label}},
        "template": {
            "metadata": {"labels": {"app": app_label}},
            "spec": {
                "containers": [container],
                "volumes": [
                    {
                        "name": CONTENT_VOLUME_NAME,
                        "configMap": {"name": configmap_name},
                    },
                ],
            },
        },
    }

    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": name,
            "namespace": namespace,
        },
        "spec": deployment_spec,
    }
