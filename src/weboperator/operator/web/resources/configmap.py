from typing import Any, Dict


def build_content_configmap(
    name: str,
    namespace: str,
    file_name: str,
    content: str,
) -> Dict[str, Any]:
    """Builds the ConfigMap holding the static content served by the workload."""
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {
            "name": name,
            "namespace": namespace,
        },
        "data": {
            file_name: content,
        },
    }
