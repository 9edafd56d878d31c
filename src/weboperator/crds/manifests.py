"""
Cluster manifests for installing the Web CRD and the operator's RBAC.
"""
from typing import Any, Dict, List

from .const import CRD_GROUP, CRD_KIND_WEB, CRD_PLURAL_WEB, CRD_VERSION
from .web import MAX_SIZE, MIN_SIZE

OPERATOR_NAME = "web-operator"


def _condition_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "required": ["type", "status", "lastTransitionTime", "reason", "message"],
        "properties": {
            "type": {"type": "string", "maxLength": 316},
            "status": {"type": "string", "enum": ["True", "False", "Unknown"]},
            "reason": {"type": "string", "maxLength": 1024},
            "message": {"type": "string", "maxLength": 32768},
            "lastTransitionTime": {"type": "string", "format": "date-time"},
            "observedGeneration": {"type": "integer", "format": "int64", "minimum": 0},
        },
    }


def build_web_crd() -> Dict[str, Any]:
    """Builds the CustomResourceDefinition for the Web resource."""
    spec_schema = {
        "type": "object",
        "description": "WebSpec defines the desired state of Web",
        "properties": {
            "size": {
                "type": "integer",
                "format": "int32",
                "minimum": MIN_SIZE,
                "maximum": MAX_SIZE,
            },
            "containerPort": {"type": "integer", "format": "int32"},
            "image": {"type": "string"},
            "htmlContent": {"type": "string"},
        },
    }
    status_schema = {
        "type": "object",
        "description": "WebStatus defines the observed state of Web",
        "properties": {
            "conditions": {
                "type": "array",
                "items": _condition_schema(),
                "x-kubernetes-list-map-keys": ["type"],
                "x-kubernetes-list-type": "map",
            },
        },
    }
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": f"{CRD_PLURAL_WEB}.{CRD_GROUP}"},
        "spec": {
            "group": CRD_GROUP,
            "names": {
                "kind": CRD_KIND_WEB,
                "listKind": f"{CRD_KIND_WEB}List",
                "plural": CRD_PLURAL_WEB,
                "singular": CRD_KIND_WEB.lower(),
            },
            "scope": "Namespaced",
            "versions": [
                {
                    "name": CRD_VERSION,
                    "served": True,
                    "storage": True,
                    "subresources": {"status": {}},
                    "schema": {
                        "openAPIV3Schema": {
                            "type": "object",
                            "description": "Web is the Schema for the webs API",
                            "properties": {
                                "apiVersion": {"type": "string"},
                                "kind": {"type": "string"},
                                "metadata": {"type": "object"},
                                "spec": spec_schema,
                                "status": status_schema,
                            },
                        }
                    },
                }
            ],
        },
    }


def _rule(api_group: str, resources: List[str], verbs: List[str]) -> Dict[str, Any]:
    return {"apiGroups": [api_group], "resources": resources, "verbs": verbs}


def build_cluster_role() -> Dict[str, Any]:
    """Builds the ClusterRole the operator needs to watch Webs and manage their dependents."""
    all_verbs = ["get", "list", "watch", "create", "update", "patch", "delete"]
    return {
        "apiVersion": "rbac.authorization.k8s.io/v1",
        "kind": "ClusterRole",
        "metadata": {"name": f"{OPERATOR_NAME}-role"},
        "rules": [
            _rule(CRD_GROUP, [CRD_PLURAL_WEB], all_verbs),
            _rule(CRD_GROUP, [f"{CRD_PLURAL_WEB}/status"], ["get", "update", "patch"]),
            _rule(CRD_GROUP, [f"{CRD_PLURAL_WEB}/finalizers"], ["update"]),
            _rule("", ["events"], ["create", "patch"]),
            _rule("apps", ["deployments"], all_verbs),
            _rule("", ["pods"], ["get", "list", "watch"]),
            _rule("", ["configmaps"], all_verbs),
            # kopf needs to discover the CRD and list namespaces when run cluster-wide.
            _rule("apiextensions.k8s.io", ["customresourcedefinitions"], ["get", "list", "watch"]),
            _rule("", ["namespaces"], ["get", "list", "watch"]),
        ],
    }


def build_manifests() -> List[Dict[str, Any]]:
    return [build_web_crd(), build_cluster_role()]
