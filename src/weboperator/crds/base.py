from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional, Type, TypeVar

from kubernetes import client

from ..utils.kube import KubernetesConfigurationError, configure_kube_client

# A generic type for BaseCustomResource subclasses
T = TypeVar("T", bound="BaseCustomResource")


class KubeConfigError(RuntimeError):
    """Raised when a custom resource client has no usable cluster credentials."""


def _get_k8s_api() -> client.CustomObjectsApi:
    """
    Initializes and returns the Kubernetes CustomObjectsApi client.

    Raises a KubeConfigError with a helpful message if the Kubernetes
    configuration cannot be loaded.
    """
    try:
        configure_kube_client()
    except KubernetesConfigurationError as exc:
        raise KubeConfigError(
            "Kubernetes configuration not found. Please ensure you have a valid "
            "kubeconfig file or are running in-cluster."
        ) from exc

    return client.CustomObjectsApi()


@dataclass
class ObjectMeta:
    name: str
    namespace: Optional[str] = None
    uid: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObjectMeta":
        """
        Constructs an ObjectMeta from a dictionary, ignoring unknown fields.
        This makes it robust to extra metadata from the Kubernetes API.
        """
        known_field_names = {f.name for f in fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in known_field_names}
        return cls(**filtered_data)

    def to_dict(self) -> Dict[str, Any]:
        # Drop None values and empty collections so that create bodies stay minimal.
        return {k: v for k, v in asdict(self).items() if v is not None and v}


class BaseCustomResource:
    """
    Thin client for a namespaced custom resource.

    Subclasses declare the group/version/plural/kind and implement
    ``from_dict`` and ``to_dict`` for their own spec and status types.
    """

    group: str
    version: str
    plural: str
    kind: str

    metadata: ObjectMeta

    def __init__(self, api: Optional[client.CustomObjectsApi] = None) -> None:
        self._api = api

    @property
    def api(self) -> client.CustomObjectsApi:
        if self._api is None:
            self._api = _get_k8s_api()
        return self._api

    @classmethod
    def api_version(cls) -> str:
        return f"{cls.group}/{cls.version}"

    @classmethod
    def from_dict(
        cls: Type[T], data: Dict[str, Any], api: Optional[client.CustomObjectsApi] = None
    ) -> T:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def get(
        cls: Type[T],
        name: str,
        *,
        namespace: str,
        api: Optional[client.CustomObjectsApi] = None,
    ) -> T:
        api_instance = api or _get_k8s_api()
        data = api_instance.get_namespaced_custom_object(
            group=cls.group,
            version=cls.version,
            namespace=namespace,
            plural=cls.plural,
            name=name,
        )
        return cls.from_dict(data, api=api_instance)

    @classmethod
    def list(
        cls: Type[T],
        namespace: Optional[str] = None,
        api: Optional[client.CustomObjectsApi] = None,
    ) -> List[T]:
        """Lists custom resources in one namespace, or across all of them."""
        api_instance = api or _get_k8s_api()

        if namespace:
            result = api_instance.list_namespaced_custom_object(
                group=cls.group,
                version=cls.version,
                namespace=namespace,
                plural=cls.plural,
            )
        else:
            result = api_instance.list_cluster_custom_object(
                group=cls.group,
                version=cls.version,
                plural=cls.plural,
            )

        return [cls.from_dict(item, api=api_instance) for item in result["items"]]

    def create(self: T) -> T:
        """Creates this custom resource in the cluster and returns the stored object."""
        if not self.metadata.namespace:
            raise ValueError("Namespace is required for namespaced resources")
        created_obj = self.api.create_namespaced_custom_object(
            group=self.group,
            version=self.version,
            namespace=self.metadata.namespace,
            plural=self.plural,
            body=self.to_dict(),
        )
        return self.from_dict(created_obj, api=self.api)

    def delete(self) -> None:
        """Deletes the custom resource from the cluster."""
        if not self.metadata.namespace:
            raise ValueError("Namespace is required for namespaced resources")
        self.api.delete_namespaced_custom_object(
            group=self.group,
            version=self.version,
            namespace=self.metadata.namespace,
            plural=self.plural,
            name=self.metadata.name,
            body=client.V1DeleteOptions(),
        )
