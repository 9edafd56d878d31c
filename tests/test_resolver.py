from weboperator.crds.web import Web
from weboperator.operator.web.naming import DEFAULT_NAMING, NamingStrategy
from weboperator.operator.web.resolver import (
    CONFIGMAP_KIND,
    DEPLOYMENT_KIND,
    DependentSettings,
    resolve_dependents,
)
from tests.helpers import build_web_body, find_keys


def test_default_naming_derives_dependent_names():
    assert DEFAULT_NAMING.content_holder("site") == "site-cm"
    assert DEFAULT_NAMING.workload("site") == "sitedeployment"


def test_default_workload_name_has_no_delimiter():
    """A Web named 'x' owns a Deployment whose name is indistinguishable from a foreign 'xdeployment'."""
    assert DEFAULT_NAMING.workload("x") == "xdeployment"
    assert DEFAULT_NAMING.workload("x") != DEFAULT_NAMING.workload("xdeployment")
    assert DEFAULT_NAMING.workload("xdeployment") == "xdeploymentdeployment"


def test_delimited_naming_strategy_can_be_injected():
    naming = NamingStrategy(workload=lambda name: f"{name}-deployment")
    web = Web.from_dict(build_web_body(name="x"))

    desired = resolve_dependents(web, naming)

    assert desired.deployment["metadata"]["name"] == "x-deployment"
    assert desired.configmap["metadata"]["name"] == "x-cm"


def test_resolves_concrete_scenario():
    web = Web.from_dict(build_web_body())

    desired = resolve_dependents(web)

    assert desired.configmap == {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": "site-cm", "namespace": "ns"},
        "data": {"index.html": "<h1>hi</h1>"},
    }
    assert desired.deployment == {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "sitedeployment", "namespace": "ns"},
        "spec": {
            "selector": {"matchLabels": {"app": "site"}},
            "template": {
                "metadata": {"labels": {"app": "site"}},
                "spec": {
                    "containers": [
                        {
                            "name": "web-container",
                            "image": "nginx:1.25",
                            "volumeMounts": [{"name": "html", "mountPath": "/app"}],
                            "ports": [{"containerPort": 80}],
                        }
                    ],
                    "volumes": [{"name": "html", "configMap": {"name": "site-cm"}}],
                },
            },
        },
    }
    assert find_keys(desired.deployment, "replicas") == []


def test_resolution_is_deterministic():
    web = Web.from_dict(build_web_body())

    assert resolve_dependents(web) == resolve_dependents(web)


def test_creation_order_puts_configmap_first():
    desired = resolve_dependents(Web.from_dict(build_web_body()))

    kinds = [kind for kind, _ in desired.in_creation_order()]

    assert kinds == [CONFIGMAP_KIND, DEPLOYMENT_KIND]


def test_missing_optional_fields_fall_back_to_settings():
    web = Web.from_dict(
        build_web_body(size=None, container_port=None, image=None, html_content=None)
    )
    settings = DependentSettings(default_image="httpd:2.4", content_file_name="home.html")

    desired = resolve_dependents(web, settings=settings)

    container = desired.deployment["spec"]["template"]["spec"]["containers"][0]
    assert container["image"] == "httpd:2.4"
    assert "ports" not in container
    assert desired.configmap["data"] == {"home.html": ""}


def test_owner_references_are_not_part_of_the_desired_shape():
    desired = resolve_dependents(Web.from_dict(build_web_body()))

    assert find_keys(desired.configmap, "ownerReferences") == []
    assert find_keys(desired.deployment, "ownerReferences") == []
