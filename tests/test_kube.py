import logging
from unittest.mock import patch

import pytest
from kubernetes import config as kube_config

from weboperator.utils import kube
from weboperator.utils.kube import KubernetesConfigurationError, configure_kube_client


@pytest.fixture
def load_incluster():
    with patch.object(kube.kube_config, "load_incluster_config") as mock_load:
        yield mock_load


@pytest.fixture
def load_kubeconfig():
    with patch.object(kube.kube_config, "load_kube_config") as mock_load:
        yield mock_load


def test_prefers_in_cluster_configuration(load_incluster, load_kubeconfig):
    assert configure_kube_client() == "in-cluster"

    load_incluster.assert_called_once_with()
    load_kubeconfig.assert_not_called()


def test_falls_back_to_kubeconfig_outside_the_cluster(load_incluster, load_kubeconfig, caplog):
    load_incluster.side_effect = kube_config.ConfigException("not in a pod")
    logger = logging.getLogger("tests.weboperator.kube")

    with caplog.at_level("INFO", logger=logger.name):
        assert configure_kube_client(logger) == "kubeconfig"

    load_kubeconfig.assert_called_once_with()
    assert "Using local kubeconfig." in caplog.text


def test_raises_when_no_configuration_is_available(load_incluster, load_kubeconfig):
    load_incluster.side_effect = kube_config.ConfigException("not in a pod")
    load_kubeconfig.side_effect = kube_config.ConfigException("no kubeconfig")

    with pytest.raises(KubernetesConfigurationError) as exc_info:
        configure_kube_client()

    assert isinstance(exc_info.value.__cause__, kube_config.ConfigException)
