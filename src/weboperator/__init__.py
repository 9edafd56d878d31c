"""A Kubernetes operator that serves static web content from a Web custom resource."""
