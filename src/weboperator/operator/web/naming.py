"""
Naming of the resources owned by a Web.
"""
from dataclasses import dataclass
from typing import Callable


def default_content_holder_name(web_name: str) -> str:
    return f"{web_name}-cm"


def default_workload_name(web_name: str) -> str:
    # No delimiter: a Web named "x" and a Deployment named "xdeployment" share a name.
    return f"{web_name}deployment"


@dataclass(frozen=True)
class NamingStrategy:
    """Pure mappings from a Web's name to the names of its dependents."""

    content_holder: Callable[[str], str] = default_content_holder_name
    workload: Callable[[str], str] = default_workload_name


DEFAULT_NAMING = NamingStrategy()
