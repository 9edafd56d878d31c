from pathlib import Path
from typing import Optional, Tuple

import click
import kopf
import yaml
from kubernetes import client
from rich.console import Console
from rich.table import Table

from ..crds.base import KubeConfigError, ObjectMeta
from ..crds.manifests import build_manifests
from ..crds.web import MAX_SIZE, MIN_SIZE, Web, WebSpec

DEFAULT_NAMESPACE = "default"


@click.group()
def main() -> None:
    """A CLI to run the Web operator and manage Web resources."""


@main.command(help="Run the operator.")
@click.option(
    "--namespace",
    "-n",
    "namespaces",
    multiple=True,
    help="Namespace to watch. Repeat for several; omit to watch the whole cluster.",
)
@click.option("--verbose", is_flag=True, help="Enable verbose operator logging.")
def run(namespaces: Tuple[str, ...], verbose: bool) -> None:
    # Importing the operator package is what registers the kopf handlers.
    from .. import operator  # noqa: F401

    kopf.configure(verbose=verbose)
    kopf.run(
        standalone=True,
        clusterwide=not namespaces,
        namespaces=list(namespaces),
    )


@main.command(help="Print the CRD and RBAC manifests as YAML.")
def manifests() -> None:
    click.echo(yaml.safe_dump_all(build_manifests(), sort_keys=False), nl=False)


@main.command(help="Create a new Web.")
@click.argument("name")
@click.option("--namespace", "-n", default=DEFAULT_NAMESPACE, show_default=True)
@click.option("--image", type=str, required=True, help="The container image serving the content.")
@click.option("--size", type=click.IntRange(MIN_SIZE, MAX_SIZE), default=None, help="Desired replica count.")
@click.option("--port", "container_port", type=int, default=None, help="Port the container exposes.")
@click.option("--html", "html", type=str, default=None, help="Inline HTML content.")
@click.option(
    "--html-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read the HTML content from a file.",
)
def create(
    name: str,
    namespace: str,
    image: str,
    size: Optional[int],
    container_port: Optional[int],
    html: Optional[str],
    html_file: Optional[Path],
) -> None:
    """Create a new Web."""
    console = Console()
    if html is not None and html_file is not None:
        raise click.UsageError("--html and --html-file are mutually exclusive.")
    content = html_file.read_text() if html_file else (html or "")

    web = Web(
        metadata=ObjectMeta(name=name, namespace=namespace),
        spec=WebSpec(
            size=size,
            container_port=container_port,
            image=image,
            html_content=content,
        ),
    )
    try:
        web.create()
    except KubeConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    except client.ApiException as exc:
        if exc.status == 409:
            raise click.ClickException(
                f"Web '{name}' already exists in namespace '{namespace}'."
            ) from exc
        raise
    console.print(f"Web [cyan]{name}[/cyan] created in namespace [cyan]{namespace}[/cyan].")


@main.command(name="list", help="List Webs.")
@click.option("--namespace", "-n", default=None, help="Namespace to list; all namespaces if omitted.")
def list_webs(namespace: Optional[str]) -> None:
    """List Webs."""
    console = Console()
    try:
        webs = Web.list(namespace=namespace)
    except KubeConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if not webs:
        console.print("No Webs found.")
        return

    table = Table(title="Webs")
    table.add_column("Name", style="cyan")
    table.add_column("Namespace")
    table.add_column("Image")
    table.add_column("Size")
    table.add_column("Port")
    for web in webs:
        table.add_row(
            web.metadata.name,
            web.metadata.namespace or "",
            web.spec.image or "",
            "" if web.spec.size is None else str(web.spec.size),
            "" if web.spec.container_port is None else str(web.spec.container_port),
        )
    console.print(table)


@main.command(help="Delete a Web.")
@click.argument("name")
@click.option("--namespace", "-n", default=DEFAULT_NAMESPACE, show_default=True)
def delete(name: str, namespace: str) -> None:
    """Delete a Web. Its ConfigMap and Deployment are garbage collected."""
    console = Console()
    web = Web(metadata=ObjectMeta(name=name, namespace=namespace), spec=WebSpec())
    try:
        web.delete()
    except KubeConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    except client.ApiException as exc:
        if exc.status == 404:
            raise click.ClickException(
                f"Web '{name}' not found in namespace '{namespace}'."
            ) from exc
        raise
    console.print(f"Web [cyan]{name}[/cyan] deleted.")
