import logging
from pathlib import Path
import typer
from rich.console import Console

from ..config import (
    CONFIG_FILE,
    SDK_URL_KEY,
    TARBALL_URL_KEY,
    VERSIONS_URL_KEY,
    load_endpoints,
    set_config_value,
)
from ..domain.errors import RuntimekitError
from ..domain.models import RUNTIMES
from ..layers.layer import Layer
from ..registry.http import HttpRegistry
from ..services.install import InstallService
from ..ui.progress import ProgressManager

app = typer.Typer()
console = Console()

CONFIG_KEYS = {
    "versions-url": VERSIONS_URL_KEY,
    "tarball-url": TARBALL_URL_KEY,
    "sdk-url": SDK_URL_KEY,
}

def get_install_service() -> InstallService:
    return InstallService(HttpRegistry(), load_endpoints(), ProgressManager(console))

def complete_runtime(incomplete: str):
    return [name for name in RUNTIMES if name.startswith(incomplete)]

@app.callback()
def main_callback(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")):
    """install language runtimes into layer directories."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

@app.command()
def install(
    runtime: str = typer.Argument(..., help="Runtime family, e.g. ruby", autocompletion=complete_runtime),
    layer_dir: Path = typer.Argument(...),
    version: str = typer.Option("", "--version", help="Exact version or constraint, e.g. 2.x.x or >=3.1"),
):
    """install a runtime tarball into LAYER_DIR."""
    service = get_install_service()
    layer = Layer.load(layer_dir)
    try:
        resolved = service.install_tarball(runtime, version, layer)
    except RuntimekitError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] {runtime} {resolved} in {layer.path}")

@app.command("install-sdk")
def install_sdk(
    version: str,
    layer_dir: Path,
    strip_components: int = typer.Option(0, "--strip-components", help="Leading path components to drop"),
):
    """install an sdk zip of VERSION into LAYER_DIR."""
    service = get_install_service()
    layer = Layer.load(layer_dir)
    try:
        service.install_sdk(version, layer, strip_components=strip_components)
    except RuntimekitError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] sdk {version} in {layer.path}")

@app.command()
def versions(runtime: str = typer.Argument(..., autocompletion=complete_runtime)):
    """list available versions of RUNTIME, highest first."""
    service = get_install_service()
    try:
        available = service.list_versions(runtime)
    except RuntimekitError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    if not available:
        console.print(f"[yellow]No versions listed for '{runtime}'.[/yellow]")
        return
    for v in available:
        console.print(v)

@app.command()
def config(key: str, value: str):
    """set an endpoint template: versions-url, tarball-url or sdk-url."""
    if key not in CONFIG_KEYS:
        console.print(f"[red]Unknown key '{key}'.[/red] Choose from: {', '.join(CONFIG_KEYS)}")
        raise typer.Exit(code=1)
    try:
        set_config_value(CONFIG_KEYS[key], value)
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] {key} saved to {CONFIG_FILE}")

if __name__ == "__main__":
    app()
