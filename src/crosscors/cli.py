"""
This module defines the command-line interface (CLI) for crosscors.

It uses the `click` library to provide commands for checking how a CORS
configuration treats a given request, inspecting the effective configuration,
and running the demo server.
"""

import asyncio
import json
import os
import sys

import click
from rich.console import Console
from rich.table import Table

from .config import CorsConfig
from .decision import CorsResponse, DecisionState, evaluate
from .my_logging import setup_debug_logging
from .origin import CorsConfigError

# Initialize Rich console for pretty output
console = Console()


class SimulatedRequest:
    """A request view assembled from command-line options."""

    def __init__(self, method: str, headers: dict[str, str]):
        self.method = method
        self.headers = headers


def _load_config(config_path: str | None) -> CorsConfig:
    try:
        return CorsConfig.load(config_path)
    except CorsConfigError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        sys.exit(2)


@click.group()
@click.version_option(package_name="crosscors")
def main() -> None:
    """crosscors - request-time CORS decisions."""
    setup_debug_logging()


@main.command()
@click.option("--origin", "-o", default=None, help="Origin header of the simulated request")
@click.option("--method", "-m", default="GET", help="HTTP method of the simulated request")
@click.option("--request-headers", "-H", default=None, help="Access-Control-Request-Headers value")
@click.option("--config", "-c", "config_path", default=None, type=click.Path(dir_okay=False), help="JSON configuration file")
def check(origin: str | None, method: str, request_headers: str | None, config_path: str | None) -> None:
    """Show how the configuration decides a request."""
    config = _load_config(config_path)

    headers: dict[str, str] = {}
    if origin:
        headers["Origin"] = origin
    if request_headers:
        headers["Access-Control-Request-Headers"] = request_headers

    response = CorsResponse()
    state = asyncio.run(evaluate(config, SimulatedRequest(method, headers), response))

    if state is DecisionState.DENIED:
        console.print(f"[red]✗ {state.value}[/red] origin={origin!r} method={method.upper()}")
        console.print("[dim]No CORS headers would be set[/dim]")
        sys.exit(1)

    console.print(f"[green]✓ {state.value}[/green] origin={origin!r} method={method.upper()}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Header", style="cyan")
    table.add_column("Value")
    for name, value in response.headers.items():
        table.add_row(name, value)
    console.print(table)

    if response.ended:
        console.print(f"[dim]Preflight answered with status {response.status_code} and an empty body[/dim]")


@main.command("show-config")
@click.option("--config", "-c", "config_path", default=None, type=click.Path(dir_okay=False), help="JSON configuration file")
def show_config(config_path: str | None) -> None:
    """Print the effective configuration as JSON."""
    config = _load_config(config_path)
    click.echo(json.dumps(config.to_dict(), indent=2))


@main.command()
@click.option("--host", default="localhost", help="Host to bind server")
@click.option("--port", default=8080, type=int, help="Port to bind server")
@click.option("--config", "-c", "config_path", default=None, type=click.Path(dir_okay=False), help="JSON configuration file")
def serve(host: str, port: int, config_path: str | None) -> None:
    """Start the crosscors demo HTTP server."""
    import uvicorn

    from .server.app import CONFIG_ENV_VAR

    if config_path:
        os.environ[CONFIG_ENV_VAR] = config_path

    console.print(f"[green]Starting crosscors demo server at http://{host}:{port}[/green]")
    console.print(f"[dim]• Try: curl -i -H 'Origin: https://example.com' http://{host}:{port}/api/v1/echo[/dim]")
    console.print(f"[dim]• API documentation available at http://{host}:{port}/docs[/dim]")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]\n")

    try:
        uvicorn.run("crosscors.server.app:create_app", factory=True, host=host, port=port, log_level="info")
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")


if __name__ == "__main__":
    main()
