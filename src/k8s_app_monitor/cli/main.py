"""Main CLI entry point using Typer."""

from __future__ import annotations

import signal
from pathlib import Path
from typing import Any

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

from k8s_app_monitor import __version__
from k8s_app_monitor.cli.errors import handle_config_error, handle_k8s_error
from k8s_app_monitor.core.config import load_config
from k8s_app_monitor.integrations.kubernetes import KubernetesClient, KubernetesError
from k8s_app_monitor.logging.config import configure_logging
from k8s_app_monitor.services.monitor import ExtraSection, MonitorController

app = typer.Typer(
    name="k8s-monitor",
    help="Live terminal dashboard for applications running in a Kubernetes namespace.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"k8s-monitor version {__version__}")
        raise typer.Exit()


@app.command()
def monitor(
    apps: list[str] | None = typer.Argument(
        None,
        metavar="[APP_NAME]...",
        help="Applications to monitor. [default: mlflow]",
        show_default=False,
    ),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Kubernetes namespace. [default: ml-ops]",
        show_default=False,
    ),
    refresh: int | None = typer.Option(
        None,
        "--refresh",
        "-r",
        min=1,
        help="Refresh interval in seconds. [default: 10]",
        show_default=False,
    ),
    extra: list[ExtraSection] | None = typer.Option(
        None,
        "--extra",
        "-x",
        help="Enable an optional section (repeatable).",
        case_sensitive=False,
    ),
    context: str | None = typer.Option(
        None,
        "--context",
        help="Kubeconfig context to use.",
    ),
    kubeconfig: Path | None = typer.Option(
        None,
        "--kubeconfig",
        help="Path to the kubeconfig file.",
    ),
    log_lines: int | None = typer.Option(
        None,
        "--log-lines",
        min=1,
        help="Log lines shown per pod. [default: 10]",
        show_default=False,
    ),
    events: int | None = typer.Option(
        None,
        "--events",
        min=1,
        help="Recent events shown per application. [default: 5]",
        show_default=False,
    ),
    once: bool = typer.Option(
        False,
        "--once",
        help="Render a single pass and exit.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        help="YAML config file. [default: ~/.config/k8s-monitor/config.yaml]",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging on stderr.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Monitor deployments, pods, services, events and logs of APP_NAMEs.

    Objects are matched by the label app=<name>, falling back to names
    starting with <name>-. Press Ctrl+C to stop.
    """
    configure_logging(verbose=verbose, debug=debug)

    cluster: dict[str, Any] = {
        "context": context,
        "kubeconfig": str(kubeconfig) if kubeconfig else None,
    }
    overrides: dict[str, Any] = {
        "namespace": namespace,
        "refresh_interval": refresh,
        "apps": list(apps) if apps else None,
        "log_tail_lines": log_lines,
        "event_limit": events,
        "extra_sections": list(extra) if extra else None,
        "cluster": cluster,
    }
    try:
        config = load_config(config_file, overrides)
    except (ValidationError, ValueError, OSError, yaml.YAMLError) as e:
        handle_config_error(e)

    try:
        client = KubernetesClient(config.cluster)
    except KubernetesError as e:
        handle_k8s_error(e)

    controller = MonitorController(
        client,
        config,
        console=console,
        max_passes=1 if once else None,
    )
    previous_handler = signal.signal(signal.SIGTERM, lambda signum, frame: controller.stop())
    try:
        controller.run()
    except KubernetesError as e:
        handle_k8s_error(e)
    finally:
        signal.signal(signal.SIGTERM, previous_handler)
        client.close()


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
