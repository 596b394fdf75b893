"""User-facing error reporting for the CLI."""

from __future__ import annotations

import typer
from rich.console import Console

from k8s_app_monitor.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    MonitorPreconditionError,
)

err_console = Console(stderr=True)

EXIT_FATAL = 1
EXIT_USAGE = 2


def handle_k8s_error(error: KubernetesError) -> None:
    """Print a Kubernetes error with a hint and exit.

    Args:
        error: The Kubernetes error to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, MonitorPreconditionError):
        err_console.print("[red]Error:[/red] Cannot start monitoring")
        err_console.print(f"  {error.message}")
        if error.namespace:
            err_console.print(
                f"\n[dim]Hint: Check the namespace with 'kubectl get namespace {error.namespace}'"
                " or pick another one with -n.[/dim]"
            )
        else:
            err_console.print(
                "\n[dim]Hint: Check that the cluster is reachable"
                " with 'kubectl cluster-info'.[/dim]"
            )

    elif isinstance(error, KubernetesConnectionError):
        err_console.print("[red]Error:[/red] Cannot connect to Kubernetes cluster")
        err_console.print(f"  {error.message}")
        if error.original_error:
            err_console.print(f"  Cause: {error.original_error}")
        err_console.print(
            "\n[dim]Hint: Check that your kubeconfig is valid and the cluster is reachable.[/dim]"
        )

    elif isinstance(error, KubernetesAuthError):
        err_console.print("[red]Error:[/red] Authentication/authorization failed")
        err_console.print(f"  {error.message}")
        err_console.print(
            "\n[dim]Hint: The monitor needs get/list on pods, pods/log, services, events"
            " and deployments.[/dim]"
        )

    elif isinstance(error, KubernetesNotFoundError):
        err_console.print("[red]Error:[/red] Resource not found")
        err_console.print(f"  {error.message}")

    elif isinstance(error, KubernetesTimeoutError):
        err_console.print("[red]Error:[/red] Operation timed out")
        err_console.print(f"  {error.message}")
        err_console.print(
            "\n[dim]Hint: Try increasing the timeout with K8S_MONITOR_TIMEOUT"
            " or cluster.request_timeout in the config file.[/dim]"
        )

    else:
        err_console.print(f"[red]Error:[/red] {error.message}")
        if error.status_code:
            err_console.print(f"  HTTP Status: {error.status_code}")

    raise typer.Exit(EXIT_FATAL)


def handle_config_error(error: Exception) -> None:
    """Report an invalid configuration as a usage error.

    Raises:
        typer.Exit: Always exits with code 2.
    """
    err_console.print("[red]Error:[/red] Invalid configuration")
    for line in str(error).splitlines():
        err_console.print(f"  {line}", markup=False)
    raise typer.Exit(EXIT_USAGE)
