"""Console output helpers for the dashboard."""

from k8s_app_monitor.cli.output.table import Table
from k8s_app_monitor.cli.output.theme import Colors

__all__ = ["Colors", "Table"]
