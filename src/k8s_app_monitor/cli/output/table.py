"""Dashboard table output.

A thin wrapper around Rich's Table so every section table looks the same:
bold headers, a cyan border, no outer edge, and cells that wrap instead of
being truncated when the terminal is narrow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from rich import box
from rich.table import Table as RichTable

from k8s_app_monitor.cli.output.theme import Colors

if TYPE_CHECKING:
    from rich.console import ConsoleRenderable, RichCast

OverflowMethod = Literal["fold", "crop", "ellipsis", "ignore"]


class Table(RichTable):
    """Rich Table with the dashboard's defaults.

    Columns use ``overflow="fold"`` unless told otherwise, so long pod names
    and event messages wrap onto a second line.

    Usage:
        from k8s_app_monitor.cli.output import Table

        table = Table()
        table.add_column("NAME")
        table.add_column("AGE", no_wrap=True)
        table.add_row("mlflow-7d9c", "3d")
    """

    def __init__(self, *headers: str, **kwargs: Any) -> None:
        kwargs.setdefault("box", box.SIMPLE_HEAD)
        kwargs.setdefault("header_style", Colors.HEADER)
        kwargs.setdefault("border_style", Colors.BORDER)
        kwargs.setdefault("show_edge", False)
        kwargs.setdefault("caption_style", "dim")
        kwargs.setdefault("caption_justify", "left")
        super().__init__(**kwargs)
        for header in headers:
            self.add_column(header)

    def add_column(
        self,
        header: ConsoleRenderable | RichCast | str = "",
        footer: ConsoleRenderable | RichCast | str = "",
        *,
        overflow: OverflowMethod = "fold",
        **kwargs: Any,
    ) -> None:
        """Add a column, wrapping overflowing text by default."""
        super().add_column(header, footer, overflow=overflow, **kwargs)
